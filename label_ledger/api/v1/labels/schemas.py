"""API schemas for sequence and batch endpoints."""

from datetime import datetime

from pydantic import BaseModel, field_serializer

from label_ledger.models.batch import Batch
from label_ledger.models.enums import PROCESS_TYPE_DISPLAY, LabelMode, ProcessType
from label_ledger.models.sequence import SequenceCounter
from label_ledger.services.labels.allocation_service import AllocationResult, BatchWithCodes, HistoryPage
from label_ledger.utils.datetime_utils import to_api_timezone


def _process_type_display(value: str) -> str | None:
    try:
        return PROCESS_TYPE_DISPLAY[ProcessType(value)]
    except ValueError:
        return None


# =============================================================================
# Request Schemas
# =============================================================================


class AllocateRequest(BaseModel):
    """Request a batch of label codes.

    The service validates process_type and quantity and reports its own errors.
    """

    process_type: str
    supplier: str
    quantity: int
    mode: LabelMode = LabelMode.CONSECUTIVE


# =============================================================================
# Response Schemas
# =============================================================================


class SequenceResponse(BaseModel):
    """Counter of one process type."""

    process_type: str
    display_name: str | None
    last_number: int
    next_number: int
    updated_at: datetime

    @field_serializer("updated_at")
    def serialize_updated_at(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        localized_dt = to_api_timezone(dt)
        assert localized_dt is not None
        return localized_dt.isoformat()

    @classmethod
    def from_model(cls, counter: SequenceCounter) -> "SequenceResponse":
        return cls(
            process_type=counter.process_type,
            display_name=_process_type_display(counter.process_type),
            last_number=counter.last_number,
            next_number=counter.last_number + 1,
            updated_at=counter.updated_at,
        )


class SequenceListResponse(BaseModel):
    sequences: list[SequenceResponse]


class ResetAllResponse(BaseModel):
    reset: int


class AllocationResponse(BaseModel):
    """Codes issued by an allocation, in print order."""

    batch_id: int
    process_type: ProcessType
    mode: LabelMode
    codes: list[str]
    start_code: str
    end_code: str
    start_number: int
    end_number: int

    @classmethod
    def from_result(cls, result: AllocationResult) -> "AllocationResponse":
        return cls(
            batch_id=result.batch_id,
            process_type=result.process_type,
            mode=result.mode,
            codes=result.codes,
            start_code=result.start_code,
            end_code=result.end_code,
            start_number=result.start_number,
            end_number=result.end_number,
        )


class BatchResponse(BaseModel):
    """Batch response schema for the history list."""

    id: int
    supplier: str
    process_type: str
    display_name: str | None
    start_code: str
    end_code: str
    quantity: int
    mode: LabelMode
    start_number: int
    end_number: int
    created_at: datetime

    @field_serializer("created_at")
    def serialize_created_at(self, dt: datetime) -> str:
        """Serialize datetime to API timezone."""
        localized_dt = to_api_timezone(dt)
        assert localized_dt is not None
        return localized_dt.isoformat()

    @classmethod
    def from_model(cls, batch: Batch) -> "BatchResponse":
        return cls(
            id=batch.id,  # type: ignore[arg-type]
            supplier=batch.supplier,
            process_type=batch.process_type,
            display_name=_process_type_display(batch.process_type),
            start_code=batch.start_code,
            end_code=batch.end_code,
            quantity=batch.quantity,
            mode=batch.mode,
            start_number=batch.start_number,
            end_number=batch.end_number,
            created_at=batch.created_at,
        )


class BatchDetailResponse(BatchResponse):
    """Batch with every code, for reprint and export."""

    codes: list[str]

    @classmethod
    def from_batch_with_codes(cls, item: BatchWithCodes) -> "BatchDetailResponse":
        return cls(**dict(BatchResponse.from_model(item.batch)), codes=item.codes)


class BatchListResponse(BaseModel):
    batches: list[BatchResponse]
    total: int
    page: int
    page_size: int

    @classmethod
    def from_page(cls, history: HistoryPage) -> "BatchListResponse":
        return cls(
            batches=[BatchResponse.from_model(b) for b in history.batches],
            total=history.total,
            page=history.page,
            page_size=history.page_size,
        )


class ClearHistoryResponse(BaseModel):
    deleted: int
