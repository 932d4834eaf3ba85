"""Sequence and batch API endpoints."""

import structlog
from fastapi import APIRouter, HTTPException, Query

from label_ledger.api.v1.dependencies import AllocationServiceDep
from label_ledger.api.v1.labels.schemas import (
    AllocateRequest,
    AllocationResponse,
    BatchDetailResponse,
    BatchListResponse,
    ClearHistoryResponse,
    ResetAllResponse,
    SequenceListResponse,
    SequenceResponse,
)
from label_ledger.services.exceptions import NotFoundError, StorageFailure, ValidationError

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["labels"])


@router.get("/sequences", response_model=SequenceListResponse, operation_id="listSequences")
async def list_sequences(service: AllocationServiceDep) -> SequenceListResponse:
    """Current counter of every process type."""
    counters = await service.list_sequences()
    return SequenceListResponse(sequences=[SequenceResponse.from_model(c) for c in counters])


@router.post("/sequences/reset", response_model=ResetAllResponse, operation_id="resetAllSequences")
async def reset_all_sequences(service: AllocationServiceDep) -> ResetAllResponse:
    """Set every counter to 0. Batch history is kept."""
    try:
        reset = await service.reset_all_sequences()
    except StorageFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
    return ResetAllResponse(reset=reset)


@router.post("/sequences/{process_type}/reset", response_model=SequenceResponse, operation_id="resetSequence")
async def reset_sequence(process_type: str, service: AllocationServiceDep) -> SequenceResponse:
    """Set one counter to 0. Batch history is kept."""
    try:
        counter = await service.reset_sequence(process_type)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
    return SequenceResponse.from_model(counter)


@router.post("/batches", response_model=AllocationResponse, status_code=201, operation_id="allocateLabels")
async def allocate_labels(body: AllocateRequest, service: AllocationServiceDep) -> AllocationResponse:
    """Issue the next codes for a process type and record the batch."""
    try:
        result = await service.allocate(body.process_type, body.supplier, body.quantity, body.mode)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
    return AllocationResponse.from_result(result)


@router.get("/batches", response_model=BatchListResponse, operation_id="listBatches")
async def list_batches(
    service: AllocationServiceDep,
    page: int = Query(default=1),
    page_size: int | None = Query(default=None),
    process_type: str | None = None,
    supplier: str | None = None,
) -> BatchListResponse:
    """Batch history, newest first."""
    try:
        history = await service.list_history(
            page=page,
            page_size=page_size,
            process_type=process_type,
            supplier=supplier,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return BatchListResponse.from_page(history)


@router.get("/batches/{batch_id}", response_model=BatchDetailResponse, operation_id="getBatch")
async def get_batch(batch_id: int, service: AllocationServiceDep) -> BatchDetailResponse:
    """Get a batch with its full code list for reprinting."""
    try:
        item = await service.get_batch(batch_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return BatchDetailResponse.from_batch_with_codes(item)


@router.delete("/batches/{batch_id}", response_model=SequenceResponse, operation_id="deleteBatch")
async def delete_batch(batch_id: int, service: AllocationServiceDep) -> SequenceResponse:
    """Delete a batch. Returns its process type's counter after the delete policy ran."""
    try:
        counter = await service.delete_batch(batch_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
    return SequenceResponse.from_model(counter)


@router.delete("/batches", response_model=ClearHistoryResponse, operation_id="clearHistory")
async def clear_history(service: AllocationServiceDep) -> ClearHistoryResponse:
    """Delete all batch history. Counters are kept."""
    try:
        deleted = await service.clear_history()
    except StorageFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
    return ClearHistoryResponse(deleted=deleted)
