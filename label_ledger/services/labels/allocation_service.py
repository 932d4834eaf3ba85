"""Label allocation service.

Ties the sequence store and the batch ledger together. Every mutating
operation runs as one transaction: either all of its writes commit or the
session is rolled back and neither table changes.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from label_ledger.config import settings
from label_ledger.models.batch import Batch
from label_ledger.models.enums import BatchDeletePolicy, LabelMode, ProcessType
from label_ledger.models.sequence import SequenceCounter
from label_ledger.services.exceptions import StorageFailure
from label_ledger.services.labels.batch_ledger import BatchLedger
from label_ledger.services.labels.code_formatter import CodeFormatter
from label_ledger.services.labels.exceptions import (
    InvalidMode,
    InvalidPage,
    InvalidSupplier,
    QuantityOutOfRange,
    SequenceExhausted,
    UnknownProcessType,
)
from label_ledger.services.labels.sequence_store import SequenceStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AllocationResult:
    """Codes issued by one allocate() call."""

    batch_id: int
    process_type: ProcessType
    mode: LabelMode
    codes: list[str]
    start_code: str
    end_code: str
    start_number: int
    end_number: int


@dataclass(frozen=True)
class BatchWithCodes:
    """A ledger row plus its code list regenerated from the numeric range."""

    batch: Batch
    codes: list[str]


@dataclass(frozen=True)
class HistoryPage:
    batches: list[Batch]
    total: int
    page: int
    page_size: int


class LabelAllocationService:
    """Issues label codes and manages counters and batch history.

    Note: This service owns the transaction boundary. SequenceStore and
    BatchLedger only flush; commit and rollback happen here.
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        formatter: CodeFormatter | None = None,
        max_quantity: int | None = None,
        delete_policy: BatchDeletePolicy | None = None,
    ):
        self.session = session
        self.sequences = SequenceStore(session)
        self.ledger = BatchLedger(session)
        self.formatter = formatter or CodeFormatter.from_settings()
        self.max_quantity = settings.max_batch_quantity if max_quantity is None else max_quantity
        self.delete_policy = settings.batch_delete_policy if delete_policy is None else delete_policy

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[None]:
        """Commit on success, roll back on any error.

        SQLAlchemy errors surface as StorageFailure. Anything else is
        re-raised unchanged.
        """
        try:
            yield
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Storage failure, transaction rolled back", operation=operation, error=str(e))
            raise StorageFailure(f"{operation} failed: {e}") from e
        except BaseException:
            await self.session.rollback()
            raise

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_process_type(process_type: ProcessType | str) -> ProcessType:
        try:
            return ProcessType(process_type)
        except ValueError:
            raise UnknownProcessType(str(process_type)) from None

    @staticmethod
    def _validate_supplier(supplier: object) -> str:
        if not isinstance(supplier, str) or not supplier.strip():
            raise InvalidSupplier("Supplier must be a non-empty name")
        return supplier.strip()

    def _validate_quantity(self, quantity: object) -> int:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise QuantityOutOfRange(f"Quantity must be an integer, got {quantity!r}")
        if not 1 <= quantity <= self.max_quantity:
            raise QuantityOutOfRange(f"Quantity must be between 1 and {self.max_quantity}, got {quantity}")
        return quantity

    @staticmethod
    def _validate_mode(mode: LabelMode | str) -> LabelMode:
        try:
            return LabelMode(mode)
        except ValueError:
            raise InvalidMode(f"Unknown mode: {mode}") from None

    # ------------------------------------------------------------------
    # Allocation
    # ------------------------------------------------------------------

    async def allocate(
        self,
        process_type: ProcessType | str,
        supplier: str,
        quantity: int,
        mode: LabelMode | str,
    ) -> AllocationResult:
        """Reserve the next number range for a process type and record it as a batch.

        Consecutive mode issues ``quantity`` distinct numbers; identical mode
        issues one number repeated ``quantity`` times. The counter advance and
        the ledger insert commit together or not at all.
        """
        pt = self._validate_process_type(process_type)
        supplier = self._validate_supplier(supplier)
        quantity = self._validate_quantity(quantity)
        label_mode = self._validate_mode(mode)
        numbers_needed = quantity if label_mode == LabelMode.CONSECUTIVE else 1

        async with self._transaction("allocate"):
            previous, end_number = await self.sequences.advance(pt, numbers_needed)
            start_number = previous + 1
            if end_number > self.formatter.max_number:
                raise SequenceExhausted(
                    f"{pt.value}: numbers {start_number}..{end_number} exceed {self.formatter.max_number}"
                )

            codes = self.formatter.expand(pt, start_number, end_number, label_mode, quantity)
            batch = await self.ledger.insert(
                supplier=supplier,
                process_type=pt,
                start_code=codes[0],
                end_code=codes[-1],
                quantity=quantity,
                mode=label_mode,
                start_number=start_number,
                end_number=end_number,
            )
            assert batch.id is not None

        logger.info(
            "Allocated labels",
            batch_id=batch.id,
            process_type=pt.value,
            mode=label_mode.value,
            quantity=quantity,
            start_number=start_number,
            end_number=end_number,
        )
        return AllocationResult(
            batch_id=batch.id,
            process_type=pt,
            mode=label_mode,
            codes=codes,
            start_code=batch.start_code,
            end_code=batch.end_code,
            start_number=start_number,
            end_number=end_number,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_sequences(self) -> list[SequenceCounter]:
        return await self.sequences.list_all()

    async def list_history(
        self,
        *,
        page: int = 1,
        page_size: int | None = None,
        process_type: ProcessType | str | None = None,
        supplier: str | None = None,
    ) -> HistoryPage:
        """One page of batch history, newest first."""
        if page_size is None:
            page_size = settings.history_page_size
        if page < 1:
            raise InvalidPage(f"Page must be >= 1, got {page}")
        if not 1 <= page_size <= settings.history_max_page_size:
            raise InvalidPage(f"Page size must be between 1 and {settings.history_max_page_size}, got {page_size}")
        pt = self._validate_process_type(process_type) if process_type is not None else None

        batches, total = await self.ledger.list(
            page=page,
            page_size=page_size,
            process_type=pt,
            supplier=supplier.strip() if supplier else None,
        )
        return HistoryPage(batches=batches, total=total, page=page, page_size=page_size)

    async def get_batch(self, batch_id: int) -> BatchWithCodes:
        """Get a batch with its codes regenerated from the stored numeric range."""
        batch = await self.ledger.get(batch_id)
        codes = self.formatter.expand(
            batch.process_type,
            batch.start_number,
            batch.end_number,
            batch.mode,
            batch.quantity,
        )
        return BatchWithCodes(batch=batch, codes=codes)

    # ------------------------------------------------------------------
    # Administrative operations
    # ------------------------------------------------------------------

    async def delete_batch(self, batch_id: int) -> SequenceCounter:
        """Delete a batch and apply the delete policy to its counter.

        With RECOMPUTE the counter becomes the highest end_number among the
        remaining batches of that type (0 if none), inside the same
        transaction as the delete. With RETAIN the counter is left as is.
        Returns the counter after the operation.
        """
        async with self._transaction("delete_batch"):
            batch = await self.ledger.delete(batch_id)
            pt = self._validate_process_type(batch.process_type)
            if self.delete_policy == BatchDeletePolicy.RECOMPUTE:
                await self.sequences.set(pt, await self.ledger.max_end_number(pt))
            counter = await self.sequences.get(pt)

        await self.session.refresh(counter)
        logger.info(
            "Deleted batch",
            batch_id=batch_id,
            process_type=pt.value,
            policy=self.delete_policy.value,
            last_number=counter.last_number,
        )
        return counter

    async def clear_history(self) -> int:
        """Delete every batch. Counters keep their values. Returns rows deleted."""
        async with self._transaction("clear_history"):
            deleted = await self.ledger.clear()
        logger.info("Cleared batch history", deleted=deleted)
        return deleted

    async def reset_sequence(self, process_type: ProcessType | str) -> SequenceCounter:
        """Set one counter to 0. Batch history is not touched."""
        pt = self._validate_process_type(process_type)
        async with self._transaction("reset_sequence"):
            await self.sequences.set(pt, 0)
            counter = await self.sequences.get(pt)
        await self.session.refresh(counter)
        logger.warning("Sequence reset", process_type=pt.value)
        return counter

    async def reset_all_sequences(self) -> int:
        """Set every counter to 0. Returns the number of counters reset."""
        async with self._transaction("reset_all_sequences"):
            reset = await self.sequences.set_all(0)
        logger.warning("All sequences reset", count=reset)
        return reset
