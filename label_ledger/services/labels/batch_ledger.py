"""Batch ledger: history of allocation events.

Like SequenceStore, methods flush but leave commit to the caller.
"""

import structlog
from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from label_ledger.models.batch import Batch
from label_ledger.models.enums import LabelMode, ProcessType
from label_ledger.services.labels.exceptions import BatchNotFound

logger = structlog.get_logger(__name__)


class BatchLedger:
    """Rows in the ``batches`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(
        self,
        *,
        supplier: str,
        process_type: ProcessType,
        start_code: str,
        end_code: str,
        quantity: int,
        mode: LabelMode,
        start_number: int,
        end_number: int,
    ) -> Batch:
        """Insert a batch; id and created_at are assigned here."""
        batch = Batch(
            supplier=supplier,
            process_type=process_type.value,
            start_code=start_code,
            end_code=end_code,
            quantity=quantity,
            mode=mode,
            start_number=start_number,
            end_number=end_number,
        )
        self.session.add(batch)
        await self.session.flush()
        return batch

    async def get(self, batch_id: int) -> Batch:
        batch = await self.session.get(Batch, batch_id)
        if batch is None:
            raise BatchNotFound(batch_id)
        return batch

    async def list(
        self,
        *,
        page: int,
        page_size: int,
        process_type: ProcessType | None = None,
        supplier: str | None = None,
    ) -> tuple[list[Batch], int]:
        """List batches newest first. Returns (batches, total_count).

        ``page`` is 1-indexed. A page past the end yields an empty list.
        """
        filters = []
        if process_type is not None:
            filters.append(col(Batch.process_type) == process_type.value)
        if supplier:
            filters.append(func.lower(col(Batch.supplier)).contains(supplier.lower(), autoescape=True))

        batches_statement = (
            select(Batch)
            .where(*filters)
            .order_by(col(Batch.created_at).desc(), col(Batch.id).desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        batches_result = await self.session.execute(batches_statement)
        batches = list(batches_result.scalars().all())

        count_statement = select(func.count()).select_from(Batch).where(*filters)
        count_result = await self.session.execute(count_statement)
        total = count_result.scalar() or 0

        return batches, total

    async def delete(self, batch_id: int) -> Batch:
        """Delete a batch and return the removed row."""
        batch = await self.get(batch_id)
        await self.session.delete(batch)
        await self.session.flush()
        return batch

    async def clear(self) -> int:
        """Delete every batch. Counters are not touched. Returns rows deleted."""
        result = await self.session.execute(delete(Batch))
        return int(result.rowcount)  # type: ignore[attr-defined]

    async def max_end_number(self, process_type: ProcessType) -> int:
        """Highest end_number still recorded for a process type, or 0."""
        stmt = select(func.coalesce(func.max(Batch.end_number), 0)).where(
            col(Batch.process_type) == process_type.value
        )
        result = await self.session.execute(stmt)
        value: int = result.scalar_one()
        return value
