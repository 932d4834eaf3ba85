"""Sequence store: durable counter per process type.

Methods flush but never commit. The caller owns the transaction, so an
allocation can advance a counter and insert its batch as one unit.
"""

from datetime import UTC, datetime

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from label_ledger.models.enums import ProcessType
from label_ledger.models.sequence import SequenceCounter
from label_ledger.services.labels.exceptions import UnknownProcessType

logger = structlog.get_logger(__name__)


def _known_type(process_type: ProcessType | str) -> ProcessType:
    try:
        return ProcessType(process_type)
    except ValueError:
        raise UnknownProcessType(str(process_type)) from None


class SequenceStore:
    """Counter rows in the ``sequences`` table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, process_type: ProcessType | str) -> SequenceCounter:
        """Get the counter for a process type. Unknown types never default to 0."""
        pt = _known_type(process_type)
        result = await self.session.execute(select(SequenceCounter).where(SequenceCounter.process_type == pt.value))
        counter = result.scalars().first()
        if counter is None:
            raise UnknownProcessType(pt.value)
        return counter

    async def set(self, process_type: ProcessType | str, last_number: int) -> None:
        """Overwrite a counter with a single-row UPDATE."""
        pt = _known_type(process_type)
        if last_number < 0:
            raise ValueError(f"last_number must be non-negative, got {last_number}")
        stmt = (
            update(SequenceCounter)
            .where(SequenceCounter.process_type == pt.value)  # type: ignore[arg-type]
            .values(last_number=last_number, updated_at=datetime.now(UTC))
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise UnknownProcessType(pt.value)
        logger.debug("Sequence set", process_type=pt.value, last_number=last_number)

    async def set_all(self, last_number: int) -> int:
        """Overwrite every counter. Returns the number of rows updated."""
        if last_number < 0:
            raise ValueError(f"last_number must be non-negative, got {last_number}")
        stmt = update(SequenceCounter).values(last_number=last_number, updated_at=datetime.now(UTC))
        result = await self.session.execute(stmt)
        return int(result.rowcount)  # type: ignore[attr-defined]

    async def advance(self, process_type: ProcessType | str, count: int) -> tuple[int, int]:
        """Atomically add ``count`` to a counter.

        Read and write happen in one UPDATE ... RETURNING, which takes the
        write lock before reading, so two transactions can never start from
        the same value. Returns (previous, new) last_number.
        """
        pt = _known_type(process_type)
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")
        stmt = (
            update(SequenceCounter)
            .where(SequenceCounter.process_type == pt.value)  # type: ignore[arg-type]
            .values(
                last_number=SequenceCounter.last_number + count,
                updated_at=datetime.now(UTC),
            )
            .returning(SequenceCounter.last_number)  # type: ignore[arg-type]
        )
        result = await self.session.execute(stmt)
        new_value = result.scalar_one_or_none()
        if new_value is None:
            raise UnknownProcessType(pt.value)
        return new_value - count, new_value

    async def list_all(self) -> list[SequenceCounter]:
        """All counters ordered by process type."""
        result = await self.session.execute(select(SequenceCounter).order_by(SequenceCounter.process_type))
        return list(result.scalars().all())
