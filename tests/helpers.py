"""Helpers that read the database through a fresh session."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from label_ledger.services.labels.batch_ledger import BatchLedger
from label_ledger.services.labels.sequence_store import SequenceStore


async def counter_values(session_maker: async_sessionmaker[AsyncSession]) -> dict[str, int]:
    """Counters as seen by a brand new session."""
    async with session_maker() as s:
        return {c.process_type: c.last_number for c in await SequenceStore(s).list_all()}


async def batch_count(session_maker: async_sessionmaker[AsyncSession]) -> int:
    async with session_maker() as s:
        _, total = await BatchLedger(s).list(page=1, page_size=1)
        return total
