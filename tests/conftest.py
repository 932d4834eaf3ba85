"""Shared fixtures: a fresh SQLite database per test."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from label_ledger.db import build_engine, build_session_maker, init_db
from label_ledger.models import BatchDeletePolicy
from label_ledger.services.labels.allocation_service import LabelAllocationService
from label_ledger.services.labels.code_formatter import CodeFormatter


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'labels.db'}", timeout=30.0)
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_maker() as s:
        yield s


@pytest.fixture
def formatter() -> CodeFormatter:
    return CodeFormatter(prefix="PALM", width=6)


@pytest.fixture
def service(session: AsyncSession, formatter: CodeFormatter) -> LabelAllocationService:
    return LabelAllocationService(
        session,
        formatter=formatter,
        max_quantity=1000,
        delete_policy=BatchDeletePolicy.RECOMPUTE,
    )
