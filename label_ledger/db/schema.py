"""Schema creation and idempotent seeding."""

from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlmodel import SQLModel

from label_ledger.models import ProcessType, SequenceCounter, Setting
from label_ledger.services.settings_service import DEFAULT_LABEL_SETTINGS

logger = structlog.get_logger(__name__)


def _insert_ignore(conn: AsyncConnection, table: Any) -> Any:
    """INSERT ... ON CONFLICT DO NOTHING for the connection's dialect."""
    dialect = conn.dialect.name
    if dialect == "sqlite":
        return sqlite.insert(table).on_conflict_do_nothing()
    if dialect == "postgresql":
        return postgresql.insert(table).on_conflict_do_nothing()
    raise NotImplementedError(f"Seeding is not supported for dialect {dialect!r}")


async def init_db(engine: AsyncEngine) -> None:
    """Create tables and seed counters and default settings.

    Seeding only inserts missing rows, so running it on every startup never
    resets an existing counter or overwrites a saved setting.
    """
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

        now = datetime.now(UTC)
        counters = [{"process_type": pt.value, "last_number": 0, "updated_at": now} for pt in ProcessType]
        await conn.execute(_insert_ignore(conn, SequenceCounter.__table__), counters)  # type: ignore[attr-defined]

        defaults = [{"key": key, "value": value} for key, value in DEFAULT_LABEL_SETTINGS.to_storage().items()]
        await conn.execute(_insert_ignore(conn, Setting.__table__), defaults)  # type: ignore[attr-defined]

    logger.info("Database initialized", process_types=[pt.value for pt in ProcessType])
