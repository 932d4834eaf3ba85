"""Point-in-time database backups."""

from datetime import date
from pathlib import Path

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from label_ledger.services.exceptions import StorageFailure

logger = structlog.get_logger(__name__)


def default_backup_name(today: date | None = None) -> str:
    """File name suggested for a backup taken today."""
    return f"palm-labels-backup-{(today or date.today()).isoformat()}.db"


class BackupService:
    """Copies the SQLite database with VACUUM INTO.

    VACUUM INTO reads inside a single read transaction, so the copy is one
    consistent snapshot even while allocations are committing.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def backup_to(self, destination: str | Path) -> Path:
        """Write a snapshot to ``destination``, replacing an existing file."""
        if self.engine.dialect.name != "sqlite":
            raise StorageFailure(f"Backup is only supported for SQLite, not {self.engine.dialect.name}")

        target = Path(destination).expanduser().resolve()
        target.parent.mkdir(parents=True, exist_ok=True)
        # VACUUM INTO refuses to overwrite, so write next to the target and swap in
        partial = target.with_name(f".{target.name}.partial")
        partial.unlink(missing_ok=True)

        try:
            # VACUUM cannot run inside a transaction
            async with self.engine.connect() as conn:
                autocommit = await conn.execution_options(isolation_level="AUTOCOMMIT")
                await autocommit.execute(text("VACUUM INTO :path"), {"path": str(partial)})
        except SQLAlchemyError as e:
            partial.unlink(missing_ok=True)
            logger.error("Backup failed", destination=str(target), error=str(e))
            raise StorageFailure(f"Backup to {target} failed: {e}") from e

        partial.replace(target)

        logger.info("Database backed up", destination=str(target), size=target.stat().st_size)
        return target
