"""FastAPI dependencies for service injection."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from label_ledger.db import engine, get_session
from label_ledger.services.backup_service import BackupService
from label_ledger.services.labels.allocation_service import LabelAllocationService
from label_ledger.services.settings_service import SettingsService


async def get_allocation_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> LabelAllocationService:
    """Get a LabelAllocationService instance with the current session."""
    return LabelAllocationService(session)


async def get_settings_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SettingsService:
    """Get a SettingsService instance with the current session."""
    return SettingsService(session)


def get_engine() -> AsyncEngine:
    """Engine the backup reads from."""
    return engine


def get_backup_service(bind: Annotated[AsyncEngine, Depends(get_engine)]) -> BackupService:
    """Get a BackupService instance."""
    return BackupService(bind)


# Type aliases for cleaner endpoint signatures
AllocationServiceDep = Annotated[LabelAllocationService, Depends(get_allocation_service)]
SettingsServiceDep = Annotated[SettingsService, Depends(get_settings_service)]
BackupServiceDep = Annotated[BackupService, Depends(get_backup_service)]
