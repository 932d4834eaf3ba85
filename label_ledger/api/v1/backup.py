"""Database backup endpoint."""

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from label_ledger.api.v1.dependencies import BackupServiceDep
from label_ledger.services.backup_service import default_backup_name
from label_ledger.services.exceptions import StorageFailure

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["backup"])


class BackupRequest(BaseModel):
    """Where to write the copy. Defaults to a dated file in the working directory."""

    destination: str | None = None


class BackupResponse(BaseModel):
    path: str


@router.post("/backup", response_model=BackupResponse, operation_id="backupDatabase")
async def backup_database(body: BackupRequest, service: BackupServiceDep) -> BackupResponse:
    """Write a consistent snapshot of the database to a file."""
    destination = body.destination or default_backup_name()
    try:
        path = await service.backup_to(destination)
    except StorageFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
    except OSError as e:
        logger.error("Backup destination not writable", destination=destination, error=str(e))
        raise HTTPException(status_code=400, detail=f"Cannot write backup to {destination}: {e}")
    return BackupResponse(path=str(path))
