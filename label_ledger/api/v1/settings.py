"""Label settings endpoints."""

from typing import Any

from fastapi import APIRouter, Body, HTTPException

from label_ledger.api.v1.dependencies import SettingsServiceDep
from label_ledger.services.exceptions import StorageFailure, ValidationError
from label_ledger.services.settings_service import LabelSettings

router = APIRouter(tags=["settings"])


@router.get("/settings", response_model=LabelSettings, operation_id="getSettings")
async def get_settings(service: SettingsServiceDep) -> LabelSettings:
    """Label dimensions and display preferences."""
    return await service.get()


@router.put("/settings", response_model=LabelSettings, operation_id="saveSettings")
async def save_settings(
    service: SettingsServiceDep,
    update: dict[str, Any] = Body(...),
) -> LabelSettings:
    """Save some or all settings. Unknown keys are rejected."""
    try:
        return await service.save(update)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageFailure as e:
        raise HTTPException(status_code=503, detail=str(e))
