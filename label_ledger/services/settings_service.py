"""Label settings stored as key/value rows.

The ``settings`` table holds plain strings. This module is the boundary that
turns them into a typed, validated structure for the rendering side.
"""

from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from label_ledger.models.setting import Setting
from label_ledger.services.exceptions import StorageFailure, ValidationError

logger = structlog.get_logger(__name__)


class LabelSettings(BaseModel):
    """Physical label layout and display preferences."""

    model_config = ConfigDict(extra="ignore")

    label_width: float = Field(default=60, gt=0, le=500)  # mm
    label_height: float = Field(default=40, gt=0, le=500)  # mm
    label_font_size: float = Field(default=10, gt=0, le=200)  # pt
    dark_mode: bool = False

    def to_storage(self) -> dict[str, str]:
        """Serialize every field to the string form kept in the table."""
        stored: dict[str, str] = {}
        for key, value in self.model_dump().items():
            if isinstance(value, bool):
                stored[key] = "true" if value else "false"
            elif isinstance(value, float) and value.is_integer():
                stored[key] = str(int(value))
            else:
                stored[key] = str(value)
        return stored


DEFAULT_LABEL_SETTINGS = LabelSettings()


class SettingsService:
    """Read and update label settings."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self) -> LabelSettings:
        """Typed settings. Missing keys take defaults, unknown keys are ignored."""
        result = await self.session.execute(select(Setting))
        raw = {row.key: row.value for row in result.scalars().all()}
        try:
            return LabelSettings.model_validate(raw)
        except PydanticValidationError:
            # A hand-edited row should not make the app unusable
            logger.warning("Stored label settings invalid, using defaults", stored=raw)
            return LabelSettings()

    async def save(self, update: dict[str, Any]) -> LabelSettings:
        """Validate a partial update and upsert the given keys in one transaction."""
        unknown = set(update) - set(LabelSettings.model_fields)
        if unknown:
            raise ValidationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        current = await self.get()
        try:
            merged = LabelSettings.model_validate({**current.model_dump(), **update})
        except PydanticValidationError as e:
            raise ValidationError(str(e)) from e

        stored = merged.to_storage()
        try:
            for key in update:
                await self.session.merge(Setting(key=key, value=stored[key]))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageFailure(f"Saving settings failed: {e}") from e

        logger.info("Label settings saved", keys=sorted(update))
        return merged
