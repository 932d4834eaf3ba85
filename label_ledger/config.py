"""Application configuration using pydantic-settings."""

import json

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from label_ledger.models.enums import BatchDeletePolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database (single SQLite file next to the app by default)
    database_url: str = "sqlite+aiosqlite:///./palm-labels.db"
    database_timeout: float = 5.0  # SQLite busy timeout in seconds

    # Barcode codes: PALM-R-000001
    code_prefix: str = "PALM"
    code_width: int = Field(default=6, ge=1, le=18)

    # Allocation limits
    max_batch_quantity: int = Field(default=1000, ge=1)

    # History
    history_page_size: int = Field(default=20, ge=1)
    history_max_page_size: int = Field(default=500, ge=1)

    # What happens to a counter when one of its batches is deleted
    batch_delete_policy: BatchDeletePolicy = BatchDeletePolicy.RECOMPUTE

    # Application
    debug: bool = False
    log_level: str = "info"
    timezone: str = "Europe/Prague"

    # CORS origins - stored as string to avoid pydantic-settings JSON parsing
    # Supports comma-separated values or JSON array format
    backend_cors_origins_str: str = Field(
        default="http://localhost:5173,http://127.0.0.1:5173",
        validation_alias="BACKEND_CORS_ORIGINS",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def backend_cors_origins(self) -> list[str]:
        """Parse CORS origins from string (comma-separated or JSON array)."""
        v = self.backend_cors_origins_str
        if not v:
            return []
        if v.startswith("["):
            result: list[str] = json.loads(v)
            return result
        return [origin.strip() for origin in v.split(",") if origin.strip()]


settings = Settings()
