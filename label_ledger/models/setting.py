"""Key/value settings model."""

from sqlmodel import Field, SQLModel


class Setting(SQLModel, table=True):
    """Raw stored setting. Typed access goes through SettingsService."""

    __tablename__ = "settings"

    key: str = Field(primary_key=True)
    value: str
