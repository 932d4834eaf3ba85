"""Sequence counter model, one row per process type."""

from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Column, DateTime
from sqlmodel import Field, SQLModel


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


class SequenceCounter(SQLModel, table=True):
    """Highest number issued so far for a process type.

    Only moves forward, except for an explicit administrative reset to 0
    or a recompute after a batch delete.
    """

    __tablename__ = "sequences"
    __table_args__ = (CheckConstraint("last_number >= 0", name="ck_sequences_last_number"),)

    # Plain string so a row for an unknown tag can never be conjured by the enum
    process_type: str = Field(primary_key=True, max_length=8)
    last_number: int = Field(default=0)
    updated_at: datetime = Field(default_factory=_utc_now, sa_column=Column(DateTime(timezone=True), nullable=False))
