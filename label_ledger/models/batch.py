"""Batch ledger model."""

from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Enum, Index
from sqlmodel import Field, SQLModel

from label_ledger.models.enums import LabelMode


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(UTC)


class Batch(SQLModel, table=True):
    """One allocation event: a number range (or a single repeated number) issued to a supplier.

    start_code/end_code are kept for display and search only. Code lists are
    always regenerated from (start_number, end_number, mode, quantity).
    """

    __tablename__ = "batches"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_batches_quantity_positive"),
        CheckConstraint("start_number >= 1", name="ck_batches_start_number"),
        CheckConstraint("end_number >= start_number", name="ck_batches_range"),
        Index("ix_batches_process_type_end_number", "process_type", "end_number"),
    )

    id: int | None = Field(default=None, primary_key=True)
    supplier: str
    process_type: str = Field(max_length=8)
    start_code: str
    end_code: str
    quantity: int
    mode: LabelMode = Field(
        sa_column=Column(
            Enum(LabelMode, values_callable=lambda e: [x.value for x in e], name="labelmode", create_constraint=True),
            nullable=False,
        ),
    )
    start_number: int
    end_number: int
    created_at: datetime = Field(
        default_factory=_utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
    )
