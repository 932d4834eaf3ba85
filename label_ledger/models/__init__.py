"""Database models."""

from sqlmodel import SQLModel

from label_ledger.models.batch import Batch
from label_ledger.models.enums import PROCESS_TYPE_DISPLAY, BatchDeletePolicy, LabelMode, ProcessType
from label_ledger.models.sequence import SequenceCounter
from label_ledger.models.setting import Setting

__all__ = [
    "SQLModel",
    "Batch",
    "BatchDeletePolicy",
    "LabelMode",
    "PROCESS_TYPE_DISPLAY",
    "ProcessType",
    "SequenceCounter",
    "Setting",
]
