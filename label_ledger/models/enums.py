"""Enum definitions for database models."""

from enum import StrEnum


class ProcessType(StrEnum):
    """Production stage a label belongs to.

    Adding a member also needs a counter row; init_db seeds missing rows on startup.
    """

    RECEPTION = "R"
    SORTING_1 = "S1"
    SORTING_2 = "S2"
    PACKING = "P"
    LOT = "L"

    @property
    def display(self) -> str:
        return PROCESS_TYPE_DISPLAY[self]


PROCESS_TYPE_DISPLAY: dict[ProcessType, str] = {
    ProcessType.RECEPTION: "Reception",
    ProcessType.SORTING_1: "Sorting 1",
    ProcessType.SORTING_2: "Sorting 2",
    ProcessType.PACKING: "Packing",
    ProcessType.LOT: "Lot / Batch",
}


class LabelMode(StrEnum):
    """How a batch turns its number range into printed codes."""

    CONSECUTIVE = "consecutive"  # quantity distinct, ascending numbers
    IDENTICAL = "identical"  # one number printed quantity times


class BatchDeletePolicy(StrEnum):
    """Effect of deleting a batch on its process type's counter."""

    RECOMPUTE = "recompute"  # counter = max(end_number) of remaining batches, or 0
    RETAIN = "retain"  # counter left untouched
