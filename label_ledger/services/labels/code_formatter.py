"""Barcode code formatting.

Codes look like ``PALM-R-000001``: prefix, process type and the number
zero-padded to a fixed width. The numeric range stored on a batch is the
source of truth; code strings are always derived from it through this module.
"""

import re
from dataclasses import dataclass

from label_ledger.config import settings
from label_ledger.models.enums import LabelMode, ProcessType


@dataclass(frozen=True)
class CodeFormatter:
    """Maps (process type, number) to a code string and back."""

    prefix: str = "PALM"
    width: int = 6

    def __post_init__(self) -> None:
        if self.width < 1:
            raise ValueError("width must be at least 1")
        if not self.prefix or "-" in self.prefix:
            raise ValueError("prefix must be non-empty and must not contain '-'")

    @classmethod
    def from_settings(cls) -> "CodeFormatter":
        return cls(prefix=settings.code_prefix, width=settings.code_width)

    @property
    def max_number(self) -> int:
        """Largest number that fits the fixed width."""
        return 10**self.width - 1

    def format(self, process_type: ProcessType | str, number: int) -> str:
        """Render one code. Numbers outside 1..max_number are rejected, never truncated."""
        if isinstance(number, bool) or not isinstance(number, int):
            raise TypeError(f"number must be int, got {type(number).__name__}")
        if not 1 <= number <= self.max_number:
            raise ValueError(f"number {number} outside 1..{self.max_number}")
        return f"{self.prefix}-{ProcessType(process_type).value}-{number:0{self.width}d}"

    def parse(self, code: str) -> tuple[ProcessType, int]:
        """Inverse of format()."""
        pattern = rf"{re.escape(self.prefix)}-([A-Z0-9]+)-(\d{{{self.width}}})"
        match = re.fullmatch(pattern, code)
        if match is None:
            raise ValueError(f"Not a valid code: {code!r}")
        try:
            process_type = ProcessType(match.group(1))
        except ValueError:
            raise ValueError(f"Unknown process type in code: {code!r}") from None
        number = int(match.group(2))
        if number < 1:
            raise ValueError(f"Not a valid code: {code!r}")
        return process_type, number

    def expand(
        self,
        process_type: ProcessType | str,
        start_number: int,
        end_number: int,
        mode: LabelMode,
        quantity: int,
    ) -> list[str]:
        """Regenerate the full code list of a batch from its numeric range."""
        if mode == LabelMode.CONSECUTIVE:
            if end_number - start_number + 1 != quantity:
                raise ValueError(
                    f"Consecutive range {start_number}..{end_number} does not match quantity {quantity}"
                )
            return [self.format(process_type, n) for n in range(start_number, end_number + 1)]
        if start_number != end_number:
            raise ValueError(f"Identical batch must have start == end, got {start_number}..{end_number}")
        return [self.format(process_type, start_number)] * quantity
