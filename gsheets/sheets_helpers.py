"""
Google Sheets Helper Functions

Shared utilities for Google Sheets operations: one-indexed cell positions,
A1 label encoding/decoding and grid bookkeeping.
"""

import string
from dataclasses import dataclass
from typing import List

from core.utils import UserInputError

COLUMN_LETTERS = string.ascii_uppercase
MAX_COLUMN_INDEX = 18278  # column ZZZ


def _index_to_column(index: int) -> str:
    """
    Convert a one-based column index to column letters (1 -> A, 26 -> Z, 27 -> AA).

    Bijective base-26: there is no zero digit, so a trailing remainder of 0
    stands for Z.
    """
    if index <= 0:
        raise UserInputError(f"Column index must be positive, got {index}.")
    if index > MAX_COLUMN_INDEX:
        raise UserInputError(
            f"Column index cannot be greater than {MAX_COLUMN_INDEX} (column ZZZ), got {index}."
        )
    return _encode_column(index)


def _encode_column(index: int) -> str:
    if index <= 26:
        return COLUMN_LETTERS[index - 1]
    prefix = _encode_column((index - 1) // 26)
    remainder = index % 26 or 26
    return prefix + COLUMN_LETTERS[remainder - 1]


def _column_to_index(column: str) -> int:
    """Convert column letters (A, B, AA) to a one-based index."""
    if not column:
        raise UserInputError("Column letters must not be empty.")
    result = 0
    for char in column:
        if char not in COLUMN_LETTERS:
            raise UserInputError(
                f"Invalid character in column, expected A-Z but got [{char}]."
            )
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result


@dataclass(frozen=True)
class CellPosition:
    """One-indexed (row, column) cell position; row 1 / column 1 is A1."""

    row: int
    column: int

    @classmethod
    def origin(cls) -> "CellPosition":
        return cls(1, 1)

    def offset(self, row_delta: int, column_delta: int) -> "CellPosition":
        """Translate the position. The result is only validated when encoded."""
        return CellPosition(self.row + row_delta, self.column + column_delta)

    def to_a1(self) -> str:
        return encode_cell(self.row, self.column)

    @classmethod
    def from_a1(cls, label: str) -> "CellPosition":
        return decode_cell(label)

    def to_grid_index(self) -> tuple[int, int]:
        """Zero-based (row, column) indexes as used by GridRange."""
        return self.row - 1, self.column - 1


def encode_cell(row: int, column: int) -> str:
    """Encode a one-indexed (row, column) pair as an A1 label, e.g. (1, 3) -> 'C1'."""
    return f"{_index_to_column(column)}{row}"


def decode_cell(label: str) -> CellPosition:
    """
    Decode an A1 label like 'AC12' into a CellPosition.

    The label is split at its first digit; everything before it must be A-Z
    and everything after it a positive decimal row number.
    """
    split_index = len(label)
    for idx, char in enumerate(label):
        if char in string.digits:
            split_index = idx
            break

    col_letters, row_digits = label[:split_index], label[split_index:]
    column = _column_to_index(col_letters)

    if not row_digits or any(char not in string.digits for char in row_digits):
        raise UserInputError(f"Invalid row in cell label '{label}'.")
    try:
        row = int(row_digits)
    except ValueError as exc:
        # digit strings past the interpreter's int conversion limit
        raise UserInputError(f"Invalid row in cell label '{label}'.") from exc
    if row <= 0:
        raise UserInputError(f"Row must be positive in cell label '{label}'.")

    return CellPosition(row=row, column=column)


def range_label(start: CellPosition, end: CellPosition) -> str:
    """A1 range between two positions, e.g. 'A1:C5'."""
    start_label = start.to_a1()
    end_label = end.to_a1()
    return start_label if start_label == end_label else f"{start_label}:{end_label}"


def _coerce_int(value: object, default: int = 0) -> int:
    """
    Safely convert a value to an integer, returning a default value if conversion fails.
    """
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def _first_sheet(spreadsheet: dict) -> dict:
    """Return the first sheet of a spreadsheet resource."""
    sheets: List[dict] = spreadsheet.get("sheets", []) or []
    if not sheets:
        raise UserInputError("Spreadsheet has no sheets.")
    return sheets[0]


def _header_index(header: List[str], column_name: str) -> int:
    """Zero-based index of a header cell, or -1 when absent."""
    for index, cell in enumerate(header):
        if cell == column_name:
            return index
    return -1
