# src/ndmatrix/layout.py
from __future__ import annotations
from enum import Enum

__all__ = ["Layout", "ROW_MAJOR", "COLUMN_MAJOR"]


class Layout(Enum):
    """Element ordering of the flat buffer."""
    ROW_MAJOR = "row_major"        # last dimension varies fastest (C order)
    COLUMN_MAJOR = "column_major"  # first dimension varies fastest (Fortran order)

    @classmethod
    def parse(cls, value: "Layout | str") -> "Layout":
        """
        Accept a Layout or one of its aliases (case-insensitive):
          - row major: "row", "row_major", "row-major", "c"
          - column major: "column", "col", "column_major", "column-major", "f"
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"layout must be a Layout or str; got {type(value).__name__}")
        key = value.strip().lower().replace("-", "_")
        try:
            return _ALIASES[key]
        except KeyError:
            raise ValueError(
                f"Unknown layout {value!r}; expected one of {sorted(_ALIASES)}"
            ) from None

    @property
    def numpy_order(self) -> str:
        return "C" if self is Layout.ROW_MAJOR else "F"


_ALIASES = {
    "row": Layout.ROW_MAJOR,
    "row_major": Layout.ROW_MAJOR,
    "c": Layout.ROW_MAJOR,
    "column": Layout.COLUMN_MAJOR,
    "col": Layout.COLUMN_MAJOR,
    "column_major": Layout.COLUMN_MAJOR,
    "f": Layout.COLUMN_MAJOR,
}

ROW_MAJOR = Layout.ROW_MAJOR
COLUMN_MAJOR = Layout.COLUMN_MAJOR
