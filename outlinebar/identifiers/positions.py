"""Buffer positions shared by identifiers, outlines, and cursor sources."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based ``(row, column)`` buffer position, ordered row-major."""

    row: int
    column: int

    @classmethod
    def coerce(cls, value: object) -> Position | None:
        """Normalize outline/cursor position shapes into ``Position``.

        Accepts ``Position``, ``(row, column)`` pairs, mappings with ``row`` and
        ``column`` keys, and objects exposing ``row``/``column`` attributes.
        Returns ``None`` for ``None`` or unrecognized shapes.
        """
        if value is None:
            return None
        if isinstance(value, Position):
            return value
        if isinstance(value, Mapping):
            row = value.get("row")
            column = value.get("column")
        elif isinstance(value, (tuple, list)):
            if len(value) != 2:
                return None
            row, column = value
        else:
            row = getattr(value, "row", None)
            column = getattr(value, "column", None)
        if isinstance(row, bool) or isinstance(column, bool):
            return None
        if not isinstance(row, int) or not isinstance(column, int):
            return None
        return cls(row, column)

    def shifted(self, delta_rows: int) -> Position:
        """Return a copy moved by ``delta_rows`` rows, clamped at row zero."""
        return Position(max(0, self.row + delta_rows), self.column)

    def __str__(self) -> str:
        return f"{self.row}:{self.column}"
