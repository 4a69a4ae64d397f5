"""
Fixed-width row abstraction over a decoded sheet.

Cells are kept as the decoder produced them. An index past the end of a
row is *absent* (``cell()`` returns None); a present cell may still be
empty text. Column lookups take ``Optional[int]`` so a missing column
mapping reads as absent instead of silently hitting column 0.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

Grid = Sequence[Sequence[Any]]


def cell_text(value: Any) -> str:
    """Render a raw cell as trimmed text ('' for None)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


@dataclass(frozen=True)
class SheetRow:
    """One row of a sheet with its 0-based position."""
    index: int
    cells: Tuple[Any, ...]

    @classmethod
    def from_cells(cls, index: int, cells: Optional[Sequence[Any]]) -> "SheetRow":
        return cls(index=index, cells=tuple(cells or ()))

    @property
    def number(self) -> int:
        """1-based row number, as shown by spreadsheet applications."""
        return self.index + 1

    @property
    def width(self) -> int:
        return len(self.cells)

    def cell(self, column: Optional[int]) -> Any:
        """Raw value at a column, or None when the column is absent."""
        if column is None or column < 0 or column >= len(self.cells):
            return None
        return self.cells[column]

    def text(self, column: Optional[int]) -> str:
        return cell_text(self.cell(column))

    def texts(self) -> List[str]:
        return [cell_text(value) for value in self.cells]

    @property
    def is_blank(self) -> bool:
        return all(not text for text in self.texts())

    @property
    def joined_text(self) -> str:
        """All cells joined by a space, lowercased."""
        return " ".join(self.texts()).lower()


def to_rows(grid: Grid) -> List[SheetRow]:
    """Wrap a decoded grid into SheetRows."""
    return [SheetRow.from_cells(index, cells) for index, cells in enumerate(grid or [])]
