"""
Header-cell to canonical-field mapping for BOM and cost sheets.

Each header cell is lowercased and trimmed, then assigned to the first
field whose rule matches. Several fields can map in one pass; a later
cell matching the same field wins, the same as re-reading the header
left to right.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from app.services.ingestion.grid import cell_text

HeaderRule = Tuple[str, Callable[[str], bool]]

BOM_FIELDS = ("no", "part_number", "product_description", "quantity", "unit_price", "total_price")
COST_FIELDS = ("product_description", "quantity", "unit_price", "total_price", "is_discount")


def _is_description(h: str) -> bool:
    return "product description" in h or "description" in h


def _is_quantity(h: str) -> bool:
    return h in ("qty", "quantity")


BOM_HEADER_RULES: Tuple[HeaderRule, ...] = (
    ("no", lambda h: "no" in h and "part" not in h),
    ("part_number", lambda h: "part number" in h or h in ("part", "pn")),
    ("product_description", _is_description),
    ("quantity", _is_quantity),
    ("unit_price", lambda h: "unit price" in h),
    ("total_price", lambda h: "total price" in h),
)

COST_HEADER_RULES: Tuple[HeaderRule, ...] = (
    ("product_description", _is_description),
    ("quantity", _is_quantity),
    ("unit_price", lambda h: "unit price" in h),
    ("total_price", lambda h: "total price" in h),
    ("is_discount", lambda h: "discount" in h),
)


@dataclass
class ColumnMap:
    """Canonical field -> 0-based column index for one header row."""
    columns: Dict[str, int] = field(default_factory=dict)
    headers: List[str] = field(default_factory=list)

    def index(self, name: str) -> Optional[int]:
        """Column for a field, or None when the sheet has no such column."""
        return self.columns.get(name)

    def has(self, name: str) -> bool:
        return name in self.columns

    @property
    def fields(self) -> List[str]:
        return sorted(self.columns, key=self.columns.__getitem__)

    def to_dict(self) -> Dict[str, int]:
        return dict(self.columns)


def map_columns(header_cells: Iterable[object], rules: Sequence[HeaderRule]) -> ColumnMap:
    """Apply a rule table to a header row."""
    headers = [cell_text(cell) for cell in header_cells]
    mapping = ColumnMap(headers=headers)

    for idx, header in enumerate(headers):
        h = header.lower().strip()
        if not h:
            continue
        for name, matches in rules:
            if matches(h):
                mapping.columns[name] = idx
                break

    return mapping


def map_bom_columns(header_cells: Iterable[object]) -> ColumnMap:
    """Map a BOM header row (No., Part Number, Product Description, QTY, prices)."""
    return map_columns(header_cells, BOM_HEADER_RULES)


def map_cost_columns(header_cells: Iterable[object]) -> ColumnMap:
    """Map a cost header row (Product Description, QTY, prices, Is Discount)."""
    return map_columns(header_cells, COST_HEADER_RULES)
