"""
Result objects returned by the ingestion entry points.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from app.ui.viewmodels import BomGroup, BomItem, ColumnVisibility, CostItem, QuoteHeaderFields


class ParsedResult(BaseModel):
    """Everything recovered from one workbook."""
    quote_info: Optional[QuoteHeaderFields] = None
    bom_items: Optional[List[BomItem]] = None
    bom_groups: Optional[List[BomGroup]] = None
    cost_items: Optional[List[CostItem]] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    # Proposed visibility after price auto-enable; the caller decides whether to apply it
    column_visibility: ColumnVisibility = Field(default_factory=ColumnVisibility)
    price_columns_enabled: bool = False

    stats: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @property
    def item_count(self) -> int:
        return len(self.bom_items or []) + len(self.cost_items or [])

    @property
    def is_empty(self) -> bool:
        """No items and no header fields: nothing usable was found."""
        header_fields = self.quote_info.field_count if self.quote_info else 0
        return self.item_count == 0 and header_fields == 0

    @property
    def succeeded(self) -> bool:
        """Usable output and no fatal errors (warnings may still need attention)."""
        return not self.errors and not self.is_empty


class PasteResult(BaseModel):
    """Items recovered from clipboard text pasted into one BOM group."""
    items: List[BomItem] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    rows_received: int = 0
    column_visibility: ColumnVisibility = Field(default_factory=ColumnVisibility)
    price_columns_enabled: bool = False

    @computed_field
    @property
    def warning_count(self) -> int:
        return len(self.warnings)
