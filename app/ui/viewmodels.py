"""
View models for the Quote Form UI.
These models represent the data structures used in the UI layer and are
also the record types produced by spreadsheet ingestion.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from pydantic import BaseModel, Field, computed_field
import uuid

if TYPE_CHECKING:
    from app.services.ingestion.results import ParsedResult, PasteResult

PRICE_COLUMNS = ("unit_price", "total_price")

BOM_ITEM_EDITABLE_FIELDS = {"part_number", "product_description", "quantity", "unit_price", "total_price"}
COST_ITEM_EDITABLE_FIELDS = {"product_description", "quantity", "unit_price", "is_discount"}


class ColumnVisibility(BaseModel):
    """Which BOM columns are active on the quote."""
    no: bool = True
    part_number: bool = True
    product_description: bool = True
    qty: bool = True
    unit_price: bool = False
    total_price: bool = False

    @property
    def shows_prices(self) -> bool:
        """Both price columns are on."""
        return self.unit_price and self.total_price

    def with_prices_enabled(self) -> "ColumnVisibility":
        """Copy of this visibility with both price columns turned on."""
        return self.model_copy(update={"unit_price": True, "total_price": True})


class BomItem(BaseModel):
    """A single line in a bill of materials."""
    no: int = Field(default=1, ge=1)
    part_number: str = ""
    product_description: str = ""
    quantity: int = Field(default=1, ge=1)
    unit_price: Optional[float] = Field(default=None, ge=0)
    total_price: Optional[float] = Field(default=None, ge=0)

    @property
    def is_identified(self) -> bool:
        """At least one of part number / description is filled in."""
        return bool(self.part_number.strip() or self.product_description.strip())

    def recalculate_total(self) -> None:
        """Derive total price from quantity and unit price, when priced."""
        if self.unit_price is not None:
            self.total_price = self.quantity * self.unit_price
        else:
            self.total_price = None


class BomGroup(BaseModel):
    """A named, ordered collection of BOM items."""
    id: str = Field(default_factory=lambda: f"bom-{uuid.uuid4().hex[:12]}")
    name: str = "BOM 1"
    title: Optional[str] = None  # Free-text name, e.g. "Network Infrastructure"
    items: List[BomItem] = Field(default_factory=list)

    def renumber(self) -> None:
        """Reset item numbers to their 1-based positions."""
        for position, item in enumerate(self.items, start=1):
            item.no = position

    @computed_field
    @property
    def total(self) -> float:
        """Sum of priced item totals in this group."""
        return sum(item.total_price for item in self.items if item.total_price is not None)


class CostItem(BaseModel):
    """A line in the cost/discount breakdown."""
    product_description: str
    quantity: int = Field(default=1, ge=1)
    unit_price: float = Field(default=0.0, ge=0)
    total_price: float = Field(default=0.0, ge=0)
    is_discount: bool = False

    @property
    def signed_total(self) -> float:
        """Total as it contributes to the grand total (discounts subtract)."""
        return -self.total_price if self.is_discount else self.total_price

    def recalculate_total(self) -> None:
        """Derive total price from quantity and unit price."""
        self.total_price = self.quantity * self.unit_price


class QuoteHeaderFields(BaseModel):
    """Partial quote header, as recovered from a spreadsheet."""
    quote_subject: Optional[str] = None
    customer_company: Optional[str] = None
    sales_person_name: Optional[str] = None
    date: Optional[str] = None
    version: Optional[str] = None
    payment_terms: Optional[str] = None
    currency: Optional[str] = None
    bom_enabled: Optional[bool] = None
    costs_enabled: Optional[bool] = None

    @property
    def field_count(self) -> int:
        """Number of fields actually recovered."""
        return len(self.model_dump(exclude_none=True))


class QuoteHeader(BaseModel):
    """Quote header shown at the top of the document."""
    quote_subject: str = ""
    customer_company: str = ""
    customer_logo: Optional[str] = None  # URL to uploaded logo
    sales_person_name: str = ""
    date: str = ""
    version: str = "1"
    payment_terms: str = "Current +30"
    currency: str = "USD"

    def merge(self, fields: QuoteHeaderFields) -> None:
        """Overwrite header values with the fields recovered from a sheet."""
        for name, value in fields.model_dump(exclude_none=True).items():
            if hasattr(self, name):
                setattr(self, name, value)


class QuoteFormState(BaseModel):
    """Represents the complete state of a quote form."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    quote_id: Optional[str] = None  # Set once the form has been saved
    header: QuoteHeader = Field(default_factory=QuoteHeader)
    bom_enabled: bool = True
    costs_enabled: bool = True
    bom_groups: List[BomGroup] = Field(default_factory=lambda: [BomGroup(id="bom-1", name="BOM 1")])
    cost_items: List[CostItem] = Field(default_factory=list)
    column_visibility: ColumnVisibility = Field(default_factory=ColumnVisibility)

    # Metadata
    created_at: Optional[str] = None
    modified_at: Optional[str] = None
    source_file: Optional[str] = None

    @computed_field
    @property
    def bom_total(self) -> float:
        """Sum of all priced BOM items across groups."""
        return sum(group.total for group in self.bom_groups)

    @computed_field
    @property
    def cost_subtotal(self) -> float:
        """Sum of non-discount cost lines."""
        return sum(item.total_price for item in self.cost_items if not item.is_discount)

    @computed_field
    @property
    def discount_total(self) -> float:
        """Sum of discount cost lines (as a positive amount)."""
        return sum(item.total_price for item in self.cost_items if item.is_discount)

    @computed_field
    @property
    def grand_total(self) -> float:
        """Cost lines added, discount lines subtracted."""
        return sum(item.signed_total for item in self.cost_items)

    @computed_field
    @property
    def total_items(self) -> int:
        """Total number of BOM items."""
        return sum(len(group.items) for group in self.bom_groups)

    # ========== BOM groups ==========

    def get_group(self, group_id: str) -> Optional[BomGroup]:
        """Get a group by ID."""
        for group in self.bom_groups:
            if group.id == group_id:
                return group
        return None

    def add_group(self, title: Optional[str] = None) -> BomGroup:
        """Append a new empty group named by its position."""
        group = BomGroup(name=f"BOM {len(self.bom_groups) + 1}", title=title)
        self.bom_groups.append(group)
        return group

    def remove_group(self, group_id: str) -> bool:
        """Remove a group and rename the rest by position."""
        remaining = [g for g in self.bom_groups if g.id != group_id]
        if len(remaining) == len(self.bom_groups):
            return False
        for position, group in enumerate(remaining, start=1):
            group.name = f"BOM {position}"
        self.bom_groups = remaining
        return True

    def rename_group(self, group_id: str, title: str) -> bool:
        """Set a group's free-text title; its positional name is unchanged."""
        group = self.get_group(group_id)
        if group:
            group.title = title
            return True
        return False

    # ========== BOM items ==========

    def add_bom_item(self, group_id: str) -> Optional[BomItem]:
        """Append a blank item to a group."""
        group = self.get_group(group_id)
        if not group:
            return None
        item = BomItem(
            no=len(group.items) + 1,
            unit_price=0.0 if self.column_visibility.unit_price else None,
            total_price=0.0 if self.column_visibility.total_price else None,
        )
        group.items.append(item)
        return item

    def remove_bom_item(self, group_id: str, index: int) -> bool:
        """Remove the item at a position and renumber the group."""
        group = self.get_group(group_id)
        if not group or not 0 <= index < len(group.items):
            return False
        group.items.pop(index)
        group.renumber()
        return True

    def update_bom_item(self, group_id: str, index: int, field: str, value: Any) -> bool:
        """
        Update one field of a BOM item.
        A priced item always re-derives its total; a total is only set
        directly on items without a unit price.
        """
        if field not in BOM_ITEM_EDITABLE_FIELDS:
            raise ValueError(f"Unknown BOM item field: {field}")
        group = self.get_group(group_id)
        if not group or not 0 <= index < len(group.items):
            return False

        item = group.items[index]
        data = item.model_dump()
        data[field] = value
        updated = BomItem.model_validate(data)
        if updated.unit_price is not None:
            updated.recalculate_total()
        group.items[index] = updated
        return True

    def toggle_column(self, column: str) -> bool:
        """
        Flip a column flag.
        Turning a price column on backfills totals across every group.
        """
        if column not in ColumnVisibility.model_fields:
            raise ValueError(f"Unknown column: {column}")
        enabled = not getattr(self.column_visibility, column)
        setattr(self.column_visibility, column, enabled)

        if enabled and column in PRICE_COLUMNS and self.column_visibility.total_price:
            self.backfill_totals()
        return enabled

    def backfill_totals(self) -> None:
        """Recompute every BOM total from quantity and unit price."""
        for group in self.bom_groups:
            for item in group.items:
                item.recalculate_total()

    def apply_paste(self, group_id: str, paste: "PasteResult") -> bool:
        """Accept a paste result: adopt its proposed visibility and append its items."""
        group = self.get_group(group_id)
        if not group:
            return False
        if paste.price_columns_enabled:
            self.column_visibility = paste.column_visibility.model_copy()
        group.items.extend(item.model_copy() for item in paste.items)
        group.renumber()
        return True

    def apply_parsed_result(self, result: "ParsedResult") -> Dict[str, int]:
        """
        Merge a workbook ingestion result into the form.
        Recovered groups and cost items replace the current ones.
        """
        applied = {"header_fields": 0, "groups": 0, "cost_items": 0}

        if result.quote_info is not None:
            self.header.merge(result.quote_info)
            if result.quote_info.bom_enabled is not None:
                self.bom_enabled = result.quote_info.bom_enabled
            if result.quote_info.costs_enabled is not None:
                self.costs_enabled = result.quote_info.costs_enabled
            applied["header_fields"] = result.quote_info.field_count

        if result.bom_groups:
            self.bom_groups = [group.model_copy(deep=True) for group in result.bom_groups]
            applied["groups"] = len(self.bom_groups)
        if result.price_columns_enabled:
            self.column_visibility = result.column_visibility.model_copy()

        if result.cost_items:
            self.cost_items = [item.model_copy() for item in result.cost_items]
            applied["cost_items"] = len(self.cost_items)

        return applied

    # ========== Cost items ==========

    def add_cost_item(self, is_discount: bool = False) -> CostItem:
        """Append a blank cost or discount line."""
        item = CostItem(
            product_description="Special Discount" if is_discount else "New Item",
            is_discount=is_discount,
        )
        self.cost_items.append(item)
        return item

    def remove_cost_item(self, index: int) -> bool:
        """Remove a cost line by position."""
        if not 0 <= index < len(self.cost_items):
            return False
        self.cost_items.pop(index)
        return True

    def update_cost_item(self, index: int, field: str, value: Any) -> bool:
        """Update one field of a cost line; totals are always derived."""
        if field not in COST_ITEM_EDITABLE_FIELDS:
            raise ValueError(f"Unknown cost item field: {field}")
        if not 0 <= index < len(self.cost_items):
            return False
        data = self.cost_items[index].model_dump()
        data[field] = value
        updated = CostItem.model_validate(data)
        updated.recalculate_total()
        self.cost_items[index] = updated
        return True
