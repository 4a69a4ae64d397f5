"""
Quote persistence models.
Line items are stored in their own tables; column visibility is kept as
a JSON string to stay SQLite-friendly.
"""
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel


class Quote(SQLModel, table=True):
    """Saved quote header plus form-level settings."""
    __tablename__ = "quotes"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)

    # Header
    quote_subject: str = Field(default="", index=True)
    customer_company: str = Field(default="", index=True)
    customer_logo: Optional[str] = None
    sales_person_name: str = ""
    date: str = ""
    version: str = "1"
    payment_terms: str = "Current +30"
    currency: str = "USD"

    # Sections
    bom_enabled: bool = Field(default=True)
    costs_enabled: bool = Field(default=True)
    column_visibility_json: Optional[str] = None

    source_file: Optional[str] = None

    # Timestamps
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def column_visibility(self) -> Optional[Dict[str, Any]]:
        """Parse column_visibility_json to Python object."""
        if self.column_visibility_json:
            return json.loads(self.column_visibility_json)
        return None

    @column_visibility.setter
    def column_visibility(self, value: Dict[str, Any]):
        """Set column visibility from Python object."""
        self.column_visibility_json = json.dumps(value)


class QuoteBomItem(SQLModel, table=True):
    """
    A BOM line of a saved quote.
    Group id, name and title are denormalized onto each row so groups
    can be rebuilt in order.
    """
    __tablename__ = "quote_bom_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    quote_id: str = Field(foreign_key="quotes.id", index=True)

    group_id: str
    group_name: str
    group_title: Optional[str] = None
    group_order: int = 0
    sort_order: int = 0

    no: int = 1
    part_number: str = ""
    product_description: str = ""
    quantity: int = 1
    unit_price: Optional[float] = None
    total_price: Optional[float] = None


class QuoteCostItem(SQLModel, table=True):
    """A cost or discount line of a saved quote."""
    __tablename__ = "quote_cost_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    quote_id: str = Field(foreign_key="quotes.id", index=True)
    sort_order: int = 0

    product_description: str
    quantity: int = 1
    unit_price: float = 0.0
    total_price: float = 0.0
    is_discount: bool = False
