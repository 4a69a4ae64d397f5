"""
Quote and ingestion request/response schemas.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from app.ui.viewmodels import ColumnVisibility


class QuoteSummary(BaseModel):
    """Row of the saved-quotes listing."""
    id: str
    quote_subject: str
    customer_company: str
    version: str
    currency: str
    created_at: datetime
    updated_at: datetime


class PasteRequest(BaseModel):
    """Clipboard text pasted into a BOM group."""
    text: str
    existing_item_count: int = Field(default=0, ge=0)
    column_visibility: Optional[ColumnVisibility] = None


class FormPasteRequest(BaseModel):
    """Clipboard text pasted into a group of a live form."""
    text: str


class GroupCreateRequest(BaseModel):
    title: Optional[str] = None


class GroupRenameRequest(BaseModel):
    title: str = Field(min_length=1)


class FieldUpdateRequest(BaseModel):
    """Set one field of a BOM or cost line."""
    field: str
    value: Any = None


class CostCreateRequest(BaseModel):
    is_discount: bool = False


class FormImportResponse(BaseModel):
    """What an upload changed in a form."""
    form_id: str
    applied: Dict[str, int]
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    price_columns_enabled: bool = False


class FormPasteResponse(BaseModel):
    form_id: str
    group_id: str
    items_added: int
    warnings: List[str] = Field(default_factory=list)
    price_columns_enabled: bool = False


class ColumnToggleResponse(BaseModel):
    column: str
    enabled: bool
    column_visibility: ColumnVisibility
