"""Pydantic schemas for request/response validation."""

from app.schemas.quote import (
    ColumnToggleResponse,
    CostCreateRequest,
    FieldUpdateRequest,
    FormImportResponse,
    FormPasteRequest,
    FormPasteResponse,
    GroupCreateRequest,
    GroupRenameRequest,
    PasteRequest,
    QuoteSummary,
)

__all__ = [
    "ColumnToggleResponse",
    "CostCreateRequest",
    "FieldUpdateRequest",
    "FormImportResponse",
    "FormPasteRequest",
    "FormPasteResponse",
    "GroupCreateRequest",
    "GroupRenameRequest",
    "PasteRequest",
    "QuoteSummary",
]
