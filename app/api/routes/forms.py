"""
Quote form routes.

A form is the in-memory quote being edited. These routes expose its
operations (groups, items, columns, cost lines), feed it from uploads and
pastes, and save or export it.
"""
import unicodedata
from io import BytesIO
from typing import Annotated, List
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse
from pydantic import ValidationError
from sqlmodel import Session

from app.api.deps import get_form_state, get_scan_limits, read_upload
from app.core.config import settings
from app.core.logging import get_logger
from app.db.session import get_session
from app.schemas.quote import (
    ColumnToggleResponse,
    CostCreateRequest,
    FieldUpdateRequest,
    FormImportResponse,
    FormPasteRequest,
    FormPasteResponse,
    GroupCreateRequest,
    GroupRenameRequest,
)
from app.services.ingestion import IngestionOptions, ScanLimits, parse_clipboard_paste, parse_workbook
from app.services.quote_excel_service import export_form_workbook
from app.services.quote_service import QuoteService
from app.services.workbook_reader import read_workbook
from app.ui import state as form_store
from app.ui.viewmodels import BomGroup, BomItem, CostItem, QuoteFormState, QuoteHeader

logger = get_logger(__name__)

router = APIRouter(prefix="/forms", tags=["forms"])

FormState = Annotated[QuoteFormState, Depends(get_form_state)]

NOT_FOUND = "Not found in this form"

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _not_found(detail: str = NOT_FOUND) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _attachment_header(stem: str, extension: str = ".xlsx") -> str:
    """
    Content-Disposition for a download named after user text.
    Headers are latin-1, so non-ASCII names go in filename* (RFC 5987)
    with a transliterated ASCII filename alongside.
    """
    stem = "".join(ch for ch in stem if unicodedata.category(ch)[0] != "C" and ch not in '"\\').strip()
    ascii_stem = unicodedata.normalize("NFKD", stem).encode("ascii", "ignore").decode("ascii").strip()
    filename = f"{ascii_stem or 'quote'}{extension}"
    header = f'attachment; filename="{filename}"'
    if stem and ascii_stem != stem:
        header += f"; filename*=UTF-8''{quote(stem + extension, safe='')}"
    return header


@router.post("", response_model=QuoteFormState, status_code=status.HTTP_201_CREATED)
def create_form() -> QuoteFormState:
    """Start a blank quote form."""
    form = QuoteFormState(
        header=QuoteHeader(currency=settings.DEFAULT_CURRENCY, payment_terms=settings.DEFAULT_PAYMENT_TERMS),
    )
    form_store.set_state(form.id, form)
    form.created_at = form.modified_at
    return form


@router.post("/from-quote/{quote_id}", response_model=QuoteFormState, status_code=status.HTTP_201_CREATED)
def open_quote(
    quote_id: str,
    session: Annotated[Session, Depends(get_session)],
) -> QuoteFormState:
    """Open a saved quote for editing."""
    form = QuoteService.get(session, quote_id)
    if form is None:
        raise _not_found("Quote not found")
    form_store.set_state(form.id, form)
    return form


@router.get("/{form_id}", response_model=QuoteFormState)
def get_form(form: FormState) -> QuoteFormState:
    return form


@router.get("/{form_id}/warnings", response_model=List[str])
def get_form_warnings(form: FormState) -> List[str]:
    """Warnings from the last import or paste into this form."""
    return form_store.get_warnings(form.id)


# ========== Groups and items ==========

@router.post("/{form_id}/groups", response_model=BomGroup, status_code=status.HTTP_201_CREATED)
def add_group(form: FormState, request: GroupCreateRequest) -> BomGroup:
    group = form.add_group(title=request.title)
    form_store.touch(form.id)
    return group


@router.patch("/{form_id}/groups/{group_id}", response_model=BomGroup)
def rename_group(form: FormState, group_id: str, request: GroupRenameRequest) -> BomGroup:
    if not form.rename_group(group_id, request.title):
        raise _not_found("Group not found")
    form_store.touch(form.id)
    return form.get_group(group_id)


@router.delete("/{form_id}/groups/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_group(form: FormState, group_id: str) -> None:
    """Remove a group; remaining groups are renamed by position."""
    if not form.remove_group(group_id):
        raise _not_found("Group not found")
    form_store.touch(form.id)


@router.post("/{form_id}/groups/{group_id}/items", response_model=BomItem, status_code=status.HTTP_201_CREATED)
def add_item(form: FormState, group_id: str) -> BomItem:
    item = form.add_bom_item(group_id)
    if item is None:
        raise _not_found("Group not found")
    form_store.touch(form.id)
    return item


@router.patch("/{form_id}/groups/{group_id}/items/{index}", response_model=BomGroup)
def update_item(form: FormState, group_id: str, index: int, request: FieldUpdateRequest) -> BomGroup:
    """Set one field of a BOM item; quantity and unit price re-derive the total."""
    try:
        updated = form.update_bom_item(group_id, index, request.field, request.value)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid value for {request.field}: {e.errors()[0]['msg']}")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not updated:
        raise _not_found("Item not found")
    form_store.touch(form.id)
    return form.get_group(group_id)


@router.delete("/{form_id}/groups/{group_id}/items/{index}", response_model=BomGroup)
def remove_item(form: FormState, group_id: str, index: int) -> BomGroup:
    """Remove an item; the group is renumbered 1..n."""
    if not form.remove_bom_item(group_id, index):
        raise _not_found("Item not found")
    form_store.touch(form.id)
    return form.get_group(group_id)


@router.post("/{form_id}/groups/{group_id}/paste", response_model=FormPasteResponse)
def paste_into_group(form: FormState, group_id: str, request: FormPasteRequest) -> FormPasteResponse:
    """Parse pasted rows and append them to a group, enabling price columns if needed."""
    group = form.get_group(group_id)
    if group is None:
        raise _not_found("Group not found")

    paste = parse_clipboard_paste(request.text, len(group.items), form.column_visibility)
    form.apply_paste(group_id, paste)
    form_store.set_warnings(form.id, paste.warnings)
    form_store.touch(form.id)

    return FormPasteResponse(
        form_id=form.id,
        group_id=group_id,
        items_added=len(paste.items),
        warnings=paste.warnings,
        price_columns_enabled=paste.price_columns_enabled,
    )


@router.post("/{form_id}/columns/{column}/toggle", response_model=ColumnToggleResponse)
def toggle_column(form: FormState, column: str) -> ColumnToggleResponse:
    try:
        enabled = form.toggle_column(column)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    form_store.touch(form.id)
    return ColumnToggleResponse(column=column, enabled=enabled, column_visibility=form.column_visibility)


# ========== Cost items ==========

@router.post("/{form_id}/costs", response_model=CostItem, status_code=status.HTTP_201_CREATED)
def add_cost_item(form: FormState, request: CostCreateRequest) -> CostItem:
    item = form.add_cost_item(is_discount=request.is_discount)
    form_store.touch(form.id)
    return item


@router.patch("/{form_id}/costs/{index}", response_model=CostItem)
def update_cost_item(form: FormState, index: int, request: FieldUpdateRequest) -> CostItem:
    try:
        updated = form.update_cost_item(index, request.field, request.value)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid value for {request.field}: {e.errors()[0]['msg']}")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not updated:
        raise _not_found("Cost item not found")
    form_store.touch(form.id)
    return form.cost_items[index]


@router.delete("/{form_id}/costs/{index}", status_code=status.HTTP_204_NO_CONTENT)
def remove_cost_item(form: FormState, index: int) -> None:
    if not form.remove_cost_item(index):
        raise _not_found("Cost item not found")
    form_store.touch(form.id)


# ========== Import, save and export ==========

@router.post("/{form_id}/import", response_model=FormImportResponse)
async def import_workbook(
    form: FormState,
    limits: Annotated[ScanLimits, Depends(get_scan_limits)],
    file: UploadFile = File(...),
) -> FormImportResponse:
    """
    Upload a workbook into the form.
    Recovered header fields are merged; recovered groups and cost lines
    replace the form's current ones.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    sheets = read_workbook(await read_upload(file), file.filename)

    result = parse_workbook(sheets, IngestionOptions(column_visibility=form.column_visibility, limits=limits))
    applied = form.apply_parsed_result(result)
    if result.item_count:
        form.source_file = file.filename
    form_store.set_warnings(form.id, result.warnings)
    form_store.touch(form.id)

    logger.info(f"Imported {file.filename} into form {form.id}: {applied}")
    return FormImportResponse(
        form_id=form.id,
        applied=applied,
        errors=result.errors,
        warnings=result.warnings,
        price_columns_enabled=result.price_columns_enabled,
    )


@router.post("/{form_id}/save", response_model=QuoteFormState)
def save_form(
    form: FormState,
    session: Annotated[Session, Depends(get_session)],
) -> QuoteFormState:
    """Save the form as a new quote, or overwrite the quote it was opened from."""
    saved = None
    if form.quote_id:
        saved = QuoteService.update(session, form.quote_id, form)
    if saved is None:
        quote = QuoteService.create(session, form)
        form.quote_id = quote.id
    else:
        form.modified_at = saved.modified_at
    form_store.touch(form.id)
    return form


@router.get("/{form_id}/export")
def export_form(form: FormState) -> StreamingResponse:
    """Download the form as a re-importable workbook."""
    content = export_form_workbook(form)
    return StreamingResponse(
        BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": _attachment_header(form.header.quote_subject or "quote")},
    )
