"""
Stateless ingestion routes: parse an uploaded workbook or pasted text
and return what was recovered, without touching any form.
"""
from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import StreamingResponse

from app.api.deps import get_scan_limits, read_upload
from app.core.logging import get_logger
from app.schemas.quote import PasteRequest
from app.services.ingestion import IngestionOptions, ParsedResult, PasteResult, ScanLimits
from app.services.ingestion import parse_clipboard_paste, parse_workbook
from app.services.quote_excel_service import TemplateOptions, export_template_workbook
from app.services.workbook_reader import read_workbook
from app.ui.viewmodels import ColumnVisibility

logger = get_logger(__name__)

router = APIRouter(prefix="/ingest", tags=["ingestion"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.post("/workbook", response_model=ParsedResult)
async def ingest_workbook(
    limits: Annotated[ScanLimits, Depends(get_scan_limits)],
    file: UploadFile = File(...),
    validate_data: bool = Form(True),
    allow_partial_data: bool = Form(True),
    unit_price_visible: bool = Form(False),
    total_price_visible: bool = Form(False),
) -> ParsedResult:
    """
    Parse an uploaded quote workbook (.xlsx or .csv).

    Returns:
        ParsedResult with recovered records, errors, warnings and the
        proposed column visibility
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    sheets = read_workbook(await read_upload(file), file.filename)

    options = IngestionOptions(
        validate_data=validate_data,
        allow_partial_data=allow_partial_data,
        column_visibility=ColumnVisibility(unit_price=unit_price_visible, total_price=total_price_visible),
        limits=limits,
    )
    result = parse_workbook(sheets, options)
    logger.info(
        f"Ingested {file.filename}: {result.item_count} items, "
        f"{len(result.errors)} errors, {len(result.warnings)} warnings"
    )
    return result


@router.post("/paste", response_model=PasteResult)
def ingest_paste(request: PasteRequest) -> PasteResult:
    """Parse tab-separated clipboard text into BOM items."""
    return parse_clipboard_paste(request.text, request.existing_item_count, request.column_visibility)


@router.get("/template")
def download_template(unit_price: bool = False, total_price: bool = False) -> StreamingResponse:
    """Download a blank quote workbook with seed data."""
    options = TemplateOptions(column_visibility=ColumnVisibility(unit_price=unit_price, total_price=total_price))
    content = export_template_workbook(options)
    return StreamingResponse(
        BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="quote-template.xlsx"'},
    )
