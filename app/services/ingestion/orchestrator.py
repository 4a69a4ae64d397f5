"""
Entry points for workbook and clipboard ingestion.

Both flows are pure: they take decoded cells or text and return a result
object. Sheet lookup, aggregation of errors and warnings and the price
auto-enable policy live here; everything row-level is delegated to the
section scanner and record builder.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from app.core.logging import get_logger
from app.services.ingestion.grid import Grid, SheetRow, to_rows
from app.services.ingestion.results import ParsedResult, PasteResult
from app.services.ingestion.row_classifier import paste_classifier
from app.services.ingestion.section_scanner import (
    ScanLimits,
    bom_group_summary,
    scan_bom_sheet,
    scan_cost_sheet,
)
from app.services.ingestion.stats import IngestionStats, RowDecision
from app.services.ingestion.value_coercion import parse_boolean, parse_leading_int, parse_number
from app.ui.viewmodels import BomItem, ColumnVisibility, QuoteHeaderFields

logger = get_logger(__name__)

QUOTE_INFO_SHEETS = ("Quote Info", "quote info", "QuoteInfo")
BOM_SHEETS = ("BOM Items (Multi-Group)", "BOM Items", "bom items", "BOM", "bom")
COST_SHEETS = ("Cost Items", "cost items", "Cost", "cost")

FALLBACK_WARNING = "No recognized sheet names found, attempting to parse first sheet as BOM items"

_LINE_BREAK = re.compile(r"\r?\n")


def _text_or(default: str) -> Callable[[Any], str]:
    def convert(value: Any) -> str:
        text = "" if value is None else str(value).strip()
        return text or default
    return convert


def _bool_or(default: bool) -> Callable[[Any], bool]:
    def convert(value: Any) -> bool:
        return parse_boolean(value, default)
    return convert


# Quote-info key -> (header field, converter)
QUOTE_INFO_FIELDS: Dict[str, tuple] = {
    "quote subject": ("quote_subject", _text_or("")),
    "customer company": ("customer_company", _text_or("")),
    "sales person name": ("sales_person_name", _text_or("")),
    "date": ("date", _text_or("")),
    "version": ("version", _text_or("1")),
    "payment terms": ("payment_terms", _text_or("Current +30")),
    "currency": ("currency", _text_or("USD")),
    "bom enabled": ("bom_enabled", _bool_or(True)),
    "costs enabled": ("costs_enabled", _bool_or(True)),
}


@dataclass
class IngestionOptions:
    """Caller choices for one workbook ingestion."""
    validate_data: bool = True
    allow_partial_data: bool = True
    column_visibility: Optional[ColumnVisibility] = None
    limits: ScanLimits = field(default_factory=ScanLimits)


def _norm_sheet_name(name: str) -> str:
    """Lowercase with whitespace collapsed: ' BOM  Items ' -> 'bom items'."""
    return " ".join(str(name).split()).lower()


def find_sheet(sheet_names: Sequence[str], aliases: Sequence[str]) -> Optional[str]:
    """
    Pick the sheet for a role.

    Aliases are tried in order, first by exact name and then by normalized
    name, so the first alias that matches anything wins.
    """
    for alias in aliases:
        if alias in sheet_names:
            return alias
        target = _norm_sheet_name(alias)
        for name in sheet_names:
            if _norm_sheet_name(name) == target:
                return name
    return None


def parse_quote_info_grid(grid: Grid) -> QuoteHeaderFields:
    """Read (field, value) pairs from the first two columns."""
    values: Dict[str, Any] = {}
    for row in to_rows(grid):
        key = row.text(0).lower()
        if row.width < 2 or key not in QUOTE_INFO_FIELDS:
            continue
        name, convert = QUOTE_INFO_FIELDS[key]
        values[name] = convert(row.text(1))
    return QuoteHeaderFields(**values)


# ========== Price policy ==========

def propose_visibility(items: Sequence[BomItem], visibility: ColumnVisibility) -> ColumnVisibility:
    """
    Turn both price columns on when any raw item carries a positive unit
    price. Must run before masking, which can erase the prices it looks at.
    """
    has_prices = any(item.unit_price is not None and item.unit_price > 0 for item in items)
    if has_prices and not visibility.shows_prices:
        return visibility.with_prices_enabled()
    return visibility.model_copy()


def mask_prices(item: BomItem, visibility: ColumnVisibility) -> None:
    """Apply column visibility to an item's prices in place."""
    raw_unit = item.unit_price
    raw_total = item.total_price

    item.unit_price = raw_unit if visibility.unit_price else None
    if not visibility.total_price:
        item.total_price = None
    elif raw_unit is not None:
        item.total_price = item.quantity * raw_unit
    else:
        item.total_price = raw_total


# ========== Workbook flow ==========

def parse_workbook(sheets: Mapping[str, Grid], options: Optional[IngestionOptions] = None) -> ParsedResult:
    """
    Recover quote header, BOM groups and cost lines from decoded sheets.

    Args:
        sheets: sheet name -> rows of raw cell values, in workbook order
        options: validation, partial-data and visibility choices

    Returns:
        ParsedResult; fatal problems are in ``errors``, row-level
        problems in ``warnings``. Never raises for malformed content.
    """
    options = options or IngestionOptions()
    result = ParsedResult()
    names = list(sheets.keys())

    if not names:
        result.errors.append("Workbook contains no sheets")
        return result

    quote_sheet = find_sheet(names, QUOTE_INFO_SHEETS)
    bom_sheet = find_sheet(names, BOM_SHEETS)
    cost_sheet = find_sheet(names, COST_SHEETS)

    if quote_sheet is not None:
        result.quote_info = parse_quote_info_grid(sheets[quote_sheet])
        logger.info(f"Parsed quote info from '{quote_sheet}': {result.quote_info.field_count} fields")

    if quote_sheet is None and bom_sheet is None and cost_sheet is None:
        logger.warning(f"No recognized sheet names in {names}, parsing '{names[0]}' as BOM")
        result.warnings.append(FALLBACK_WARNING)
        bom_sheet = names[0]

    raw_items: List[BomItem] = []
    if bom_sheet is not None:
        _parse_bom_sheet(bom_sheet, sheets[bom_sheet], options, result)
        raw_items = list(result.bom_items or [])

    if cost_sheet is not None:
        _parse_cost_sheet(cost_sheet, sheets[cost_sheet], options, result)

    visibility = options.column_visibility or ColumnVisibility()
    proposed = propose_visibility(raw_items, visibility)
    result.price_columns_enabled = proposed.shows_prices and not visibility.shows_prices
    result.column_visibility = proposed
    if result.price_columns_enabled:
        logger.warning("Enabled price columns because the workbook contains unit prices")
    for item in raw_items:
        mask_prices(item, proposed)

    if result.errors and not options.allow_partial_data:
        logger.info(f"Discarding recovered records because of {len(result.errors)} error(s)")
        result.quote_info = None
        result.bom_items = None
        result.bom_groups = None
        result.cost_items = None

    return result


def _parse_bom_sheet(name: str, grid: Grid, options: IngestionOptions, result: ParsedResult) -> None:
    rows = to_rows(grid)
    if len(rows) < 2:
        result.warnings.append("BOM sheet appears to be empty or has no data rows")
        return

    stats = IngestionStats(name)
    scan = scan_bom_sheet(rows, result.warnings, stats, options.validate_data, options.limits)
    result.stats[name] = stats.to_dict()

    if not scan.header_found:
        result.errors.append("Could not find BOM Items headers in the sheet")
        return
    if not scan.groups:
        result.warnings.append("No valid BOM items found in the sheet")
        return

    result.bom_groups = scan.groups
    result.bom_items = scan.bom_items
    logger.info(f"Parsed BOM sheet '{name}': {bom_group_summary(scan.groups)} ({stats!r})")


def _parse_cost_sheet(name: str, grid: Grid, options: IngestionOptions, result: ParsedResult) -> None:
    rows = to_rows(grid)
    if len(rows) < 2:
        result.warnings.append("Cost sheet appears to be empty or has no data rows")
        return

    stats = IngestionStats(name)
    scan = scan_cost_sheet(rows, result.warnings, stats, options.validate_data, options.limits)
    result.stats[name] = stats.to_dict()

    if not scan.header_found:
        result.errors.append("Could not find Cost Items headers in the sheet")
        return
    if not scan.cost_items:
        result.warnings.append("No valid cost items found in the sheet")
        return

    result.cost_items = scan.cost_items
    logger.info(f"Parsed cost sheet '{name}': {len(scan.cost_items)} items ({stats!r})")


# ========== Clipboard flow ==========

def parse_clipboard_paste(
    raw_text: str,
    existing_item_count: int = 0,
    column_visibility: Optional[ColumnVisibility] = None,
) -> PasteResult:
    """
    Parse tab-separated rows pasted into a BOM group.

    Rows must read Part Number, Description, QTY and optionally Unit
    Price. Header repeats, instructions and malformed rows are skipped
    with a warning. Items are numbered after the group's existing items.
    """
    visibility = column_visibility or ColumnVisibility()
    classifier = paste_classifier()
    stats = IngestionStats("clipboard")
    warnings: List[str] = []
    raw_items: List[BomItem] = []

    lines = _LINE_BREAK.split(raw_text or "")
    for index, line in enumerate(lines):
        if not line.strip():
            continue
        row = SheetRow.from_cells(index, line.split("\t"))

        verdict = classifier.classify(row)
        if not verdict.is_data:
            warnings.append(f"Row {row.number}: Skipped non-data row")
            stats.skip(verdict.rule or verdict.kind.value)
            continue

        unit_price = parse_number(row.text(3))
        if unit_price is not None and unit_price < 0:
            unit_price = None

        raw_items.append(BomItem(
            no=existing_item_count + len(raw_items) + 1,
            part_number=row.text(0),
            product_description=row.text(1),
            quantity=parse_leading_int(row.text(2)),
            unit_price=unit_price,
        ))
        stats.commit_row(RowDecision())

    proposed = propose_visibility(raw_items, visibility)
    enabled = proposed.shows_prices and not visibility.shows_prices
    for item in raw_items:
        mask_prices(item, proposed)

    if enabled:
        logger.warning("Enabled price columns because pasted data contains unit prices")
    logger.info(f"Pasted {len(raw_items)} items ({stats!r})")

    return PasteResult(
        items=raw_items,
        warnings=warnings,
        rows_received=stats.rows_total,
        column_visibility=proposed,
        price_columns_enabled=enabled,
    )
