"""
Excel template and quote export helpers.

Grids are built first as plain rows of cell values (the same shape the
workbook reader produces), then styled into an xlsx workbook. Keeping the
grid step separate means a generated template can be fed straight back
into ingestion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence, Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from app.core.logging import get_logger
from app.services.ingestion.orchestrator import BOM_SHEETS, COST_SHEETS, QUOTE_INFO_SHEETS
from app.ui.viewmodels import BomGroup, BomItem, ColumnVisibility, CostItem, QuoteFormState

logger = get_logger(__name__)

QUOTE_INFO_SHEET = QUOTE_INFO_SHEETS[0]
BOM_SHEET = BOM_SHEETS[0]
COST_SHEET = COST_SHEETS[0]

CURRENCY_FMT = '"$"#,##0.00'
GROUP_BANNER = "📦 GROUP {ordinal}: {name}"

COST_HEADERS = ["Product Description", "QTY", "Unit Price", "Total Price", "Is Discount"]
COST_DESCRIPTIONS = ["Description of service or product", "Quantity", "Price per unit", "Total amount", "TRUE for discounts"]

BOM_INSTRUCTIONS = [
    "📋 BOM TEMPLATE INSTRUCTIONS",
    "",
    "HOW TO USE:",
    "1. Scroll down to find the data groups below",
    "2. Select the data rows for one group (rectangular selection)",
    "3. Copy with Ctrl+C",
    "4. Paste into a BOM group table in the quote form",
    "5. Repeat for additional groups as needed",
    "",
    "💡 TIP: Copy several rows at once, header rows are filtered out automatically",
    "📊 COLUMN ORDER: Part Number → Product Description → QTY → Unit Price",
    "⚡ Auto-calculated: Item numbers (NO) and Total Prices are calculated automatically",
    "",
    "🔽 COPYABLE DATA SECTIONS BELOW 🔽",
    "",
]

# (group name, [(part number, description, qty, unit price or None)])
SEED_GROUPS: List[Tuple[str, List[Tuple[str, str, int, Optional[float]]]]] = [
    ("Network Infrastructure", [
        ("C9300-48P", "Catalyst 9300 48-port PoE+ Switch", 1, 2500.00),
        ("PWR-C1-715WAC", "Power Supply 715W AC", 1, 400.00),
        ("C9300-NM-8X", "Network Module 8x10G", 1, 1200.00),
    ]),
    ("Cables & Accessories", [
        ("CAB-C13-C14-2M", "Power Cable 2M", 4, 25.00),
        ("CAB-ETH-S-RJ45", "Ethernet Cable 1M", 8, 15.00),
        ("RACK-MOUNT-KIT", "Rack Mount Kit", 1, 75.00),
        ("PATCH-PANEL-24", "24-Port Patch Panel", 2, 85.00),
    ]),
    ("Security & Monitoring", [
        ("FIREWALL-60F", "FortiGate 60F Firewall", 1, 800.00),
        ("UPS-1500VA", "UPS 1500VA Battery Backup", 2, 350.00),
        ("SENSOR-ENV", "Environmental Sensor", 4, 120.00),
        ("CAM-IP-4MP", "4MP IP Security Camera", 6, 180.00),
    ]),
    ("Mixed Pricing", [
        ("ITEM-001", "Site Survey", 3, None),
        ("ITEM-002", "Rack Cable Manager", 2, 199.99),
        ("ITEM-003", "License - Annual Subscription", 1, 50.00),
        ("ITEM-004", "Installation Service", 1, 500.00),
    ]),
]

SEED_COSTS = [
    CostItem(product_description="Installation Services", quantity=1, unit_price=500.00, total_price=500.00),
    CostItem(product_description="Volume Discount", quantity=1, unit_price=100.00, total_price=100.00, is_discount=True),
]

Grid = List[List[Any]]


@dataclass
class TemplateOptions:
    include_quote_info: bool = True
    include_bom_items: bool = True
    include_cost_items: bool = True
    column_visibility: ColumnVisibility = field(default_factory=ColumnVisibility)
    quote_date: Optional[str] = None  # defaults to today (UTC)


def seed_groups() -> List[BomGroup]:
    """The sample groups written into a blank template."""
    groups = []
    for position, (name, rows) in enumerate(SEED_GROUPS, start=1):
        items = [
            BomItem(no=no, part_number=pn, product_description=desc, quantity=qty, unit_price=price)
            for no, (pn, desc, qty, price) in enumerate(rows, start=1)
        ]
        for item in items:
            item.recalculate_total()
        groups.append(BomGroup(id=f"bom-{position}", name=f"BOM {position}", title=name, items=items))
    return groups


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _bool_text(value: bool) -> str:
    return "TRUE" if value else "FALSE"


def bom_headers(visibility: ColumnVisibility) -> List[str]:
    """Header row for the active BOM columns."""
    headers = []
    if visibility.no:
        headers.append("No.")
    headers.extend(["Part Number", "Product Description", "QTY"])
    if visibility.unit_price:
        headers.append("Unit Price")
    if visibility.total_price:
        headers.append("Total Price")
    return headers


def _bom_row(item: BomItem, visibility: ColumnVisibility) -> List[Any]:
    row: List[Any] = []
    if visibility.no:
        row.append(item.no)
    row.extend([item.part_number, item.product_description, item.quantity])
    if visibility.unit_price:
        row.append(item.unit_price if item.unit_price is not None else "")
    if visibility.total_price:
        row.append(item.total_price if item.total_price is not None else "")
    return row


def _quote_info_grid(
    subject: str,
    company: str,
    sales_person: str,
    quote_date: str,
    version: str,
    payment_terms: str,
    currency: str,
    bom_enabled: bool,
    costs_enabled: bool,
) -> Grid:
    return [
        ["Field", "Value", "Description"],
        ["Quote Subject", subject, "Brief description of the quote"],
        ["Customer Company", company, "Customer company name"],
        ["Sales Person Name", sales_person, "Name of the sales representative"],
        ["Date", quote_date, "Quote date (YYYY-MM-DD)"],
        ["Version", version, "Quote version number"],
        ["Payment Terms", payment_terms, "Payment terms for the quote"],
        ["Currency", currency, "Currency for all prices"],
        ["BOM Enabled", _bool_text(bom_enabled), "Enable BOM section (TRUE/FALSE)"],
        ["Costs Enabled", _bool_text(costs_enabled), "Enable costs section (TRUE/FALSE)"],
    ]


def _bom_grid(groups: Sequence[BomGroup], visibility: ColumnVisibility, instructions: bool) -> Grid:
    grid: Grid = [[line] for line in BOM_INSTRUCTIONS] if instructions else []
    headers = bom_headers(visibility)
    for ordinal, group in enumerate(groups, start=1):
        if ordinal > 1:
            grid.append([])
        grid.append([GROUP_BANNER.format(ordinal=ordinal, name=group.title or group.name)])
        grid.append(list(headers))
        for item in group.items:
            grid.append(_bom_row(item, visibility))
    return grid


def _cost_grid(items: Sequence[CostItem]) -> Grid:
    grid: Grid = [list(COST_HEADERS), list(COST_DESCRIPTIONS)]
    for item in items:
        grid.append([
            item.product_description,
            item.quantity,
            item.unit_price,
            item.total_price,
            _bool_text(item.is_discount),
        ])
    return grid


def build_template_grids(options: Optional[TemplateOptions] = None) -> Dict[str, Grid]:
    """Blank quote template with seed data, keyed by sheet name."""
    options = options or TemplateOptions()
    sheets: Dict[str, Grid] = {}

    if options.include_quote_info:
        sheets[QUOTE_INFO_SHEET] = _quote_info_grid(
            "", "", "", options.quote_date or _today(), "1", "Current +30", "USD", True, True,
        )
    if options.include_bom_items:
        groups = seed_groups()
        sheets[BOM_SHEET] = _bom_grid(groups, options.column_visibility, instructions=True)
    if options.include_cost_items:
        sheets[COST_SHEET] = _cost_grid(SEED_COSTS)

    return sheets


def build_form_grids(state: QuoteFormState) -> Dict[str, Grid]:
    """A filled-in quote form in template layout."""
    header = state.header
    groups = [group for group in state.bom_groups if group.items]
    return {
        QUOTE_INFO_SHEET: _quote_info_grid(
            header.quote_subject,
            header.customer_company,
            header.sales_person_name,
            header.date,
            header.version,
            header.payment_terms,
            header.currency,
            state.bom_enabled,
            state.costs_enabled,
        ),
        BOM_SHEET: _bom_grid(groups, state.column_visibility, instructions=False),
        COST_SHEET: _cost_grid(state.cost_items),
    }


# ========== xlsx rendering ==========

def _render_workbook(sheets: Dict[str, Grid]) -> bytes:
    """Write grids as styled worksheets."""
    wb = Workbook()
    wb.remove(wb.active)

    # -- Styles --
    dark_fill = PatternFill(start_color="1F2937", end_color="1F2937", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=11)
    banner_font = Font(bold=True, size=12)
    note_font = Font(italic=True, color="6B7280", size=10)
    left_align = Alignment(horizontal="left", vertical="center")

    for title, grid in sheets.items():
        ws = wb.create_sheet(title)
        widths: Dict[int, int] = {}
        price_columns: List[int] = []

        for r, values in enumerate(grid, start=1):
            first = str(values[0]) if values else ""
            is_header = "Part Number" in values or first in ("Field", "Product Description")
            if is_header:
                price_columns = [c for c, v in enumerate(values, start=1) if v in ("Unit Price", "Total Price")]

            for c, value in enumerate(values, start=1):
                cell = ws.cell(r, c)
                cell.value = value
                if is_header:
                    cell.font = header_font
                    cell.fill = dark_fill
                    cell.alignment = left_align
                elif c in price_columns and isinstance(value, (int, float)):
                    cell.number_format = CURRENCY_FMT
                # Banner and instruction lines span the sheet; don't size columns by them
                if len(values) > 1:
                    widths[c] = max(widths.get(c, 8), min(len(str(value)) + 2, 50))

            if first.startswith("📦"):
                ws.cell(r, 1).font = banner_font
            elif title == BOM_SHEET and len(values) == 1 and first:
                ws.cell(r, 1).font = note_font

        for c, width in widths.items():
            ws.column_dimensions[get_column_letter(c)].width = width

    out = BytesIO()
    wb.save(out)
    return out.getvalue()


def export_template_workbook(options: Optional[TemplateOptions] = None) -> bytes:
    """Downloadable xlsx template."""
    return _render_workbook(build_template_grids(options))


def export_form_workbook(state: QuoteFormState) -> bytes:
    """Export a form in template layout so it can be re-imported."""
    logger.info(f"Exporting form {state.id}: {state.total_items} BOM items, {len(state.cost_items)} cost items")
    return _render_workbook(build_form_grids(state))
