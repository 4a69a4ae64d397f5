"""
Builds typed BOM and cost records from classified data rows.

Builders never raise. Each call returns a record or None, appends any
messages to the shared warnings list, and reports its decision so the
caller can keep row statistics.
"""
from typing import List, Optional, Tuple

from app.services.ingestion.column_mapper import ColumnMap
from app.services.ingestion.grid import SheetRow
from app.services.ingestion.stats import CORRECTED, SKIPPED, RowDecision
from app.services.ingestion.value_coercion import coerce_quantity, parse_boolean, parse_number
from app.ui.viewmodels import BomItem, CostItem


TOTAL_TOLERANCE = 0.005


def _quantity(
    row: SheetRow,
    columns: ColumnMap,
    warnings: List[str],
    validate: bool,
    decision: RowDecision,
) -> int:
    """Quantity cell coerced to >= 1; an absent column means 1."""
    if not columns.has("quantity"):
        return 1
    before = len(warnings)
    quantity = coerce_quantity(row.cell(columns.index("quantity")), row.number, warnings, warn=validate)
    if len(warnings) > before:
        decision.status = CORRECTED
        decision.add_reason("quantity_clamped")
    return quantity


def build_bom_record(
    row: SheetRow,
    columns: ColumnMap,
    warnings: List[str],
    validate: bool = True,
) -> Tuple[Optional[BomItem], RowDecision]:
    """
    Build a BOM item from a data row.

    With validation on, rows with neither part number nor description are
    rejected and bad quantities are clamped with a warning. Missing prices
    are never a reason to reject.
    """
    decision = RowDecision()
    part_number = row.text(columns.index("part_number"))
    description = row.text(columns.index("product_description"))

    if validate and not part_number and not description:
        warnings.append(f"Row {row.number}: Missing both part number and product description")
        decision.status = SKIPPED
        decision.add_reason("missing_identifiers")
        return None, decision

    no = row.index  # position of the row below a header on row 1
    if columns.has("no"):
        parsed_no = parse_number(row.cell(columns.index("no")))
        if parsed_no is not None and int(parsed_no) >= 1:
            no = int(parsed_no)
        elif validate:
            warnings.append(f"Row {row.number}: Invalid item number, using row position")
            decision.status = CORRECTED
            decision.add_reason("no_defaulted")

    quantity = _quantity(row, columns, warnings, validate, decision)

    prices = {}
    for name, label in (("unit_price", "unit price"), ("total_price", "total price")):
        value = parse_number(row.cell(columns.index(name))) if columns.has(name) else None
        if value is not None and value < 0:
            warnings.append(f"Row {row.number}: Negative {label} ignored")
            decision.status = CORRECTED
            decision.add_reason("negative_price")
            value = None
        prices[name] = value

    item = BomItem(
        no=max(no, 1),
        part_number=part_number,
        product_description=description,
        quantity=quantity,
        unit_price=prices["unit_price"],
        total_price=prices["total_price"],
    )
    return item, decision


def build_cost_record(
    row: SheetRow,
    columns: ColumnMap,
    warnings: List[str],
    validate: bool = True,
) -> Tuple[Optional[CostItem], RowDecision]:
    """
    Build a cost line from a data row.

    Costs are always priced: missing amounts default to 0. The total is
    derived from quantity x unit price; a sheet total that disagrees is
    reported. Negative amounts are taken as their absolute value, since
    the discount flag carries the sign.
    """
    decision = RowDecision()
    description = row.text(columns.index("product_description"))

    if validate and not description:
        warnings.append(f"Row {row.number}: Missing product description")
        decision.status = SKIPPED
        decision.add_reason("missing_description")
        return None, decision

    quantity = _quantity(row, columns, warnings, validate, decision)
    unit_price = parse_number(row.cell(columns.index("unit_price"))) if columns.has("unit_price") else None
    sheet_total = parse_number(row.cell(columns.index("total_price"))) if columns.has("total_price") else None
    is_discount = parse_boolean(row.cell(columns.index("is_discount")), False)

    if (unit_price is not None and unit_price < 0) or (sheet_total is not None and sheet_total < 0):
        warnings.append(f"Row {row.number}: Negative amount converted to a positive value")
        decision.status = CORRECTED
        decision.add_reason("negative_amount")
        unit_price = abs(unit_price) if unit_price is not None else None
        sheet_total = abs(sheet_total) if sheet_total is not None else None

    if unit_price is None:
        unit_price = sheet_total / quantity if sheet_total is not None else 0.0

    item = CostItem(
        product_description=description,
        quantity=quantity,
        unit_price=unit_price,
        is_discount=is_discount,
    )
    item.recalculate_total()

    if sheet_total is not None and abs(sheet_total - item.total_price) > TOTAL_TOLERANCE:
        warnings.append(
            f"Row {row.number}: Total price {sheet_total:.2f} does not match quantity x unit price, "
            f"using {item.total_price:.2f}"
        )
        decision.status = CORRECTED
        decision.add_reason("total_recalculated")

    return item, decision
