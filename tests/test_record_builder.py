"""
Tests for BOM and cost record construction from data rows.
"""
import pytest

from app.services.ingestion.column_mapper import map_bom_columns, map_cost_columns
from app.services.ingestion.grid import SheetRow
from app.services.ingestion.record_builder import build_bom_record, build_cost_record
from app.services.ingestion.stats import CORRECTED, EXTRACTED, SKIPPED

BOM_COLUMNS = map_bom_columns(["No.", "Part Number", "Product Description", "QTY", "Unit Price", "Total Price"])
COST_COLUMNS = map_cost_columns(["Product Description", "QTY", "Unit Price", "Total Price", "Is Discount"])


def row(*cells, index=4) -> SheetRow:
    return SheetRow.from_cells(index, cells)


def test_bom_record_from_full_row() -> None:
    warnings = []
    item, decision = build_bom_record(row(3, "AP-515", "Wireless Access Point", 10, "$300.00", 3000), BOM_COLUMNS, warnings)
    assert item.model_dump() == {
        "no": 3,
        "part_number": "AP-515",
        "product_description": "Wireless Access Point",
        "quantity": 10,
        "unit_price": 300.0,
        "total_price": 3000.0,
    }
    assert decision.status == EXTRACTED
    assert warnings == []


def test_bom_record_without_identifiers_is_rejected() -> None:
    warnings = []
    item, decision = build_bom_record(row(1, "", " ", 2), BOM_COLUMNS, warnings)
    assert item is None
    assert decision.status == SKIPPED
    assert warnings == ["Row 5: Missing both part number and product description"]


def test_bom_record_with_only_a_description_is_kept() -> None:
    item, _ = build_bom_record(row(1, "", "Site Survey", 1), BOM_COLUMNS, [])
    assert item.product_description == "Site Survey"
    assert item.part_number == ""


def test_bad_item_number_defaults_to_row_position() -> None:
    warnings = []
    item, decision = build_bom_record(row("x", "AP-515", "Wireless Access Point", 1), BOM_COLUMNS, warnings)
    assert item.no == 4
    assert decision.status == CORRECTED
    assert warnings == ["Row 5: Invalid item number, using row position"]


def test_missing_item_number_column_is_silent() -> None:
    columns = map_bom_columns(["Part Number", "Product Description", "QTY"])
    warnings = []
    item, _ = build_bom_record(row("AP-515", "Wireless Access Point", 1, index=7), columns, warnings)
    assert item.no == 7
    assert warnings == []


@pytest.mark.parametrize("qty", ["-5", "abc", "", "0"])
def test_bad_quantity_is_clamped_with_one_warning(qty) -> None:
    warnings = []
    item, decision = build_bom_record(row(1, "AP-515", "Wireless Access Point", qty), BOM_COLUMNS, warnings)
    assert item.quantity == 1
    assert len(warnings) == 1
    assert "defaulted to 1" in warnings[0]
    assert "quantity_clamped" in decision.reasons


def test_missing_quantity_column_means_one() -> None:
    columns = map_bom_columns(["Part Number", "Product Description"])
    warnings = []
    item, _ = build_bom_record(row("AP-515", "Wireless Access Point"), columns, warnings)
    assert item.quantity == 1
    assert warnings == []


def test_missing_prices_never_reject() -> None:
    item, decision = build_bom_record(row(1, "AP-515", "Wireless Access Point", 2), BOM_COLUMNS, [])
    assert item.unit_price is None
    assert item.total_price is None
    assert decision.is_kept


def test_negative_bom_price_is_dropped() -> None:
    warnings = []
    item, _ = build_bom_record(row(1, "AP-515", "Wireless Access Point", 2, -10), BOM_COLUMNS, warnings)
    assert item.unit_price is None
    assert warnings == ["Row 5: Negative unit price ignored"]


def test_validation_off_keeps_unidentified_rows_and_stays_quiet() -> None:
    warnings = []
    item, _ = build_bom_record(row("x", "", "", "abc"), BOM_COLUMNS, warnings, validate=False)
    assert item is not None
    assert item.quantity == 1
    assert warnings == []


def test_cost_record_derives_total() -> None:
    warnings = []
    item, decision = build_cost_record(row("Project Management", 3, 250, "", "no"), COST_COLUMNS, warnings)
    assert item.total_price == 750.0
    assert item.is_discount is False
    assert decision.status == EXTRACTED
    assert warnings == []


def test_cost_record_without_description_is_rejected() -> None:
    warnings = []
    item, decision = build_cost_record(row("", 1, 100), COST_COLUMNS, warnings)
    assert item is None
    assert decision.status == SKIPPED
    assert warnings == ["Row 5: Missing product description"]


def test_cost_prices_default_to_zero() -> None:
    item, _ = build_cost_record(row("Goodwill Credit"), COST_COLUMNS, [])
    assert item.unit_price == 0.0
    assert item.total_price == 0.0
    assert item.quantity == 1


def test_cost_unit_price_derived_from_total() -> None:
    item, _ = build_cost_record(row("Cabling Labour", 4, "", 1000), COST_COLUMNS, [])
    assert item.unit_price == 250.0
    assert item.total_price == 1000.0


def test_negative_cost_amounts_become_positive() -> None:
    warnings = []
    item, decision = build_cost_record(row("Volume Discount", 1, -100, -100, "TRUE"), COST_COLUMNS, warnings)
    assert item.unit_price == 100.0
    assert item.total_price == 100.0
    assert item.is_discount is True
    assert item.signed_total == -100.0
    assert warnings == ["Row 5: Negative amount converted to a positive value"]
    assert decision.status == CORRECTED


def test_disagreeing_cost_total_is_recomputed() -> None:
    warnings = []
    item, _ = build_cost_record(row("Support Contract", 2, 300, 500), COST_COLUMNS, warnings)
    assert item.total_price == 600.0
    assert warnings == ["Row 5: Total price 500.00 does not match quantity x unit price, using 600.00"]
