"""
Tests for clipboard paste ingestion.
"""
from app.services.ingestion import parse_clipboard_paste
from app.ui.viewmodels import ColumnVisibility


def test_rows_without_prices() -> None:
    result = parse_clipboard_paste("AP-515\tWireless Access Point\t10\nAP-MNT\tCeiling Mount Bracket\t10")

    assert [(i.no, i.part_number, i.quantity) for i in result.items] == [(1, "AP-515", 10), (2, "AP-MNT", 10)]
    assert all(i.unit_price is None and i.total_price is None for i in result.items)
    assert result.warnings == []
    assert result.warning_count == 0
    assert result.rows_received == 2
    assert not result.price_columns_enabled


def test_numbering_continues_after_existing_items() -> None:
    result = parse_clipboard_paste("SW-24\t24-port Switch\t1\r\nSW-48\t48-port Switch\t2\r\n", existing_item_count=4)
    assert [i.no for i in result.items] == [5, 6]


def test_header_and_instruction_rows_are_skipped_with_warnings() -> None:
    text = "\n".join([
        "Part Number\tProduct Description\tQTY\tUnit Price",
        "AP-515\tWireless Access Point\t2\t",
        "Note: add mounts later",
        "AP-MNT\tCeiling Mount Bracket\t2",
    ])
    result = parse_clipboard_paste(text)

    assert [i.part_number for i in result.items] == ["AP-515", "AP-MNT"]
    assert result.warnings == ["Row 1: Skipped non-data row", "Row 3: Skipped non-data row"]
    assert result.warning_count == 2
    assert result.rows_received == 4


def test_noise_heavy_paste_keeps_only_data() -> None:
    text = "\n".join([
        "Part Number\tProduct Description\tQTY",
        "FIREWALL-60F\tFortiGate 60F Firewall\t1\t800",
        "HOW TO USE: select one group",
        "Part Number\tProduct Description\tQTY\tUnit Price",
        "UPS-1500VA\tUPS 1500VA Battery Backup\t2\t350",
    ])
    result = parse_clipboard_paste(text)
    assert [i.part_number for i in result.items] == ["FIREWALL-60F", "UPS-1500VA"]
    assert result.warning_count == 3


def test_malformed_rows_are_rejected() -> None:
    text = "\n".join([
        "AP-515\tWireless Access Point",
        "\tWireless Access Point\t2",
        "AP-515\tWireless Access Point\tzero",
        "AP-515\tWireless Access Point\t0",
        "AP-515\tWireless Access Point\t3",
    ])
    result = parse_clipboard_paste(text)
    assert len(result.items) == 1
    assert result.items[0].quantity == 3
    assert result.warning_count == 4


def test_leading_integer_quantity() -> None:
    result = parse_clipboard_paste("AP-515\tWireless Access Point\t12 pcs\nAP-MNT\tBracket kit\t2.7")
    assert [i.quantity for i in result.items] == [12, 2]


def test_blank_lines_are_ignored_and_keep_row_numbers() -> None:
    result = parse_clipboard_paste("\n\nAP-515\tWireless Access Point\t2\n   \nPlease check\n")
    assert len(result.items) == 1
    assert result.rows_received == 2
    assert result.warnings == ["Row 5: Skipped non-data row"]


def test_prices_enable_columns_and_fill_totals() -> None:
    text = "AP-515\tWireless Access Point\t2\t$1,250.00\nAP-MNT\tCeiling Mount Bracket\t3\tcall"
    result = parse_clipboard_paste(text, column_visibility=ColumnVisibility())

    assert result.price_columns_enabled
    assert result.column_visibility.unit_price and result.column_visibility.total_price
    priced, unpriced = result.items
    assert priced.unit_price == 1250.0
    assert priced.total_price == 2500.0
    assert unpriced.unit_price is None
    assert unpriced.total_price is None


def test_prices_already_visible_are_not_reported_as_enabled() -> None:
    visibility = ColumnVisibility(unit_price=True, total_price=True)
    result = parse_clipboard_paste("AP-515\tWireless Access Point\t4\t25", column_visibility=visibility)

    assert not result.price_columns_enabled
    assert result.items[0].total_price == 100.0


def test_unit_price_only_visibility_masks_total() -> None:
    visibility = ColumnVisibility(unit_price=True)
    result = parse_clipboard_paste("AP-515\tWireless Access Point\t4\t25", column_visibility=visibility)

    # Positive prices switch on both columns when only one is visible
    assert result.price_columns_enabled
    assert result.items[0].total_price == 100.0


def test_zero_and_negative_prices() -> None:
    result = parse_clipboard_paste("AP-515\tWireless Access Point\t4\t0\nAP-MNT\tCeiling Mount Bracket\t1\t-20")

    zero, negative = result.items
    assert not result.price_columns_enabled
    assert zero.unit_price is None
    assert negative.unit_price is None


def test_zero_price_with_visible_columns_yields_zero_total() -> None:
    visibility = ColumnVisibility(unit_price=True, total_price=True)
    result = parse_clipboard_paste("AP-515\tWireless Access Point\t4\t0", column_visibility=visibility)
    assert result.items[0].unit_price == 0.0
    assert result.items[0].total_price == 0.0


def test_empty_input() -> None:
    result = parse_clipboard_paste("")
    assert result.items == []
    assert result.rows_received == 0
    assert result.warning_count == 0
