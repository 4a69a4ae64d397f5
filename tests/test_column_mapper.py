"""
Tests for header-to-field column mapping.
"""
from app.services.ingestion.column_mapper import map_bom_columns, map_cost_columns


def test_template_bom_header() -> None:
    columns = map_bom_columns(["No.", "Part Number", "Product Description", "QTY", "Unit Price", "Total Price"])
    assert columns.to_dict() == {
        "no": 0,
        "part_number": 1,
        "product_description": 2,
        "quantity": 3,
        "unit_price": 4,
        "total_price": 5,
    }


def test_reordered_and_abbreviated_headers() -> None:
    columns = map_bom_columns(["Quantity", "Description", "PN", "", "Unit Price (USD)"])
    assert columns.index("quantity") == 0
    assert columns.index("product_description") == 1
    assert columns.index("part_number") == 2
    assert columns.index("unit_price") == 4
    assert columns.fields == ["quantity", "product_description", "part_number", "unit_price"]


def test_missing_columns_are_absent_not_zero() -> None:
    columns = map_bom_columns(["Part Number", "Product Description", "QTY"])
    assert columns.index("no") is None
    assert not columns.has("unit_price")
    assert columns.index("total_price") is None


def test_quantity_requires_exact_header() -> None:
    columns = map_bom_columns(["Part Number", "Qty needed"])
    assert not columns.has("quantity")


def test_part_number_column_is_not_item_number() -> None:
    columns = map_bom_columns(["Part No", "Product Description", "Qty"])
    assert not columns.has("no")


def test_cost_header() -> None:
    columns = map_cost_columns(["Product Description", "QTY", "Unit Price", "Total Price", "Is Discount"])
    assert columns.to_dict() == {
        "product_description": 0,
        "quantity": 1,
        "unit_price": 2,
        "total_price": 3,
        "is_discount": 4,
    }


def test_headers_are_kept_as_text() -> None:
    columns = map_cost_columns([" Product Description ", None, 5])
    assert columns.headers == ["Product Description", "", "5"]
