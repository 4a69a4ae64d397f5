"""
Tests for free-text number, boolean and quantity coercion.
"""
import math

import pytest

from app.services.ingestion.value_coercion import (
    coerce_quantity,
    parse_boolean,
    parse_leading_int,
    parse_number,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("$1,250.00", 1250.0),
        ("€ 99.5", 99.5),
        ("£12", 12.0),
        ("  42  ", 42.0),
        (7, 7.0),
        (3.25, 3.25),
        ("-15", -15.0),
    ],
)
def test_parse_number_accepts_currency_text(raw, expected) -> None:
    assert parse_number(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "$", "abc", "1_000", "nan", "inf", math.inf, object()])
def test_parse_number_rejects_garbage(raw) -> None:
    assert parse_number(raw) is None


def test_parse_leading_int() -> None:
    assert parse_leading_int("12 pcs") == 12
    assert parse_leading_int("2.7") == 2
    assert parse_leading_int("-3") == -3
    assert parse_leading_int("pcs 12") is None
    assert parse_leading_int(None) is None


@pytest.mark.parametrize("raw", ["TRUE", "true", "1", "Yes", "y", 1, 1.0, True])
def test_parse_boolean_truthy(raw) -> None:
    assert parse_boolean(raw, False) is True


@pytest.mark.parametrize("raw", ["FALSE", "0", "no", "N", 0, False])
def test_parse_boolean_falsy(raw) -> None:
    assert parse_boolean(raw, True) is False


@pytest.mark.parametrize("raw", [None, "", "maybe", "2"])
def test_parse_boolean_falls_back_to_default(raw) -> None:
    assert parse_boolean(raw, True) is True
    assert parse_boolean(raw, False) is False


@pytest.mark.parametrize("raw", ["-5", "abc", "", "0"])
def test_coerce_quantity_clamps_with_one_warning(raw) -> None:
    warnings = []
    assert coerce_quantity(raw, 7, warnings) == 1
    assert len(warnings) == 1
    assert warnings[0].startswith("Row 7:")


def test_coerce_quantity_truncates_fractions() -> None:
    warnings = []
    assert coerce_quantity("2.9", 3, warnings) == 2
    assert coerce_quantity(5, 4, warnings) == 5
    assert warnings == []


def test_coerce_quantity_without_warning() -> None:
    warnings = []
    assert coerce_quantity("abc", 2, warnings, warn=False) == 1
    assert warnings == []


def test_coerce_quantity_messages() -> None:
    warnings = []
    coerce_quantity("abc", 4, warnings)
    coerce_quantity(-2, 5, warnings)
    assert warnings == [
        "Row 4: Invalid quantity 'abc', defaulted to 1",
        "Row 5: Quantity must be greater than 0, defaulted to 1",
    ]
