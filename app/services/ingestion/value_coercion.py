"""
Coercion of free-text cell content into numbers, booleans and quantities.

Nothing in here raises for bad data: unparseable input degrades to
None, a default, or a clamped value plus a warning.
"""
import math
import re
from typing import Any, List, Optional

_NUMBER_NOISE = re.compile(r"[$€£¥,\s]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

TRUE_TOKENS = frozenset({"true", "1", "yes", "y"})
FALSE_TOKENS = frozenset({"false", "0", "no", "n"})


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a cell into a finite float.

    Strings have currency symbols, thousands separators and whitespace
    removed first ("$1,250.00" -> 1250.0). Empty, unparseable and
    non-finite input returns None.
    """
    if value is None:
        return None

    if isinstance(value, str):
        cleaned = _NUMBER_NOISE.sub("", value)
        if cleaned == "" or "_" in cleaned:
            return None
        try:
            number = float(cleaned)
        except ValueError:
            return None
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None

    if not math.isfinite(number):
        return None
    return number


def parse_leading_int(text: Any) -> Optional[int]:
    """Integer prefix of a string ("12 pcs" -> 12, "2.7" -> 2), or None."""
    if text is None:
        return None
    match = _LEADING_INT.match(str(text))
    if not match:
        return None
    return int(match.group(1))


def parse_boolean(value: Any, default: bool) -> bool:
    """Yes/no style cell to bool; anything unrecognised yields the default."""
    if value is None:
        return default
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    token = str(value).strip().lower()
    if token == "":
        return default
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    return default


def coerce_quantity(
    value: Any,
    row_number: int,
    warnings: List[str],
    warn: bool = True,
) -> int:
    """
    Coerce a quantity cell to an integer >= 1.

    Fractions are truncated. Missing, unparseable or non-positive input
    becomes 1, with one warning naming the row when ``warn`` is set.
    """
    number = parse_number(value)
    quantity = int(number) if number is not None else 0
    if quantity > 0:
        return quantity

    if warn:
        raw = "" if value is None else str(value).strip()
        if number is None:
            warnings.append(f"Row {row_number}: Invalid quantity '{raw}', defaulted to 1")
        else:
            warnings.append(f"Row {row_number}: Quantity must be greater than 0, defaulted to 1")
    return 1
