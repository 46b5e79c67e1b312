"""
Indonesian numeric text handling.

Indonesian number format:
    - Thousand separator: . (dot)
    - Decimal separator: , (comma)
    - Examples: "4.953.154,00" -> 4953154.00
                "517.605" -> 517605.0

Parsing never raises: blank or unreadable text counts as 0 and is left
for the validator to reject where zero is not allowed.
"""
import math
import re
from typing import Any, Union

THOUSANDS_SEPARATOR = "."
DECIMAL_SEPARATOR = ","

NON_NUMERIC_PATTERN = re.compile(r"[^0-9,]")
GROUPING_PATTERN = re.compile(r"\B(?=(?:[0-9]{3})+(?![0-9]))")
# ASCII digits only, optional exponent
DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

Number = Union[int, float]


def normalize_numeric_text(text: Any) -> str:
    """
    Reformat text the way the form rewrites it on every keystroke.

    Keeps digits and the first decimal comma, then groups the integer
    part with dots. Anything else is dropped. A trailing comma is kept
    so a decimal can still be typed.

    Examples:
        >>> normalize_numeric_text("1234567")
        '1.234.567'
        >>> normalize_numeric_text("Rp 1.234,5x")
        '1.234,5'
        >>> normalize_numeric_text("12,3,4")
        '12,34'
    """
    if text is None:
        return ""

    raw = NON_NUMERIC_PATTERN.sub("", str(text))
    integer_part, separator, decimal_part = raw.partition(DECIMAL_SEPARATOR)
    decimal_part = decimal_part.replace(DECIMAL_SEPARATOR, "")
    integer_part = GROUPING_PATTERN.sub(THOUSANDS_SEPARATOR, integer_part)

    return integer_part + separator + decimal_part


def parse_number(value: Any) -> Number:
    """
    Parse Indonesian formatted text to a number.

    Algorithm:
        1. None -> 0, numbers are returned as they are
        2. Strip whitespace, empty -> 0
        3. Remove dots (thousand separators)
        4. First comma becomes the decimal point
        5. Unparsable -> 0

    Examples:
        >>> parse_number("4.953.154,25")
        4953154.25
        >>> parse_number("")
        0.0
        >>> parse_number("abc")
        0.0
    """
    if value is None:
        return 0.0
    if _is_number(value):
        return value

    cleaned = str(value).strip()
    if not cleaned:
        return 0.0

    normalized = cleaned.replace(THOUSANDS_SEPARATOR, "").replace(DECIMAL_SEPARATOR, ".", 1)
    return _to_float(normalized)


def parse_plain_number(value: Any) -> Number:
    """Parse plain numeric text ("3", "2.5"); anything unreadable is 0."""
    if value is None:
        return 0.0
    if _is_number(value):
        return 0.0 if isinstance(value, float) and math.isnan(value) else value

    cleaned = str(value).strip()
    if not cleaned:
        return 0.0
    return _to_float(cleaned)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_float(text: str) -> float:
    if not DECIMAL_PATTERN.fullmatch(text):
        return 0.0
    return float(text)
