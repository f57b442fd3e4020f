"""
Numeric coercion utilities for the property feed sync package.

The feed delivers numbers as ints, floats, numeric strings, comma-decimal
strings ("51,1") and occasionally free text. These helpers turn any of
them into a number without raising:

    - as_int: permissive integer coercion, 0 for non-numeric input
    - as_float: comma-tolerant float coercion, 0.0 for non-numeric input
    - parse_strict_float: whole-string float validation, None on failure

Author: Leonardo Pacciani-Mori
License: MIT
"""

import math
import re
from typing import Any, Optional


# Leading number of a string: optional sign, digits, optional fraction and
# exponent. Surrounding whitespace is ignored by the callers.
_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_STRICT_FLOAT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def _leading_number(text: str) -> Optional[float]:
    match = _LEADING_NUMBER.match(text.strip())
    if not match:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def as_int(value: Any) -> int:
    """
    Coerce a feed value to an integer.

    Strings contribute their leading number ("12 rooms" -> 12, "45.9" -> 45),
    floats are truncated towards zero and booleans count as 0/1. Anything
    that carries no number yields 0.

    Args:
        value: Any scalar read from the feed.

    Returns:
        int: The coerced integer.

    Example:
        >>> as_int("3")
        3
        >>> as_int("2.7")
        2
        >>> as_int("abc")
        0
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0

    number = _leading_number(str(value))
    if number is None or not math.isfinite(number):
        return 0
    return int(number)


def as_float(value: Any) -> float:
    """
    Coerce a feed value to a float, accepting a comma as decimal separator.

    Example:
        >>> as_float("45,5")
        45.5
        >>> as_float("n/a")
        0.0
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else 0.0

    number = _leading_number(str(value).replace(",", "."))
    if number is None or not math.isfinite(number):
        return 0.0
    return number


def parse_strict_float(value: Any) -> Optional[float]:
    """
    Parse a value as a float only if the whole value is a number.

    Unlike as_float, trailing garbage is rejected ("51.1abc" -> None). A
    comma is accepted as decimal separator. Used for coordinates, where a
    half-parsed value would place the property somewhere wrong.

    Args:
        value: The raw value, usually a string from the feed.

    Returns:
        Optional[float]: The parsed number, or None if the value is not a
            well-formed finite float.

    Example:
        >>> parse_strict_float("51,1")
        51.1
        >>> parse_strict_float("abc") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    text = str(value).strip().replace(",", ".")
    if not _STRICT_FLOAT.match(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None
