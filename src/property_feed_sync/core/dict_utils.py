"""
Record access helpers for the property feed sync package.

Feed records are loosely typed dictionaries in which any key may be
missing, None, or an empty string. These helpers give the mappers one
consistent vocabulary for "present" and "empty".

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict, Hashable, Iterable, List, Optional


def is_present(record: Dict[str, Any], key: str) -> bool:
    """Return True if the key exists and its value is not None."""
    return record.get(key) is not None


def is_empty(value: Any) -> bool:
    """
    Return True for None, "", "0", 0, 0.0, False and empty containers.

    Example:
        >>> is_empty("0")
        True
        >>> is_empty("Kraków")
        False
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return not value


def first_present(record: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    Return the value of the first key that is present (not None).

    Example:
        >>> first_present({"description": "b"}, "descriptionWebsite", "description")
        'b'
    """
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return default


def unique_ordered(values: Iterable[Hashable]) -> List[Any]:
    """
    Deduplicate values while keeping the first occurrence order.

    Example:
        >>> unique_ordered(["New", "Featured", "New"])
        ['New', 'Featured']
    """
    seen = set()
    result = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


def normalize_code(code: Any) -> Optional[str]:
    """
    Normalize a coded value so that 1, "1" and 1.0 compare equal.

    Returns None for None and empty strings.

    Example:
        >>> normalize_code(1.0)
        '1'
        >>> normalize_code(" 12 ")
        '12'
    """
    if code is None or isinstance(code, bool):
        return None if code is None else str(int(code))
    if isinstance(code, float) and code.is_integer():
        return str(int(code))

    text = str(code).strip()
    return text or None
