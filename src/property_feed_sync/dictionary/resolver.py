"""
Coded-value dictionary for the property feed sync package.

Many feed attributes are numeric codes (currency 1, building type 3, ...)
whose display labels live in a separate dictionary resource. This module
types the dictionary categories, loads the resource, and resolves codes to
sanitized labels.

Resolution never raises: an empty code, an unknown category or an unknown
code resolves to the caller-supplied default.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.core.dict_utils import normalize_code
from property_feed_sync.core.string_utils import as_text

logger = get_logger(__name__)


DictionaryTable = Dict[str, Dict[str, str]]


class DictionaryCategory(Enum):
    """
    Categories of the coded-value dictionary.

    KITCHEN_TYPES, APARTMENT_EQUIPMENTS and BINARY mirror categories shipped
    in the feed dictionary file; no mapper resolves them, but they load and
    resolve like the others.
    """
    CURRENCY = "currency"
    BUILDING_CONDITION = "building_condition"
    HEATING = "heating"
    KITCHEN_TYPES = "kitchen_types"
    APARTMENT_EQUIPMENTS = "apartment_equipments"
    BINARY = "binary"
    TYPES = "types"
    MARKET = "market"
    APARTMENT_OWNERSHIP = "apartment_ownership"
    APARTMENT_FURNISHINGS = "apartment_furnishings"
    BUILDING_TYPE = "building_type"
    BUILDING_MATERIAL = "building_material"
    APARTMENT_EQUIPMENT = "apartment_equipment"
    APARTMENT_BATHROOM_TYPE = "apartment_bathroom_type"


# Labels meaning "unspecified" in the feed, compared case-insensitively.
UNSPECIFIED_SENTINELS = frozenset({"dowolny", "any"})


def is_unspecified(label: str) -> bool:
    """
    Return True if a resolved label is empty or an "unspecified" sentinel.

    Example:
        >>> is_unspecified("Dowolny")
        True
        >>> is_unspecified("Brick")
        False
    """
    return not label or label.strip().lower() in UNSPECIFIED_SENTINELS


class DictionaryResolver:
    """
    Resolve coded feed values to display labels.

    The table is copied and its codes normalized on construction, so 1,
    "1" and 1.0 all resolve to the same entry and later changes to the
    source mapping do not leak into a running sync.

    Attributes:
        table: Normalized mapping of category name to {code: label}.

    Example:
        >>> resolver = DictionaryResolver({"currency": {"1": "€"}})
        >>> resolver.resolve(DictionaryCategory.CURRENCY, 1)
        '€'
        >>> resolver.resolve(DictionaryCategory.CURRENCY, 99, "X")
        'X'
    """

    def __init__(self, table: Optional[Mapping[str, Mapping[Any, Any]]] = None):
        self.table: DictionaryTable = {}
        for category, entries in (table or {}).items():
            if not isinstance(entries, Mapping):
                logger.warning(f"Ignoring dictionary category '{category}': not a mapping")
                continue
            normalized = {}
            for code, label in entries.items():
                key = normalize_code(code)
                if key is not None:
                    normalized[key] = label
            self.table[str(category)] = normalized

    def resolve(
        self,
        category: Union[DictionaryCategory, str],
        code: Any,
        default: str = ""
    ) -> str:
        """
        Look up the label for a coded value.

        Args:
            category: The dictionary category (enum member or its name).
            code: The coded value from the feed. None or "" yields default.
            default: Value returned when the code cannot be resolved.

        Returns:
            str: The sanitized label, or default.
        """
        key = normalize_code(code)
        if key is None:
            return default

        category_name = category.value if isinstance(category, DictionaryCategory) else str(category)
        entries = self.table.get(category_name)
        if entries is None or key not in entries:
            logger.debug(f"Dictionary key '{category_name}' or item value key '{key}' not found")
            return default

        return as_text(entries[key])

    def __len__(self) -> int:
        return len(self.table)


def load_dictionary(path: Union[str, Path]) -> DictionaryTable:
    """
    Load the dictionary resource from a JSON file.

    The file must have the shape {"success": true, "data": {category:
    {code: label}}}. A missing file, invalid JSON, or an envelope without
    success/data yields an empty table: the sync then runs with every code
    unresolved rather than not at all.

    Args:
        path: Path to the dictionary JSON file.

    Returns:
        DictionaryTable: The category table, possibly empty.

    Example:
        >>> table = load_dictionary("data/dictionary.json")
        >>> resolver = DictionaryResolver(table)
    """
    path = Path(path)
    if not path.is_file():
        logger.error(f"Dictionary file not found: {path}")
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Could not read dictionary file {path}: {e}")
        return {}

    if not isinstance(payload, dict) or not payload.get("success") or not isinstance(payload.get("data"), dict):
        logger.error(f"Dictionary file {path} has no successful 'data' section")
        return {}

    table = payload["data"]
    logger.info(f"Loaded dictionary with {len(table)} categories from {path}")
    return table
