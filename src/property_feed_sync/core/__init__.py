"""
Core utilities module for the property feed sync package.

This module provides shared utilities used across the mapping and sync
stages, including value coercion, sanitization, date parsing and database
connections.

Submodules:
    connections: MongoDB connection management for the content store.
    string_utils: Plain-text and HTML sanitization, URL validation.
    numeric_utils: Permissive and strict numeric coercion.
    date_utils: Tolerant date parsing and timestamp formatting.
    dict_utils: Presence/emptiness helpers for loosely typed records.
"""

from .string_utils import as_text, as_price_string, sanitize_post_content, is_valid_url
from .numeric_utils import as_int, as_float, parse_strict_float
from .date_utils import parse_feed_datetime, to_local_and_gmt, format_store_date
from .dict_utils import is_present, is_empty, first_present, unique_ordered, normalize_code
