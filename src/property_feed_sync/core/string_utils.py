"""
String sanitization utilities for the property feed sync package.

This module provides the text-side coercion primitives applied to every
value read from the feed before it reaches the content store:

    - as_text: plain text safe for storage and display (no markup, no
      control characters, collapsed whitespace)
    - as_price_string: a clean numeric-looking price string
    - sanitize_post_content: rich but safe HTML for the post body
    - is_valid_url: syntactic check for absolute http(s)-style URLs

Functions in this module are pure and never raise for scalar input.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import re
import warnings
from typing import Any
from urllib.parse import urlsplit

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning


# Control characters except tab/newline/carriage return, which are folded
# into plain spaces by the whitespace collapse.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")
_NON_PRICE_CHARS = re.compile(r"[^\d.]")

# Tags kept by sanitize_post_content, with the attributes allowed on each.
ALLOWED_CONTENT_TAGS = {
    "a": {"href", "title", "target", "rel"},
    "abbr": {"title"},
    "b": set(),
    "blockquote": {"cite"},
    "br": set(),
    "code": set(),
    "div": {"class"},
    "em": set(),
    "h1": set(),
    "h2": set(),
    "h3": set(),
    "h4": set(),
    "h5": set(),
    "h6": set(),
    "hr": set(),
    "i": set(),
    "img": {"src", "alt", "title", "width", "height"},
    "li": set(),
    "ol": set(),
    "p": {"class"},
    "pre": set(),
    "span": {"class"},
    "strong": set(),
    "table": set(),
    "tbody": set(),
    "td": {"colspan", "rowspan"},
    "th": {"colspan", "rowspan"},
    "thead": set(),
    "tr": set(),
    "u": set(),
    "ul": set(),
}

# Tags removed together with everything inside them.
_DROPPED_CONTENT_TAGS = ["script", "style", "iframe", "object", "embed", "form", "noscript"]

_SAFE_URL_SCHEMES = ("http", "https", "mailto", "tel")


def _soup(markup: str) -> BeautifulSoup:
    # Short strings that look like paths or URLs trigger a bs4 warning.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        return BeautifulSoup(markup, "html.parser")


def as_text(value: Any) -> str:
    """
    Coerce a feed value to plain text safe for storage and display.

    Processing steps:
        1. None becomes an empty string, anything else is stringified
        2. HTML tags are stripped (their text content is kept)
        3. Control characters are removed
        4. Runs of whitespace collapse to one space and the ends are trimmed

    Args:
        value: Any scalar read from the feed.

    Returns:
        str: The sanitized text, possibly empty.

    Example:
        >>> as_text("  <b>Flat</b>\\n in   Kraków ")
        'Flat in Kraków'
        >>> as_text(None)
        ''
        >>> as_text(42)
        '42'
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""

    text = str(value)
    if "<" in text:
        text = _soup(text).get_text(" ")

    text = _CONTROL_CHARS.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def as_price_string(value: Any) -> str:
    """
    Reduce a raw price to digits and decimal points only.

    Args:
        value: The raw price, e.g. "250 000 PLN" or 250000.5.

    Returns:
        str: The cleaned price string, possibly empty.

    Example:
        >>> as_price_string("250 000 zł")
        '250000'
        >>> as_price_string("1.5k")
        '1.5'
    """
    if value is None or isinstance(value, bool):
        return ""
    return _NON_PRICE_CHARS.sub("", str(value))


def _is_safe_link(url: str) -> bool:
    scheme = urlsplit(url.strip()).scheme.lower()
    return scheme == "" or scheme in _SAFE_URL_SCHEMES


def sanitize_post_content(html: Any) -> str:
    """
    Clean a listing description down to rich but safe HTML.

    Formatting tags (paragraphs, lists, emphasis, links, images, tables)
    survive; script-like elements are removed with their content, unknown
    tags are unwrapped so their text is kept, attributes outside the
    per-tag allow-list (including every on* event handler) are dropped and
    links or images pointing at non-web schemes such as ``javascript:``
    lose that attribute.

    Args:
        html: The raw description from the feed. None yields "".

    Returns:
        str: The sanitized HTML fragment.

    Example:
        >>> sanitize_post_content('<p onclick="x()">Nice <script>bad()</script>flat</p>')
        '<p>Nice flat</p>'
    """
    if html is None:
        return ""

    soup = _soup(str(html))

    for tag in soup.find_all(_DROPPED_CONTENT_TAGS):
        tag.decompose()

    for tag in soup.find_all(True):
        allowed = ALLOWED_CONTENT_TAGS.get(tag.name)
        if allowed is None:
            tag.unwrap()
            continue

        for attribute in list(tag.attrs):
            if attribute not in allowed:
                del tag.attrs[attribute]
            elif attribute in ("href", "src") and not _is_safe_link(str(tag.attrs[attribute])):
                del tag.attrs[attribute]

    return _CONTROL_CHARS.sub("", str(soup)).strip()


def is_valid_url(value: Any) -> bool:
    """
    Check whether a value is a syntactically valid absolute URL.

    A valid URL is a string with a scheme, a host and no embedded
    whitespace. The value is expected to be trimmed by the caller.

    Example:
        >>> is_valid_url("http://x/1.jpg")
        True
        >>> is_valid_url("not-a-url")
        False
    """
    if not isinstance(value, str) or not value:
        return False
    if any(char.isspace() for char in value):
        return False

    try:
        parts = urlsplit(value)
    except ValueError:
        return False

    if not re.match(r"^[A-Za-z][A-Za-z0-9+.-]*$", parts.scheme or ""):
        return False
    return bool(parts.netloc) and bool(parts.hostname)
