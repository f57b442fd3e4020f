"""
Tests for the text sanitization helpers.
"""

import pytest

from property_feed_sync.core.string_utils import (
    as_price_string,
    as_text,
    is_valid_url,
    sanitize_post_content,
)


class TestAsText:

    def test_strips_markup_and_collapses_whitespace(self):
        assert as_text("  <b>Flat</b>\n in   Kraków ") == "Flat in Kraków"

    def test_none_is_empty(self):
        assert as_text(None) == ""

    def test_numbers_are_stringified(self):
        assert as_text(42) == "42"
        assert as_text(45.5) == "45.5"

    def test_control_characters_removed(self):
        assert as_text("Flat\x00\x07 A") == "Flat A"

    def test_booleans(self):
        assert as_text(True) == "1"
        assert as_text(False) == ""


class TestAsPriceString:

    @pytest.mark.parametrize("raw, expected", [
        ("250 000 zł", "250000"),
        ("1.5k", "1.5"),
        (250000, "250000"),
        ("PLN", ""),
        (None, ""),
    ])
    def test_keeps_digits_and_dots(self, raw, expected):
        assert as_price_string(raw) == expected


class TestSanitizePostContent:

    def test_drops_scripts_and_event_handlers(self):
        html = '<p onclick="x()">Nice <script>bad()</script>flat</p>'
        assert sanitize_post_content(html) == "<p>Nice flat</p>"

    def test_keeps_formatting(self):
        html = "<p>Two <strong>rooms</strong></p><ul><li>Balcony</li></ul>"
        assert sanitize_post_content(html) == html

    def test_unwraps_unknown_tags(self):
        assert sanitize_post_content("<section><p>Hi</p></section>") == "<p>Hi</p>"

    def test_removes_javascript_links(self):
        result = sanitize_post_content('<a href="javascript:alert(1)">x</a>')
        assert result == "<a>x</a>"

    def test_keeps_web_links(self):
        html = '<a href="https://example.com/offer">offer</a>'
        assert sanitize_post_content(html) == html

    def test_none_is_empty(self):
        assert sanitize_post_content(None) == ""


class TestIsValidUrl:

    @pytest.mark.parametrize("value", [
        "http://x/1.jpg",
        "https://cdn.example.com/img/photo.jpg?w=800",
    ])
    def test_valid(self, value):
        assert is_valid_url(value)

    @pytest.mark.parametrize("value", [
        "not-a-url",
        "",
        None,
        "http://",
        "//x/1.jpg",
        "http://x/a b.jpg",
        42,
    ])
    def test_invalid(self, value):
        assert not is_valid_url(value)
