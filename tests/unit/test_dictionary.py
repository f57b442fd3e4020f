"""
Tests for the dictionary resolver and loader.
"""

import json

import pytest

from property_feed_sync.config.settings import DICTIONARY_FILE
from property_feed_sync.dictionary import (
    DictionaryCategory,
    DictionaryResolver,
    is_unspecified,
    load_dictionary,
)


class TestResolve:

    def test_resolves_code(self, resolver):
        assert resolver.resolve(DictionaryCategory.CURRENCY, 1) == "€"

    def test_numeric_and_text_codes_are_equivalent(self, resolver):
        assert resolver.resolve(DictionaryCategory.CURRENCY, "2") == "zł"
        assert resolver.resolve(DictionaryCategory.CURRENCY, 2.0) == "zł"

    def test_category_by_name(self, resolver):
        assert resolver.resolve("types", 1) == "Apartment"

    def test_missing_code_returns_default(self, resolver):
        assert resolver.resolve(DictionaryCategory.CURRENCY, 99, "X") == "X"

    def test_missing_category_returns_default(self, resolver):
        assert resolver.resolve("unknown_category", 1, "X") == "X"
        assert resolver.resolve(DictionaryCategory.KITCHEN_TYPES, 1) == ""

    def test_empty_code_returns_default(self, resolver):
        assert resolver.resolve(DictionaryCategory.CURRENCY, None, "d") == "d"
        assert resolver.resolve(DictionaryCategory.CURRENCY, "") == ""

    def test_labels_are_sanitized(self):
        resolver = DictionaryResolver({"types": {"1": "<b>Flat</b> "}})
        assert resolver.resolve(DictionaryCategory.TYPES, 1) == "Flat"

    def test_table_is_copied(self, sample_dictionary):
        resolver = DictionaryResolver(sample_dictionary)
        sample_dictionary["currency"]["1"] = "$"
        assert resolver.resolve(DictionaryCategory.CURRENCY, 1) == "€"

    def test_non_mapping_category_ignored(self):
        resolver = DictionaryResolver({"currency": ["€"], "types": {"1": "House"}})
        assert len(resolver) == 1
        assert resolver.resolve(DictionaryCategory.CURRENCY, 0, "none") == "none"


@pytest.mark.parametrize("label, expected", [
    ("dowolny", True),
    ("Dowolny", True),
    ("ANY", True),
    (" any ", True),
    ("", True),
    ("Brick", False),
    ("Anything", False),
])
def test_is_unspecified(label, expected):
    assert is_unspecified(label) is expected


class TestLoadDictionary:

    def test_loads_data_section(self, tmp_path):
        path = tmp_path / "dictionary.json"
        path.write_text(json.dumps({"success": True, "data": {"currency": {"1": "€"}}}), encoding="utf-8")
        assert load_dictionary(path) == {"currency": {"1": "€"}}

    def test_missing_file(self, tmp_path):
        assert load_dictionary(tmp_path / "missing.json") == {}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "dictionary.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_dictionary(path) == {}

    def test_unsuccessful_envelope(self, tmp_path):
        path = tmp_path / "dictionary.json"
        path.write_text(json.dumps({"success": False, "data": {"currency": {}}}), encoding="utf-8")
        assert load_dictionary(path) == {}

    def test_bundled_dictionary(self):
        resolver = DictionaryResolver(load_dictionary(DICTIONARY_FILE))
        assert len(resolver) == len(DictionaryCategory)
        assert resolver.resolve(DictionaryCategory.CURRENCY, 1) == "€"

    def test_feed_only_categories_resolve(self):
        resolver = DictionaryResolver(load_dictionary(DICTIONARY_FILE))
        assert resolver.resolve(DictionaryCategory.KITCHEN_TYPES, 2) == "Separate Kitchen"
        assert resolver.resolve(DictionaryCategory.APARTMENT_EQUIPMENTS, "1") == "Dishwasher"
        assert resolver.resolve(DictionaryCategory.BINARY, 1) == "Yes"
