"""
Tests for date parsing and the record dictionary helpers.
"""

import datetime

from dateutil import tz

from property_feed_sync.core.date_utils import (
    format_store_date,
    parse_feed_datetime,
    to_local_and_gmt,
)
from property_feed_sync.core.dict_utils import (
    first_present,
    is_empty,
    is_present,
    normalize_code,
    unique_ordered,
)


class TestParseFeedDatetime:

    def test_iso_like(self):
        parsed, error = parse_feed_datetime("2024-01-15 10:30:00")
        assert parsed == datetime.datetime(2024, 1, 15, 10, 30)
        assert error is None

    def test_iso_with_t_separator(self):
        parsed, _ = parse_feed_datetime("2024-03-01T08:05:09")
        assert parsed == datetime.datetime(2024, 3, 1, 8, 5, 9)

    def test_unparseable(self):
        parsed, error = parse_feed_datetime("not a date")
        assert parsed is None
        assert "not a date" in error

    def test_empty(self):
        assert parse_feed_datetime("  ") == (None, "empty date value")
        assert parse_feed_datetime(None)[0] is None


class TestToLocalAndGmt:

    def test_naive_value_is_site_local(self):
        local, gmt = to_local_and_gmt(datetime.datetime(2024, 1, 15, 10, 30), "Europe/Warsaw")
        assert local == "2024-01-15 10:30:00"
        assert gmt == "2024-01-15 09:30:00"

    def test_aware_value_is_converted(self):
        value = datetime.datetime(2024, 7, 1, 12, 0, tzinfo=tz.UTC)
        local, gmt = to_local_and_gmt(value, "Europe/Warsaw")
        assert local == "2024-07-01 14:00:00"
        assert gmt == "2024-07-01 12:00:00"

    def test_unknown_timezone_falls_back_to_utc(self):
        local, gmt = to_local_and_gmt(datetime.datetime(2024, 1, 15, 10, 30), "Not/AZone")
        assert local == gmt == "2024-01-15 10:30:00"


def test_format_store_date():
    assert format_store_date(datetime.datetime(2024, 5, 1, 23, 59)) == "2024-05-01"


class TestDictHelpers:

    def test_is_present(self):
        assert is_present({"a": 0}, "a")
        assert not is_present({"a": None}, "a")
        assert not is_present({}, "a")

    def test_is_empty(self):
        for value in (None, "", "0", 0, 0.0, False, [], {}):
            assert is_empty(value)
        for value in ("Kraków", 1, "00", [0]):
            assert not is_empty(value)

    def test_first_present(self):
        record = {"descriptionWebsite": None, "description": "b"}
        assert first_present(record, "descriptionWebsite", "description") == "b"
        assert first_present({}, "x", default="d") == "d"

    def test_first_present_keeps_empty_string(self):
        record = {"descriptionWebsite": "", "description": "b"}
        assert first_present(record, "descriptionWebsite", "description") == ""

    def test_unique_ordered(self):
        assert unique_ordered(["New", "Featured", "New"]) == ["New", "Featured"]

    def test_normalize_code(self):
        assert normalize_code(1) == "1"
        assert normalize_code(1.0) == "1"
        assert normalize_code(" 12 ") == "12"
        assert normalize_code("") is None
        assert normalize_code(None) is None
