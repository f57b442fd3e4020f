"""
Shared pytest fixtures for the property feed sync test suite.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from io import BytesIO

import pytest
from PIL import Image

from property_feed_sync.dictionary import DictionaryResolver
from property_feed_sync.exceptions import ImageError
from property_feed_sync.mapping import PropertyMapper
from property_feed_sync.store import InMemoryContentStore


SAMPLE_DICTIONARY = {
    "currency": {"1": "€", "2": "zł"},
    "building_condition": {"0": "dowolny", "1": "Very Good", "2": "To Renovate"},
    "heating": {"1": "Gas Heating", "2": "District Heating"},
    "types": {"0": "Any", "1": "Apartment", "2": "House"},
    "market": {"0": "Any", "1": "Primary Market", "2": "Secondary Market"},
    "apartment_ownership": {"1": "Full Ownership", "2": "ANY"},
    "apartment_furnishings": {"1": "Furnished"},
    "building_type": {"1": "Block of Flats"},
    "building_material": {"1": "Brick"},
    "apartment_equipment": {"1": "Sauna", "2": "Kabina prysznicowa"},
    "apartment_bathroom_type": {"1": "Shower", "2": "Bathtub"},
}

AGENCY_MAP = {"145581": 2792}


def make_png(width: int = 400, height: int = 300, color: str = "red") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeFetcher:
    """
    Image fetcher standing in for the HTTP download.

    Returns a generated PNG for every URL except those listed in
    failing_urls, and records every call.
    """

    def __init__(self):
        self.calls = []
        self.failing_urls = set()

    def __call__(self, url):
        self.calls.append(url)
        if url in self.failing_urls:
            raise ImageError(f"Error 404 when fetching {url}")
        name = url.rstrip("/").rsplit("/", 1)[-1].rsplit(".", 1)[0] or "image"
        return make_png(), f"{name}.png", "image/png"


@pytest.fixture
def png_factory():
    return make_png


@pytest.fixture
def sample_dictionary():
    return {category: dict(entries) for category, entries in SAMPLE_DICTIONARY.items()}


@pytest.fixture
def resolver(sample_dictionary):
    return DictionaryResolver(sample_dictionary)


@pytest.fixture
def mapper(resolver):
    return PropertyMapper(resolver, agency_map=AGENCY_MAP, site_timezone="UTC")


@pytest.fixture
def fetcher():
    return FakeFetcher()


@pytest.fixture
def media_root(tmp_path):
    return tmp_path / "media"


@pytest.fixture
def store(media_root, fetcher):
    return InMemoryContentStore(media_root=media_root, fetcher=fetcher)


@pytest.fixture
def placeholder_path(tmp_path):
    path = tmp_path / "default-thumbnail.png"
    path.write_bytes(make_png(200, 200, "gray"))
    return path


@pytest.fixture
def flat_a_record():
    return {
        "id": 7,
        "portalTitle": "Flat A",
        "price": "250000",
        "priceCurrency": 1,
        "areaTotal": "45.5",
        "pictures": ["http://x/1.jpg", "not-a-url", "http://x/2.jpg"],
    }
