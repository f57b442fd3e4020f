"""
Address and map-coordinate mapper.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict

from property_feed_sync.config.settings import DEFAULT_MAP_ZOOM
from property_feed_sync.core.dict_utils import is_empty
from property_feed_sync.core.numeric_utils import parse_strict_float
from property_feed_sync.core.string_utils import as_text
from property_feed_sync.mapping.keys import MetaKey
from property_feed_sync.mapping.record import NormalizedRecord, RecordPatch


# Feed fields joined, in order, after the street into the map address.
MAP_ADDRESS_FIELDS = [
    "locationCityName",
    "locationPostal",
    "locationProvinceName",
    "locationCountryName",
]


class AddressMapper:
    """
    Map the street address, the map address and the coordinates.

    Coordinates are accepted only when both latitude and longitude parse
    completely as floats (a comma is accepted as decimal separator). The
    street-view flag is always "show".
    """

    def __init__(self, zoom: int = DEFAULT_MAP_ZOOM):
        self.zoom = zoom

    def map(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        patch = RecordPatch()

        street = as_text(raw.get("locationStreetName"))
        if not is_empty(street):
            patch.set_meta(MetaKey.ADDRESS, street)
        if not is_empty(raw.get("locationPostal")):
            patch.set_meta(MetaKey.ZIP, as_text(raw["locationPostal"]))

        map_address = self._build_map_address(street, raw)
        if map_address:
            patch.set_meta(MetaKey.MAP_ADDRESS, map_address)

        self._set_coordinates(patch, raw)
        patch.set_meta(MetaKey.MAP_STREET_VIEW, "show")
        return patch

    def _build_map_address(self, street: str, raw: Dict[str, Any]) -> str:
        parts = [street] if not is_empty(street) else []
        for source_field in MAP_ADDRESS_FIELDS:
            if not is_empty(raw.get(source_field)):
                parts.append(as_text(raw[source_field]))

        map_address = ", ".join(part for part in parts if part)
        if not map_address and not is_empty(street):
            return street
        return map_address

    def _set_coordinates(self, patch: RecordPatch, raw: Dict[str, Any]) -> None:
        latitude = as_text(raw.get("locationLatitude")) if not is_empty(raw.get("locationLatitude")) else ""
        longitude = as_text(raw.get("locationLongitude")) if not is_empty(raw.get("locationLongitude")) else ""

        lat_value = parse_strict_float(latitude) if latitude else None
        lng_value = parse_strict_float(longitude) if longitude else None

        if lat_value is None or lng_value is None:
            patch.set_meta(MetaKey.MAP_ENABLED, "0")
            return

        lat_text = f"{lat_value:.6f}"
        lng_text = f"{lng_value:.6f}"
        patch.set_meta(MetaKey.LOCATION_COORDS, f"{lat_text},{lng_text},{self.zoom}")
        patch.set_meta(MetaKey.LATITUDE, lat_text)
        patch.set_meta(MetaKey.LONGITUDE, lng_text)
        patch.set_meta(MetaKey.MAP_ENABLED, "1")
