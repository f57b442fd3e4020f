"""
Property detail mappers: identifiers, price, size, rooms, building, garage.

Each public method maps one slice of the raw record into metadata and is
registered as its own step by the orchestrator, so the steps keep the
fixed order identifiers -> price -> size/area -> rooms -> building ->
garage.

Rules:
    - Price is cleaned to digits and dots; the currency symbol resolved
      from the dictionary is written both as currency and price prefix.
    - Sizes are text values written only when their float value is > 0.
    - Room counts are integers written when present and >= 0.
    - Building details are integers written only when > 0.
    - Garage count comes from the explicit count, else from the
      underground-parking flag, else it is left out.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict

from property_feed_sync.core.dict_utils import is_present
from property_feed_sync.core.numeric_utils import as_float, as_int
from property_feed_sync.core.string_utils import as_price_string, as_text
from property_feed_sync.dictionary.resolver import DictionaryCategory, DictionaryResolver
from property_feed_sync.mapping.keys import AREA_UNIT, MetaKey
from property_feed_sync.mapping.record import NormalizedRecord, RecordPatch, correlation_id


# Feed field -> metadata key, kept when the integer value is >= 0.
ROOM_COUNT_FIELDS = {
    "apartmentRoomNumber": MetaKey.ROOMS,
    "apartmentBedroomNumber": MetaKey.BEDROOMS,
    "apartmentBathroomNumber": MetaKey.BATHROOMS,
    "apartmentToiletNumber": MetaKey.RESTROOMS,
}

# Feed field -> metadata key, kept when the integer value is > 0.
BUILDING_FIELDS = {
    "buildingYear": MetaKey.YEAR_BUILT,
    "apartmentFloor": MetaKey.FLOOR_NO,
    "buildingFloornumber": MetaKey.TOTAL_FLOORS,
}

# Feed field -> (value key, unit key), kept when the float value is > 0.
AREA_FIELDS = {
    "areaTotal": (MetaKey.SIZE, MetaKey.SIZE_PREFIX),
    "areaPlot": (MetaKey.LAND_AREA, MetaKey.LAND_AREA_POSTFIX),
}


class PropertyDetailsMapper:
    """Map identifiers and the numeric details of a property."""

    def __init__(self, resolver: DictionaryResolver):
        self.resolver = resolver

    def map_identifiers_and_defaults(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        """
        Write the correlation id, the display id, fixed defaults and the
        featured flag.

        The featured flag reads isFeatured, falling back to labelNew; it is
        "1" only when that value coerces to 1.
        """
        patch = RecordPatch()
        patch.set_meta(MetaKey.JSON_ID, correlation_id(raw.get("id")))
        patch.set_meta(
            MetaKey.PROPERTY_ID,
            as_text(raw["number"] if is_present(raw, "number") else raw.get("id", "")),
        )
        patch.set_meta(MetaKey.HOMESLIDER, "no")

        featured_flag = raw.get("isFeatured")
        if featured_flag is None:
            featured_flag = raw.get("labelNew", 0)
        patch.set_meta(MetaKey.FEATURED_PROPERTY, "1" if as_int(featured_flag) == 1 else "0")
        return patch

    def map_price(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        patch = RecordPatch()

        if is_present(raw, "price"):
            price = as_price_string(raw["price"])
            if price:
                patch.set_meta(MetaKey.PRICE, price)

        if is_present(raw, "priceCurrency"):
            symbol = self.resolver.resolve(DictionaryCategory.CURRENCY, raw["priceCurrency"])
            if symbol:
                patch.set_meta(MetaKey.CURRENCY, symbol)
                patch.set_meta(MetaKey.PRICE_PREFIX, symbol)

        if is_present(raw, "pricePermeter") and as_float(raw["pricePermeter"]) > 0:
            patch.set_meta(MetaKey.SECOND_PRICE, as_price_string(raw["pricePermeter"]))
            patch.set_meta(MetaKey.PRICE_POSTFIX, AREA_UNIT)

        return patch

    def map_size_area(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        patch = RecordPatch()
        for source_field, (value_key, unit_key) in AREA_FIELDS.items():
            if is_present(raw, source_field) and as_float(raw[source_field]) > 0:
                patch.set_meta(value_key, as_text(raw[source_field]))
                patch.set_meta(unit_key, AREA_UNIT)
        return patch

    def map_room_counts(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        # Zero is a valid room count (e.g. a studio with no separate bedroom).
        patch = RecordPatch()
        for source_field, meta_key in ROOM_COUNT_FIELDS.items():
            if not is_present(raw, source_field):
                continue
            count = as_int(raw[source_field])
            if count >= 0:
                patch.set_meta(meta_key, count)
        return patch

    def map_building_details(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        patch = RecordPatch()
        for source_field, meta_key in BUILDING_FIELDS.items():
            if not is_present(raw, source_field):
                continue
            value = as_int(raw[source_field])
            if value > 0:
                patch.set_meta(meta_key, value)
        return patch

    def map_garage(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        """
        Derive the garage count.

        Example:
            >>> mapper.map_garage({"additionalGarage": 0, "additionalParkingunderground": 1}, record).metadata
            {'fave_property_garage': '1'}
        """
        garage_count = 0
        if is_present(raw, "additionalGarage") and as_int(raw["additionalGarage"]) > 0:
            garage_count = as_int(raw["additionalGarage"])
        elif is_present(raw, "additionalParkingunderground") and as_int(raw["additionalParkingunderground"]) == 1:
            garage_count = 1

        patch = RecordPatch()
        if garage_count > 0:
            patch.set_meta(MetaKey.GARAGE_NUMBER, str(garage_count))
        return patch
