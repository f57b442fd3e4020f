"""
Taxonomy mapper: property type, location, status and labels.

The label step reads the featured flag written by the identifiers step, so
it must run after it; the orchestrator guarantees that order.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict, List

from property_feed_sync.core.dict_utils import is_empty, is_present
from property_feed_sync.core.numeric_utils import as_int
from property_feed_sync.core.string_utils import as_text
from property_feed_sync.dictionary.resolver import (
    DictionaryCategory,
    DictionaryResolver,
    is_unspecified,
)
from property_feed_sync.mapping.keys import FeedCode, MetaKey, Taxonomy
from property_feed_sync.mapping.record import NormalizedRecord, RecordPatch


# Feed field -> location taxonomy.
LOCATION_TAXONOMIES = {
    "locationCityName": Taxonomy.CITY,
    "locationPrecinctName": Taxonomy.AREA,
    "locationProvinceName": Taxonomy.STATE,
    "locationCountryName": Taxonomy.COUNTRY,
}

# Transaction code -> status term. Other codes produce no status.
TRANSACTION_STATUS = {
    FeedCode.TRANSACTION_FOR_SALE.value: "For Sale",
    FeedCode.TRANSACTION_FOR_RENT.value: "For Rent",
}

# Feed flag -> (value that sets the label, label term).
LABEL_FLAGS = {
    "labelNew": (FeedCode.LABEL_NEW.value, "New"),
    "labelSold": (FeedCode.LABEL_SOLD.value, "Sold"),
    "labelReserved": (FeedCode.LABEL_RESERVED.value, "Reserved"),
}

FEATURED_LABEL = "Featured"


class TaxonomyMapper:
    """Map the taxonomy terms of a property."""

    def __init__(self, resolver: DictionaryResolver):
        self.resolver = resolver

    def map(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        patch = RecordPatch()

        property_type = self.property_type(raw)
        if property_type:
            patch.add_terms(Taxonomy.TYPE, property_type)

        for source_field, taxonomy in LOCATION_TAXONOMIES.items():
            if is_empty(raw.get(source_field)):
                continue
            value = as_text(raw[source_field])
            if not value:
                continue
            patch.add_terms(taxonomy, value)
            if taxonomy is Taxonomy.COUNTRY:
                patch.set_meta(MetaKey.COUNTRY, value)

        if is_present(raw, "transaction"):
            status = TRANSACTION_STATUS.get(as_int(raw["transaction"]))
            if status:
                patch.add_terms(Taxonomy.STATUS, status)

        patch.add_terms(Taxonomy.LABEL, *self.labels(raw, current))
        return patch

    def property_type(self, raw: Dict[str, Any]) -> str:
        """
        Resolve the property type: mainTypeId via the dictionary, falling
        back to the raw typeName. Unspecified sentinels yield "".
        """
        type_name = ""
        if is_present(raw, "mainTypeId"):
            type_name = self.resolver.resolve(DictionaryCategory.TYPES, raw["mainTypeId"])
        if not type_name and not is_empty(raw.get("typeName")):
            type_name = as_text(raw["typeName"])
        return "" if is_unspecified(type_name) else type_name

    def labels(self, raw: Dict[str, Any], current: NormalizedRecord) -> List[str]:
        """
        Collect the label terms, deduplicated and in order.

        Example:
            >>> mapper.labels({"labelNew": 1}, record_with_featured_flag)
            ['New', 'Featured']
        """
        labels = []

        for source_field, (expected, label) in LABEL_FLAGS.items():
            if is_present(raw, source_field) and as_int(raw[source_field]) == expected:
                labels.append(label)

        if is_present(raw, "market"):
            market = self.resolver.resolve(DictionaryCategory.MARKET, raw["market"])
            if not is_unspecified(market):
                labels.append(market)

        if current.meta(MetaKey.FEATURED_PROPERTY) == "1":
            labels.append(FEATURED_LABEL)

        return list(dict.fromkeys(labels))
