"""
Feature mapper for the property feed sync package.

This module produces two different kinds of "features":

    - The free-text additional features list: ordered {title, value}
      entries for coded attributes (building condition, ownership,
      furnishings, building type, building material) plus the
      "Available From" date.
    - The feature taxonomy terms: heating, the binary amenity flags
      (balcony, storage, intercom, ...), elevator, and equipment-derived
      terms such as Sauna, Shower and Bathtub.

Coded values resolving to an "unspecified" sentinel are ignored.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict, List

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.core.date_utils import format_store_date, parse_feed_datetime
from property_feed_sync.core.dict_utils import is_present
from property_feed_sync.core.numeric_utils import as_int
from property_feed_sync.core.string_utils import as_text
from property_feed_sync.dictionary.resolver import (
    DictionaryCategory,
    DictionaryResolver,
    is_unspecified,
)
from property_feed_sync.mapping.keys import (
    FEATURE_TITLE_KEY,
    FEATURE_VALUE_KEY,
    MetaKey,
    Taxonomy,
)
from property_feed_sync.mapping.record import NormalizedRecord, RecordPatch

logger = get_logger(__name__)


# =============================================================================
# FEATURE TABLES
# =============================================================================

# Feed field -> (dictionary category, feature title) for the additional
# features list.
DICTIONARY_FEATURES = {
    "buildingConditionId": (DictionaryCategory.BUILDING_CONDITION, "Building Condition"),
    "apartmentOwnership": (DictionaryCategory.APARTMENT_OWNERSHIP, "Ownership Type"),
    "apartmentFurnishings": (DictionaryCategory.APARTMENT_FURNISHINGS, "Furnishings"),
    "buildingType": (DictionaryCategory.BUILDING_TYPE, "Building Type"),
    "buildingMaterial": (DictionaryCategory.BUILDING_MATERIAL, "Building Material"),
}

AVAILABLE_FROM_TITLE = "Available From"

# Binary feed flags -> feature term, added when the flag equals 1.
BINARY_FEATURES = {
    "additionalBalcony": "Balcony",
    "additionalStorage": "Storage Room",
    "additionalParkingunderground": "Underground Parking",
    "securityIntercom": "Intercom",
    "securityVideocameras": "Video Cameras",
    "buildingSwimmingpool": "Swimming Pool",
    "buildingGym": "Gym",
    "securityGuarded": "Guarded",
    "securityReception": "Reception",
    "securityVideointercom": "Video Intercom",
    "securityGated": "Gated Community",
    "securitySecuredoor": "Secure Door",
    "securityBlinds": "Blinds",
    "securityGrating": "Security Grating",
    "securityMonitoring": "Security Monitoring",
    "securitySmokeDetector": "Smoke Detector",
    "securityAccessControl": "Access Control",
    "securityAlarm": "Alarm System",
    "buildingAdapted": "Disabled Access",
    "buildingAirConditioning": "Air Conditioning",
    "additionalLoggia": "Loggia",
    "additionalTerrace": "Terrace",
    "additionalBasement": "Basement",
    "additionalAttic": "Attic",
    "additionalParking": "Parking",
    "additionalGarage": "Garage",
    "additionalGarden": "Garden",
    "buildingCarPark": "Car Park",
}

ELEVATOR_TERM = "Elevator"

# Feed field -> (dictionary category, [(keywords, term), ...]). A term is
# added when the resolved label contains one of its keywords.
KEYWORD_FEATURES = {
    "apartmentEquipment": (
        DictionaryCategory.APARTMENT_EQUIPMENT,
        [(("sauna",), "Sauna"), (("shower", "prysznic"), "Shower")],
    ),
    "apartmentBathroomType": (
        DictionaryCategory.APARTMENT_BATHROOM_TYPE,
        [(("shower", "prysznic"), "Shower"), (("bathtub", "wanna"), "Bathtub")],
    ),
}


class FeaturesMapper:
    """Map the additional features list and the feature taxonomy terms."""

    def __init__(self, resolver: DictionaryResolver):
        self.resolver = resolver

    def map(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        patch = RecordPatch()

        features = self.additional_features(raw)
        if features:
            patch.set_meta(MetaKey.ADDITIONAL_FEATURES_ENABLE, "enable")
            patch.set_meta(MetaKey.ADDITIONAL_FEATURES, features)
        else:
            patch.set_meta(MetaKey.ADDITIONAL_FEATURES_ENABLE, "")
            patch.set_meta(MetaKey.ADDITIONAL_FEATURES, [])

        patch.add_terms(Taxonomy.FEATURE, *self.feature_terms(raw))
        return patch

    # -------------------------------------------------------------------------
    # Additional features list
    # -------------------------------------------------------------------------

    def additional_features(self, raw: Dict[str, Any]) -> List[Dict[str, str]]:
        """
        Build the ordered {title, value} list of additional features.

        Example:
            >>> mapper.additional_features({"buildingMaterial": 1})
            [{'fave_additional_feature_title': 'Building Material',
              'fave_additional_feature_value': 'Brick'}]
        """
        features = []

        for source_field, (category, title) in DICTIONARY_FEATURES.items():
            if not is_present(raw, source_field):
                continue
            value = self.resolver.resolve(category, raw[source_field])
            if is_unspecified(value):
                continue
            features.append({FEATURE_TITLE_KEY: title, FEATURE_VALUE_KEY: value})

        if raw.get("availableDate"):
            parsed, error = parse_feed_datetime(raw["availableDate"])
            if parsed is None:
                logger.warning(f"Record {raw.get('id')}: skipping availableDate, {error}")
            else:
                features.append({
                    FEATURE_TITLE_KEY: AVAILABLE_FROM_TITLE,
                    FEATURE_VALUE_KEY: format_store_date(parsed),
                })

        return features

    # -------------------------------------------------------------------------
    # Feature taxonomy terms
    # -------------------------------------------------------------------------

    def feature_terms(self, raw: Dict[str, Any]) -> List[str]:
        terms = []

        if is_present(raw, "buildingHeating"):
            heating = self.resolver.resolve(DictionaryCategory.HEATING, raw["buildingHeating"])
            if heating:
                terms.append(heating)

        for source_field, term in BINARY_FEATURES.items():
            if is_present(raw, source_field) and as_int(raw[source_field]) == 1:
                terms.append(term)

        has_elevator_count = is_present(raw, "buildingElevatornumber") and as_int(raw["buildingElevatornumber"]) > 0
        has_elevator_flag = is_present(raw, "buildingElevator") and as_int(raw["buildingElevator"]) == 1
        if (has_elevator_count or has_elevator_flag) and ELEVATOR_TERM not in terms:
            terms.append(ELEVATOR_TERM)

        for source_field, (category, rules) in KEYWORD_FEATURES.items():
            if not is_present(raw, source_field):
                continue
            label = self.resolver.resolve(category, raw[source_field]).lower()
            if not label:
                continue
            for keywords, term in rules:
                if any(keyword in label for keyword in keywords):
                    terms.append(term)

        # Shower can come from both equipment and bathroom type.
        return list(dict.fromkeys(as_text(term) for term in terms if term))
