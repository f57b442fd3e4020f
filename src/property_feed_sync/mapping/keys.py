"""
Target-schema keys and feed codes.

Metadata keys and taxonomy names follow the Houzez real-estate theme,
which is the schema the content store renders. Feed codes are the fixed
numeric values the feed uses for transactions and labels.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from enum import Enum


class MetaKey(Enum):
    """Metadata keys written on a property entity."""
    JSON_ID = "_feed_json_id"
    PROPERTY_ID = "fave_property_id"
    HOMESLIDER = "fave_prop_homeslider"
    FEATURED_PROPERTY = "fave_featured"

    PRICE = "fave_property_price"
    PRICE_PREFIX = "fave_property_price_prefix"
    PRICE_POSTFIX = "fave_property_price_postfix"
    SECOND_PRICE = "fave_property_sec_price"
    CURRENCY = "fave_currency_info"

    SIZE = "fave_property_size"
    SIZE_PREFIX = "fave_property_size_prefix"
    LAND_AREA = "fave_property_land"
    LAND_AREA_POSTFIX = "fave_property_land_postfix"

    ROOMS = "fave_property_rooms"
    BEDROOMS = "fave_property_bedrooms"
    BATHROOMS = "fave_property_bathrooms"
    RESTROOMS = "fave_property_restrooms"

    YEAR_BUILT = "fave_property_year"
    FLOOR_NO = "fave_property_floor_no"
    TOTAL_FLOORS = "fave_property_total_floors"

    GARAGE_NUMBER = "fave_property_garage"

    ADDRESS = "fave_property_address"
    ZIP = "fave_property_zip"
    COUNTRY = "fave_property_country"
    MAP_ADDRESS = "fave_property_map_address"
    LOCATION_COORDS = "fave_property_location"
    LATITUDE = "houzez_geolocation_lat"
    LONGITUDE = "houzez_geolocation_long"
    MAP_ENABLED = "fave_property_map"
    MAP_STREET_VIEW = "fave_property_map_street_view"

    AGENT_DISPLAY_OPTION = "fave_agent_display_option"
    PROPERTY_AGENCY = "fave_property_agency"

    ADDITIONAL_FEATURES_ENABLE = "fave_additional_features_enable"
    ADDITIONAL_FEATURES = "additional_features"

    GALLERY_IMAGES = "fave_property_images"
    GALLERY_IMAGES_COUNT = "fave_property_images_count"
    GALLERY_MEDIA_TYPE = "fave_video_images"


class AttachmentMetaKey(Enum):
    """Metadata keys written on an attachment entity."""
    SOURCE_URL = "_sideloaded_source_url"
    ALT_TEXT = "_wp_attachment_image_alt"
    ATTACHED_FILE = "_wp_attached_file"
    ATTACHMENT_METADATA = "_wp_attachment_metadata"


class Taxonomy(Enum):
    """Taxonomies a property entity is classified in."""
    TYPE = "property_type"
    STATUS = "property_status"
    LABEL = "property_label"
    CITY = "property_city"
    AREA = "property_area"
    STATE = "property_state"
    COUNTRY = "property_country"
    FEATURE = "property_feature"


class FeedCode(Enum):
    """Fixed numeric codes used by the feed."""
    TRANSACTION_FOR_SALE = 131
    TRANSACTION_FOR_RENT = 132
    LABEL_NEW = 1
    LABEL_SOLD = 55
    LABEL_RESERVED = 57


# Keys of one entry of the additional-features list.
FEATURE_TITLE_KEY = "fave_additional_feature_title"
FEATURE_VALUE_KEY = "fave_additional_feature_value"

# Value of the gallery media-type flag when the gallery holds images.
GALLERY_MEDIA_TYPE_IMAGE = "image"

# Unit written as prefix/postfix of sizes and per-area prices.
AREA_UNIT = "m²"
