"""
Core post mapper: title, body, status, type and timestamps.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import (
    PROPERTY_POST_STATUS,
    PROPERTY_POST_TYPE,
    SITE_TIMEZONE,
)
from property_feed_sync.core.date_utils import parse_feed_datetime, to_local_and_gmt
from property_feed_sync.core.dict_utils import first_present
from property_feed_sync.core.string_utils import as_text, sanitize_post_content
from property_feed_sync.mapping.record import NormalizedRecord, RecordPatch

logger = get_logger(__name__)


# Title given to records with neither a title nor an id.
UNKNOWN_TITLE = "Property Unknown"


def derive_title(raw: Dict[str, Any]) -> str:
    """
    Build the post title of a raw record.

    Example:
        >>> derive_title({"id": 42})
        'Property 42'
        >>> derive_title({})
        'Property Unknown'
    """
    title = raw.get("portalTitle")
    if title is None:
        source_id = raw.get("id")
        title = f"Property {source_id}" if source_id is not None else UNKNOWN_TITLE
    return as_text(title)


class CorePostMapper:
    """
    Map the fields of the post itself.

    Dates that fail to parse are logged and left out; they never fail the
    record.
    """

    # Feed date field -> (local attribute, UTC attribute) on PostFields.
    DATE_FIELDS = {
        "addDate": ("created", "created_gmt"),
        "updateDate": ("modified", "modified_gmt"),
    }

    def __init__(self, site_timezone: str = SITE_TIMEZONE):
        self.site_timezone = site_timezone

    def map(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        post_fields = {
            "title": derive_title(raw),
            "content": sanitize_post_content(
                first_present(raw, "descriptionWebsite", "description", default="")
            ),
            "status": PROPERTY_POST_STATUS,
            "post_type": PROPERTY_POST_TYPE,
        }

        for source_field, (local_attr, gmt_attr) in self.DATE_FIELDS.items():
            if not raw.get(source_field):
                continue

            parsed, error = parse_feed_datetime(raw[source_field])
            if parsed is None:
                logger.warning(
                    f"Record {raw.get('id')}: skipping {source_field}, {error}"
                )
                continue

            post_fields[local_attr], post_fields[gmt_attr] = to_local_and_gmt(
                parsed, self.site_timezone
            )

        return RecordPatch(post_fields=post_fields)
