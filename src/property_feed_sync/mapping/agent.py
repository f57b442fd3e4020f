"""
Agent / agency mapper.

A listing is attributed to an agency when its contact id appears in the
contact-to-agency correlation table, and to an individual agent otherwise.
The contact details are written under the matching metadata prefix
(fave_agency_* or fave_agent_*).

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict, Mapping, Optional

from property_feed_sync.config.settings import AGENCY_CONTACT_MAP
from property_feed_sync.core.dict_utils import is_empty
from property_feed_sync.core.numeric_utils import as_int
from property_feed_sync.core.string_utils import as_text
from property_feed_sync.mapping.keys import MetaKey
from property_feed_sync.mapping.record import NormalizedRecord, RecordPatch


AGENCY_DISPLAY_OPTION = "agency_info"
AGENT_DISPLAY_OPTION = "agent_info"

# Feed contact field -> metadata key suffix.
CONTACT_FIELDS = {
    "contactEmail": "email",
    "contactPhone": "mobile",
}


class AgentMapper:
    """
    Map the contact of a listing to agent or agency metadata.

    Args:
        agency_map: Contact id (as text) -> agency entity id.
    """

    def __init__(self, agency_map: Optional[Mapping[str, Any]] = None):
        self.agency_map = dict(AGENCY_CONTACT_MAP if agency_map is None else agency_map)

    def find_agency(self, contact_id: Any) -> Optional[Any]:
        return self.agency_map.get(str(as_int(contact_id)))

    def map(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        patch = RecordPatch()
        if is_empty(raw.get("contactId")):
            return patch

        agency_id = self.find_agency(raw["contactId"])
        if agency_id is not None:
            prefix = "agency"
            patch.set_meta(MetaKey.AGENT_DISPLAY_OPTION, AGENCY_DISPLAY_OPTION)
            patch.set_meta(MetaKey.PROPERTY_AGENCY, str(agency_id))
        else:
            prefix = "agent"
            patch.set_meta(MetaKey.AGENT_DISPLAY_OPTION, AGENT_DISPLAY_OPTION)

        for source_field, suffix in CONTACT_FIELDS.items():
            if not is_empty(raw.get(source_field)):
                patch.metadata[f"fave_{prefix}_{suffix}"] = as_text(raw[source_field])

        name_parts = [
            as_text(raw.get(source_field))
            for source_field in ("contactFirstname", "contactLastname")
            if not is_empty(raw.get(source_field))
        ]
        contact_name = " ".join(part for part in name_parts if part)
        if contact_name:
            patch.metadata[f"fave_{prefix}_name"] = contact_name

        return patch
