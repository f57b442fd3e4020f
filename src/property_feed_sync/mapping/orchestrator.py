"""
Mapping orchestrator for the property feed sync package.

PropertyMapper runs the field mappers in their fixed order, merging each
step's RecordPatch into a fresh NormalizedRecord:

    core post -> identifiers/defaults -> price -> size/area -> room counts
    -> building details -> garage -> address/coordinates -> agent/agency
    -> features -> taxonomy -> images

The order matters: the taxonomy step reads the featured flag written by
the identifiers step to add the "Featured" label.

Usage:
    from property_feed_sync.dictionary import DictionaryResolver, load_dictionary
    from property_feed_sync.mapping.orchestrator import PropertyMapper

    mapper = PropertyMapper(DictionaryResolver(load_dictionary(path)))
    record = mapper.map(raw_record)

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import SITE_TIMEZONE
from property_feed_sync.dictionary.resolver import DictionaryResolver
from property_feed_sync.mapping.address import AddressMapper
from property_feed_sync.mapping.agent import AgentMapper
from property_feed_sync.mapping.core_post import CorePostMapper
from property_feed_sync.mapping.features import FeaturesMapper
from property_feed_sync.mapping.images import ImageMapper
from property_feed_sync.mapping.property_details import PropertyDetailsMapper
from property_feed_sync.mapping.record import NormalizedRecord, RecordPatch
from property_feed_sync.mapping.taxonomy import TaxonomyMapper

logger = get_logger(__name__)


MappingStep = Callable[[Dict[str, Any], NormalizedRecord], RecordPatch]


class PropertyMapper:
    """
    Compose the field mappers into one raw -> normalized transformation.

    Args:
        resolver: Dictionary resolver shared by the coded-value mappers.
        agency_map: Optional contact -> agency table overriding the
            configured one.
        site_timezone: Timezone the post timestamps are rendered in.

    Attributes:
        steps: The (name, step) pairs in execution order.
    """

    def __init__(
        self,
        resolver: DictionaryResolver,
        agency_map: Optional[Mapping[str, Any]] = None,
        site_timezone: str = SITE_TIMEZONE
    ):
        self.resolver = resolver

        core_post = CorePostMapper(site_timezone)
        details = PropertyDetailsMapper(resolver)
        address = AddressMapper()
        agent = AgentMapper(agency_map)
        features = FeaturesMapper(resolver)
        taxonomy = TaxonomyMapper(resolver)
        images = ImageMapper()

        self.steps: List[Tuple[str, MappingStep]] = [
            ("core post", core_post.map),
            ("identifiers", details.map_identifiers_and_defaults),
            ("price", details.map_price),
            ("size/area", details.map_size_area),
            ("room counts", details.map_room_counts),
            ("building details", details.map_building_details),
            ("garage", details.map_garage),
            ("address", address.map),
            ("agent", agent.map),
            ("features", features.map),
            ("taxonomy", taxonomy.map),
            ("images", images.map),
        ]

    def map(self, raw: Dict[str, Any]) -> NormalizedRecord:
        """
        Map one raw feed record.

        Args:
            raw: The feed record. It is never modified.

        Returns:
            NormalizedRecord: The mapped record.
        """
        record = NormalizedRecord()
        for name, step in self.steps:
            record = record.merge(step(raw, record))

        logger.debug(
            f"Mapped record {raw.get('id')}: {len(record.metadata)} metadata keys, "
            f"{len(record.taxonomy_terms)} taxonomies, {len(record.gallery_image_urls)} images"
        )
        return record
