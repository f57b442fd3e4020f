"""
Post reconciler: find-or-create the entity of a normalized record.

Each record is matched to its entity through the feed id stored in the
`_feed_json_id` metadata. A match is updated in place, otherwise a new
entity is created; the metadata and taxonomy terms are then written with
overwrite semantics. Gallery membership is left to the image reconciler.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Optional

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import PROPERTY_POST_TYPE
from property_feed_sync.exceptions import StoreError
from property_feed_sync.mapping.core_post import UNKNOWN_TITLE
from property_feed_sync.mapping.keys import MetaKey
from property_feed_sync.mapping.record import NormalizedRecord, correlation_id
from property_feed_sync.store.base import ContentStore
from property_feed_sync.sync.outcomes import SyncOutcome

logger = get_logger(__name__)

# Written by the image reconciler, never here.
RESERVED_METADATA_KEYS = frozenset({MetaKey.GALLERY_IMAGES.value})


class PostReconciler:
    """
    Upsert normalized records into a content store.

    Args:
        store: The target content store.
        entity_type: The entity type of synced properties.

    Example:
        >>> reconciler = PostReconciler(store)
        >>> outcome = reconciler.reconcile(record, source_id=7)
        >>> outcome.entity_id
        1
    """

    def __init__(self, store: ContentStore, entity_type: str = PROPERTY_POST_TYPE):
        self.store = store
        self.entity_type = entity_type

    def should_skip(self, record: NormalizedRecord, source_id: Any) -> bool:
        """A record is skipped when it has no usable title."""
        title = record.post_fields.title
        if not title:
            return True
        return title == UNKNOWN_TITLE and not correlation_id(source_id)

    def find_existing(self, source_id: Any) -> Optional[int]:
        """
        Return the id of the entity carrying this feed id, if any.

        Raises:
            StoreError: If the lookup fails.
        """
        matches = self.store.find_entities(
            self.entity_type,
            meta={MetaKey.JSON_ID.value: correlation_id(source_id)},
        )
        if len(matches) > 1:
            logger.warning(
                f"Feed id {source_id} matches {len(matches)} entities, updating {matches[0]}"
            )
        return matches[0] if matches else None

    def reconcile(self, record: NormalizedRecord, source_id: Any) -> SyncOutcome:
        """
        Create or update the entity of one record.

        Args:
            record: The normalized record.
            source_id: The raw feed id of the record.

        Returns:
            SyncOutcome: Success with the entity id, Skipped for a titleless
            record, or Error with the store's message.
        """
        if self.should_skip(record, source_id):
            logger.info(f"Skipping item {source_id}: no usable title")
            return SyncOutcome.skipped(source_id, "Empty title")

        if not correlation_id(source_id):
            return SyncOutcome.error(source_id, "Missing item ID")

        fields = record.post_fields.to_store_fields()

        try:
            entity_id = self.find_existing(source_id)
        except StoreError as e:
            logger.error(f"Lookup for item {source_id} failed: {e}")
            return SyncOutcome.error(source_id, f"Lookup failed: {e}")

        try:
            if entity_id is not None:
                self.store.update_entity(entity_id, fields)
                logger.info(f"Updated entity {entity_id} for item {source_id}")
            else:
                entity_id = self.store.create_entity(fields)
                logger.info(f"Created entity {entity_id} for item {source_id}")
        except StoreError as e:
            action = "update" if entity_id is not None else "create"
            logger.error(f"Could not {action} entity for item {source_id}: {e}")
            return SyncOutcome.error(source_id, str(e))

        try:
            self.write_metadata(entity_id, record)
            self.write_taxonomies(entity_id, record)
        except StoreError as e:
            logger.error(f"Could not write fields of entity {entity_id}: {e}")
            return SyncOutcome.error(source_id, str(e))

        return SyncOutcome.success(source_id, entity_id)

    def write_metadata(self, entity_id: int, record: NormalizedRecord) -> None:
        for key, value in record.metadata.items():
            if key in RESERVED_METADATA_KEYS:
                continue
            self.store.set_metadata(entity_id, key, value)

    def write_taxonomies(self, entity_id: int, record: NormalizedRecord) -> None:
        for taxonomy, terms in record.taxonomy_terms.items():
            self.store.set_taxonomy_terms(entity_id, taxonomy, terms, append=False)
