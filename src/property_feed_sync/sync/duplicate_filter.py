"""
Title-based duplicate pre-filter.

Before a batch is processed, records whose portalTitle exactly matches the
title of an existing (non-trashed) property entity can be dropped. This is
only an optimization: identity is decided later by the feed id stored on
each entity, so a record whose title changed upstream is still matched to
its entity by the post reconciler.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict, List, Sequence

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import PROPERTY_POST_TYPE
from property_feed_sync.core.string_utils import as_text
from property_feed_sync.exceptions import StoreError
from property_feed_sync.store.base import ContentStore
from property_feed_sync.sync.results import DuplicateFilterStats

logger = get_logger(__name__)


class DuplicateFilter:
    """
    Drop feed records that already exist in the store under the same title.

    Args:
        store: The content store queried for existing titles.
        entity_type: The entity type titles are matched against.

    Attributes:
        stats: Counts of the last filter_duplicates() call.

    Example:
        >>> duplicate_filter = DuplicateFilter(store)
        >>> fresh = duplicate_filter.filter_duplicates(records)
        >>> duplicate_filter.stats.filtered_out_count
        3
    """

    def __init__(self, store: ContentStore, entity_type: str = PROPERTY_POST_TYPE):
        self.store = store
        self.entity_type = entity_type
        self.stats = DuplicateFilterStats()

    def title_exists(self, title: str) -> bool:
        """
        Check for a non-trashed entity with exactly this title.

        A failed lookup counts as no match, leaving the record to the feed id
        lookup of the post reconciler.
        """
        try:
            matches = self.store.find_entities(self.entity_type, title=title, limit=1)
        except StoreError as e:
            logger.warning(f"Title lookup for '{title}' failed, keeping record: {e}")
            return False
        return bool(matches)

    def filter_duplicates(self, records: Sequence[Any]) -> List[Any]:
        """
        Return the records that do not match an existing entity title.

        Records without a portalTitle (and non-dict records) are kept, so the
        batch driver classifies them itself.

        Args:
            records: Raw feed records.

        Returns:
            The kept records, in their original order.
        """
        kept: List[Any] = []
        no_title = 0

        for record in records:
            title = as_text(record.get("portalTitle")) if isinstance(record, dict) else ""

            if not title:
                no_title += 1
                kept.append(record)
                continue

            if self.title_exists(title):
                logger.debug(f"Dropping duplicate record '{title}'")
                continue

            kept.append(record)

        self.stats = DuplicateFilterStats(
            original_count=len(records),
            after_filter_count=len(kept),
            no_title_count=no_title,
        )
        logger.info(
            f"Duplicate Filter: {self.stats.original_count} items retrieved, "
            f"{self.stats.after_filter_count} after filtering, "
            f"{self.stats.filtered_out_count} filtered out as duplicates"
        )
        if no_title:
            logger.debug(f"{no_title} items had no portalTitle and were kept")

        return kept

    def stats_dict(self) -> Dict[str, int]:
        return {
            "original_count": self.stats.original_count,
            "after_filter_count": self.stats.after_filter_count,
            "filtered_out_count": self.stats.filtered_out_count,
        }
