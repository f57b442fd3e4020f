"""
Batch driver for the property feed sync.

BatchSyncDriver processes a list of raw feed records strictly in order:
optional duplicate pre-filter, then for each record validation, mapping,
post reconciliation and (after a successful reconcile) image sync. Every
input record produces exactly one outcome in the returned SyncResults; a
failing record never stops the batch.

Usage:
    from property_feed_sync.sync import BatchSyncDriver, SyncParameters

    driver = BatchSyncDriver(mapper, store)
    results = driver.run(records, SyncParameters.count(10))
    print(results.success, results.skipped, results.error)

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Optional, Sequence

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import MAX_RESULT_MESSAGES
from property_feed_sync.core.string_utils import as_text
from property_feed_sync.exceptions import ValidationError
from property_feed_sync.mapping.orchestrator import PropertyMapper
from property_feed_sync.store.base import ContentStore
from property_feed_sync.sync.duplicate_filter import DuplicateFilter
from property_feed_sync.sync.image_reconciler import ImageReconciler
from property_feed_sync.sync.outcomes import SyncOutcome
from property_feed_sync.sync.parameters import SyncParameters
from property_feed_sync.sync.post_reconciler import PostReconciler
from property_feed_sync.sync.results import SyncResults

logger = get_logger(__name__)

UNKNOWN_ITEM_ID = "unknown"


def validate_item(item: Any) -> Any:
    """
    Check the minimal shape of a raw record and return its id.

    Raises:
        ValidationError: If the item is not a dict or has no id.
    """
    if not isinstance(item, dict):
        raise ValidationError("Invalid item structure")

    source_id = item.get("id")
    if source_id is None or as_text(source_id) == "":
        raise ValidationError("Missing item ID")
    return source_id


class BatchSyncDriver:
    """
    Sync a batch of raw records into a content store.

    Args:
        mapper: The raw -> normalized record mapper.
        store: The target content store.
        post_reconciler: Optional reconciler; built from store if omitted.
        image_reconciler: Optional image reconciler; built from store if
            omitted.
        duplicate_filter: Optional title pre-filter; built from store if
            omitted.
        max_messages: Bound on the result message list.
    """

    def __init__(
        self,
        mapper: PropertyMapper,
        store: ContentStore,
        post_reconciler: Optional[PostReconciler] = None,
        image_reconciler: Optional[ImageReconciler] = None,
        duplicate_filter: Optional[DuplicateFilter] = None,
        max_messages: int = MAX_RESULT_MESSAGES
    ):
        self.mapper = mapper
        self.store = store
        self.post_reconciler = post_reconciler or PostReconciler(store)
        self.image_reconciler = image_reconciler or ImageReconciler(store)
        self.duplicate_filter = duplicate_filter or DuplicateFilter(store)
        self.max_messages = max_messages

    def run(self, items: Sequence[Any], parameters: Optional[SyncParameters] = None) -> SyncResults:
        """
        Process every record of the batch.

        Args:
            items: Raw feed records, already selected by count or range.
            parameters: The run parameters; only skip_duplicates affects
                processing, the rest is reported in the messages.

        Returns:
            SyncResults: Outcome counts and messages.
        """
        results = SyncResults(max_messages=self.max_messages)

        if not items:
            logger.warning("No data items found to process")
            results.add_message("No data items found to process or error reading data source.")
            return results

        duplicate_stats = None
        if parameters is not None and parameters.skip_duplicates:
            items = self.duplicate_filter.filter_duplicates(items)
            duplicate_stats = self.duplicate_filter.stats

        results.add_debug_messages(len(items), parameters, duplicate_stats)
        logger.info(f"Processing {len(items)} items")

        for index, item in enumerate(items):
            outcome = self.process_item(item)
            results.record(outcome)
            logger.debug(f"Item {index + 1}/{len(items)}: {outcome.status.value}")

        logger.info(
            f"Sync finished: {results.success} synced, {results.skipped} skipped, "
            f"{results.error} errors"
        )
        return results

    def process_item(self, item: Any) -> SyncOutcome:
        """
        Sync one raw record and classify the result.

        Never raises: unexpected failures are logged and returned as an
        Error outcome.
        """
        source_id = item.get("id") if isinstance(item, dict) else None
        display_id = source_id if source_id is not None and as_text(source_id) else UNKNOWN_ITEM_ID

        try:
            source_id = validate_item(item)
        except ValidationError as e:
            logger.warning(f"Rejected item {display_id}: {e}")
            return SyncOutcome.error(display_id, str(e))

        try:
            record = self.mapper.map(item)
            outcome = self.post_reconciler.reconcile(record, source_id)

            if outcome.is_success:
                self.image_reconciler.sync_images(outcome.entity_id, record)
        except Exception as e:
            logger.exception(f"Unexpected error syncing item {source_id}")
            return SyncOutcome.error(source_id, f"Unexpected error: {e}")

        return outcome
