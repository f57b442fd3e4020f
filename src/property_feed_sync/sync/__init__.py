"""
Sync module for the property feed sync package.

This module reconciles mapped records into a content store and drives
whole batches.

Submodules:
    outcomes: SyncStatus and SyncOutcome.
    results: SyncResults and duplicate filter statistics.
    parameters: SyncParameters (count or range selection).
    data_reader: FeedReader for the JSON feed file.
    duplicate_filter: Title-based pre-filter.
    post_reconciler: Find-or-create of property entities.
    image_reconciler: Featured image and gallery attachments.
    batch: BatchSyncDriver.
"""

from .outcomes import SyncOutcome, SyncStatus
from .results import DuplicateFilterStats, SyncResults
from .parameters import SyncMode, SyncParameters
from .data_reader import FeedReader
from .duplicate_filter import DuplicateFilter
from .post_reconciler import PostReconciler
from .image_reconciler import ImageReconciler
from .batch import BatchSyncDriver
