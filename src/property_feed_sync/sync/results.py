"""
Aggregated results of a sync run.

SyncResults counts success/skipped/error outcomes and keeps a bounded list
of human-readable messages: the per-record messages plus the debug
messages describing the run (item count, mode, duplicate filtering).

Author: Leonardo Pacciani-Mori
License: MIT
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from property_feed_sync.config.settings import MAX_RESULT_MESSAGES
from property_feed_sync.sync.outcomes import SyncOutcome, SyncStatus


@dataclass
class DuplicateFilterStats:
    """Counts reported by the duplicate filter pre-pass."""
    original_count: int = 0
    after_filter_count: int = 0
    no_title_count: int = 0

    @property
    def filtered_out_count(self) -> int:
        return self.original_count - self.after_filter_count


@dataclass
class SyncResults:
    """
    Outcome counts and messages of a sync run.

    Attributes:
        success: Number of records synced.
        skipped: Number of records skipped.
        error: Number of records that failed.
        messages: Human-readable messages, at most max_messages of them.
        suppressed_messages: Messages dropped once the bound was reached.
        outcomes: Every per-record outcome, in processing order.
        max_messages: Bound on the message list.

    Example:
        >>> results = SyncResults()
        >>> results.record(SyncOutcome.success(7, 101))
        >>> results.success, results.messages
        (1, ['Successfully synced item ID 7 to post ID 101.'])
    """
    success: int = 0
    skipped: int = 0
    error: int = 0
    messages: List[str] = field(default_factory=list)
    suppressed_messages: int = 0
    outcomes: List[SyncOutcome] = field(default_factory=list)
    max_messages: int = MAX_RESULT_MESSAGES

    @property
    def total(self) -> int:
        return self.success + self.skipped + self.error

    def add_message(self, message: str) -> None:
        if len(self.messages) < self.max_messages:
            self.messages.append(message)
        else:
            self.suppressed_messages += 1

    def record(self, outcome: SyncOutcome) -> None:
        """Count an outcome and add its message."""
        self.outcomes.append(outcome)

        if outcome.status is SyncStatus.SUCCESS:
            self.success += 1
            self.add_message(
                f"Successfully synced item ID {outcome.source_id} to post ID {outcome.entity_id}."
            )
        elif outcome.status is SyncStatus.SKIPPED:
            self.skipped += 1
            self.add_message(f"Item ID {outcome.source_id} skipped during sync processing.")
        else:
            self.error += 1
            self.add_message(f"Error syncing item ID {outcome.source_id}: {outcome.message}")

    def add_debug_messages(
        self,
        item_count: int,
        parameters: Optional[Any] = None,
        duplicate_stats: Optional[DuplicateFilterStats] = None
    ) -> None:
        """
        Describe the run: received items, mode and duplicate filtering.

        Args:
            item_count: Number of records handed to the driver.
            parameters: The SyncParameters of the run, if any.
            duplicate_stats: Statistics of the duplicate pre-pass, if it ran.
        """
        self.add_message(f"Debug: Received {item_count} data items for processing.")

        if parameters is not None:
            self.add_message(f"Debug: Sync mode: {parameters.mode.value}")
            if parameters.is_range:
                self.add_message(
                    f"Debug: Range requested: {parameters.start_index} to {parameters.end_index}"
                )
            else:
                self.add_message(f"Debug: Items to process: {parameters.items_to_process}")
            self.add_message(
                f"Debug: Skip duplicates: {'Yes' if parameters.skip_duplicates else 'No'}"
            )

        if duplicate_stats is not None:
            self.add_message(
                f"Duplicate Filter: {duplicate_stats.original_count} items retrieved, "
                f"{duplicate_stats.after_filter_count} after filtering, "
                f"{duplicate_stats.filtered_out_count} filtered out as duplicates"
            )
            if duplicate_stats.filtered_out_count > 0:
                self.add_message(
                    f"Note: {duplicate_stats.filtered_out_count} duplicate items were "
                    f"removed before processing (based on portalTitle)"
                )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "skipped": self.skipped,
            "error": self.error,
            "messages": list(self.messages),
            "suppressed_messages": self.suppressed_messages,
        }
