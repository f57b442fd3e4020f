"""
Sync run parameters.

A run selects feed records either by count (the first N records, 0 for
all) or by an inclusive index range, and optionally enables the
duplicate-title pre-pass.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from property_feed_sync.config.settings import DEFAULT_ITEMS_TO_PROCESS
from property_feed_sync.exceptions import ValidationError


class SyncMode(Enum):
    COUNT = "count"
    RANGE = "range"


@dataclass(frozen=True)
class SyncParameters:
    """
    Validated parameters of a sync run.

    Use the count() and range() constructors; they validate their input.

    Attributes:
        mode: Count or range selection.
        items_to_process: Number of records in count mode (0 means all).
        start_index: First index (inclusive) in range mode.
        end_index: Last index (inclusive) in range mode.
        skip_duplicates: Whether the duplicate-title pre-pass runs.
    """
    mode: SyncMode = SyncMode.COUNT
    items_to_process: int = DEFAULT_ITEMS_TO_PROCESS
    start_index: int = 0
    end_index: int = 0
    skip_duplicates: bool = False

    @classmethod
    def count(
        cls,
        items_to_process: Optional[int] = None,
        skip_duplicates: bool = False
    ) -> "SyncParameters":
        """
        Build count-mode parameters. Negative counts are clamped to 0.

        Example:
            >>> SyncParameters.count().items_to_process
            2
        """
        if items_to_process is None:
            items_to_process = DEFAULT_ITEMS_TO_PROCESS
        return cls(
            mode=SyncMode.COUNT,
            items_to_process=max(0, int(items_to_process)),
            skip_duplicates=skip_duplicates,
        )

    @classmethod
    def range(cls, start_index: int, end_index: int, skip_duplicates: bool = False) -> "SyncParameters":
        """
        Build range-mode parameters.

        Raises:
            ValidationError: If start > end or an index is negative.
        """
        start_index, end_index = int(start_index), int(end_index)
        if start_index > end_index:
            raise ValidationError("Start index must be less than or equal to end index.")
        if start_index < 0 or end_index < 0:
            raise ValidationError("Indices must be non-negative.")
        return cls(
            mode=SyncMode.RANGE,
            start_index=start_index,
            end_index=end_index,
            skip_duplicates=skip_duplicates,
        )

    @property
    def is_range(self) -> bool:
        return self.mode is SyncMode.RANGE

    @property
    def limit(self) -> Optional[int]:
        """Record limit in count mode; None means every record."""
        return self.items_to_process if self.items_to_process > 0 else None
