"""
Feed file reader.

The feed is a JSON file of the shape {"data": [record, ...]}. FeedReader
returns the records, limited by count or by an inclusive index range.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import FEED_DATA_FILE
from property_feed_sync.exceptions import FeedReadError
from property_feed_sync.sync.parameters import SyncParameters

logger = get_logger(__name__)


class FeedReader:
    """
    Read property records from a JSON feed file.

    Args:
        file_path: Path to the feed file.

    Example:
        >>> reader = FeedReader("data/feed.json")
        >>> first_two = reader.get_data(2)
        >>> third_to_fifth = reader.get_data_by_range(2, 4)
    """

    def __init__(self, file_path: Union[str, Path] = FEED_DATA_FILE):
        self.file_path = Path(file_path)

    def exists(self) -> bool:
        return self.file_path.is_file()

    def _load(self) -> List[Any]:
        if not self.exists():
            raise FeedReadError(f"Data file not found at {self.file_path}")

        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except OSError as e:
            raise FeedReadError(f"Could not read data file at {self.file_path}: {e}") from e
        except ValueError as e:
            raise FeedReadError(f"JSON decode error: {e} for file {self.file_path}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise FeedReadError(
                f"JSON 'data' key not found or is not an array in file {self.file_path}"
            )

        return payload["data"]

    def get_data(self, limit: Optional[int] = None) -> List[Any]:
        """
        Return the first `limit` records (all of them for None or 0).

        Raises:
            FeedReadError: If the file is missing, unreadable or malformed.
        """
        items = self._load()
        if limit is not None and limit > 0:
            items = items[:limit]
        logger.info(f"Read {len(items)} records from {self.file_path}")
        return items

    def get_data_by_range(self, start_index: int, end_index: int) -> List[Any]:
        """
        Return the records from start_index to end_index, both inclusive.

        Indices past the end of the feed are ignored.

        Raises:
            FeedReadError: If the file is missing, unreadable or malformed.
        """
        items = self._load()[start_index:end_index + 1]
        logger.info(
            f"Read {len(items)} records (indices {start_index}-{end_index}) from {self.file_path}"
        )
        return items

    def read(self, parameters: SyncParameters) -> List[Any]:
        """Return the records selected by the sync parameters."""
        if parameters.is_range:
            return self.get_data_by_range(parameters.start_index, parameters.end_index)
        return self.get_data(parameters.limit)

    def describe(self) -> Dict[str, Any]:
        """Debug information about the feed file, used when a run finds nothing."""
        info: Dict[str, Any] = {"exists": self.exists()}
        if info["exists"]:
            info["path"] = str(self.file_path)
        return info
