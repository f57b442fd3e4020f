"""
On-disk media library.

Files are stored under a root directory in year/month sub-folders, and a
numeric suffix keeps names unique ("flat.jpg", "flat-1.jpg", ...). Paths
handed back to callers are absolute; paths stored in metadata are relative
to the root.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import datetime
import shutil
from pathlib import Path
from typing import Optional, Union

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import MEDIA_ROOT
from property_feed_sync.exceptions import ImageError

logger = get_logger(__name__)


class MediaLibrary:
    """
    Write image files under a media root.

    Args:
        root: Root directory of the library. Created on first write.

    Example:
        >>> library = MediaLibrary("/tmp/media")
        >>> path = library.save_bytes(b"...", "flat.jpg")
        >>> library.relative_path(path)
        '2024/01/flat.jpg'
    """

    def __init__(self, root: Union[str, Path] = MEDIA_ROOT):
        self.root = Path(root)

    def _target_dir(self, now: Optional[datetime.datetime] = None) -> Path:
        now = now or datetime.datetime.now()
        directory = self.root / f"{now:%Y}" / f"{now:%m}"
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    @staticmethod
    def unique_path(directory: Path, filename: str) -> Path:
        candidate = directory / filename
        stem, suffix = candidate.stem, candidate.suffix
        counter = 1
        while candidate.exists():
            candidate = directory / f"{stem}-{counter}{suffix}"
            counter += 1
        return candidate

    def save_bytes(self, data: bytes, filename: str) -> Path:
        """
        Write a payload to a new, uniquely named file.

        Raises:
            ImageError: If the file cannot be written.
        """
        try:
            path = self.unique_path(self._target_dir(), filename)
            path.write_bytes(data)
        except OSError as e:
            raise ImageError(f"Could not store {filename} in {self.root}: {e}") from e

        logger.debug(f"Stored {len(data)} bytes as {path}")
        return path

    def copy_file(self, source: Union[str, Path]) -> Path:
        """
        Copy a local file into the library.

        Raises:
            ImageError: If the source is missing or the copy fails.
        """
        source = Path(source)
        if not source.is_file():
            raise ImageError(f"Local image not found: {source}")

        try:
            path = self.unique_path(self._target_dir(), source.name)
            shutil.copyfile(source, path)
        except OSError as e:
            raise ImageError(f"Could not copy {source} into {self.root}: {e}") from e

        return path

    def relative_path(self, path: Union[str, Path]) -> str:
        return Path(path).relative_to(self.root).as_posix()

    def absolute_path(self, relative: str) -> Path:
        return self.root / relative
