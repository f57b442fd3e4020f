"""
Content store interface for the property feed sync package.

The sync core never talks to a database directly. It depends on the
ContentStore abstract base class, which models a generic CMS backend:
typed entities (posts) with core fields, repeated key/value metadata,
taxonomy terms and image attachments.

Backends implement the storage primitives (entity query/create/update,
metadata and taxonomy access). The media operations (remote and local
image import, thumbnail generation, featured image and gallery handling)
are implemented here once on top of those primitives, using the media
library and the Pillow thumbnail generator.

Entity ids are positive integers assigned by the backend.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import MEDIA_ROOT, THUMBNAIL_SIZES
from property_feed_sync.exceptions import ImageError
from property_feed_sync.mapping.keys import (
    GALLERY_MEDIA_TYPE_IMAGE,
    AttachmentMetaKey,
    MetaKey,
)
from property_feed_sync.media.downloader import download_image, guess_mime_type, identify_image
from property_feed_sync.media.library import MediaLibrary
from property_feed_sync.media.thumbnails import generate_thumbnails as build_thumbnails

logger = get_logger(__name__)


# Fetches a URL and returns (payload, file name, MIME type), raising ImageError.
ImageFetcher = Callable[[str], Tuple[bytes, str, str]]

ATTACHMENT_POST_TYPE = "attachment"
ATTACHMENT_POST_STATUS = "inherit"
TRASH_STATUS = "trash"

# Metadata key holding the featured image (thumbnail) attachment id.
FEATURED_IMAGE_KEY = "_thumbnail_id"


class ContentStore(ABC):
    """
    Abstract content-management backend.

    Args:
        media_root: Directory of the media library.
        fetcher: Callable downloading a remote image. Defaults to
            media.downloader.download_image.
        thumbnail_sizes: Size variants produced by generate_thumbnails.
    """

    def __init__(
        self,
        media_root: Union[str, Path] = MEDIA_ROOT,
        fetcher: Optional[ImageFetcher] = None,
        thumbnail_sizes: Mapping[str, Tuple[int, int]] = THUMBNAIL_SIZES
    ):
        self.media = MediaLibrary(media_root)
        self.fetcher = fetcher or download_image
        self.thumbnail_sizes = dict(thumbnail_sizes)

    # =========================================================================
    # STORAGE PRIMITIVES
    # =========================================================================

    @abstractmethod
    def find_entities(
        self,
        entity_type: str,
        title: Optional[str] = None,
        meta: Optional[Mapping[str, Any]] = None,
        include_trashed: bool = False,
        limit: Optional[int] = None
    ) -> List[int]:
        """
        Query entity ids by type and optional filters, in ascending id order.

        Args:
            entity_type: The post type to search.
            title: Exact, case-sensitive title to match.
            meta: Metadata key -> value pairs that must all be present.
            include_trashed: Whether trashed entities are returned.
            limit: Maximum number of ids returned.

        Raises:
            StoreError: If the backend query fails.
        """

    @abstractmethod
    def create_entity(self, fields: Mapping[str, Any]) -> int:
        """
        Insert an entity and return its id.

        Raises:
            StoreError: If the insert fails or post_type is missing.
        """

    @abstractmethod
    def update_entity(self, entity_id: int, fields: Mapping[str, Any]) -> None:
        """
        Update the core fields of an existing entity.

        Raises:
            StoreError: If the entity does not exist or the write fails.
        """

    @abstractmethod
    def get_entity(self, entity_id: int) -> Optional[Dict[str, Any]]:
        """Return a copy of the core fields of an entity, or None."""

    @abstractmethod
    def get_metadata(self, entity_id: int, key: str, single: bool = True) -> Any:
        """
        Read metadata.

        Returns:
            With single=True the first value stored under key (None if
            absent); otherwise the list of every value, in insertion order.
        """

    @abstractmethod
    def add_metadata(self, entity_id: int, key: str, value: Any, unique: bool = False) -> bool:
        """
        Append a metadata entry.

        With unique=True nothing is written if the key already exists.

        Returns:
            bool: Whether an entry was written.
        """

    @abstractmethod
    def delete_metadata(self, entity_id: int, key: str, value: Any = None) -> int:
        """
        Delete every entry of key (only those equal to value, if given).

        Returns:
            int: The number of deleted entries.
        """

    @abstractmethod
    def set_taxonomy_terms(
        self,
        entity_id: int,
        taxonomy: str,
        terms: Iterable[str],
        append: bool = False
    ) -> None:
        """Replace (or, with append=True, extend) the terms of a taxonomy."""

    @abstractmethod
    def get_taxonomy_terms(self, entity_id: int, taxonomy: str) -> List[str]:
        """Return the terms of a taxonomy, in order."""

    # =========================================================================
    # DERIVED METADATA OPERATIONS
    # =========================================================================

    def set_metadata(self, entity_id: int, key: str, value: Any) -> None:
        """Write a single-valued metadata entry, replacing existing ones."""
        self.delete_metadata(entity_id, key)
        self.add_metadata(entity_id, key, value)

    def trash_entity(self, entity_id: int) -> None:
        """Move an entity to the trash; trashed entities drop out of lookups."""
        self.update_entity(entity_id, {"post_status": TRASH_STATUS})

    def set_featured_image(self, entity_id: int, attachment_id: int) -> None:
        self.set_metadata(entity_id, FEATURED_IMAGE_KEY, int(attachment_id))

    def get_featured_image(self, entity_id: int) -> Optional[int]:
        value = self.get_metadata(entity_id, FEATURED_IMAGE_KEY)
        return int(value) if value is not None else None

    def replace_gallery_attachments(self, entity_id: int, attachment_ids: Iterable[int]) -> None:
        """
        Rewrite the gallery of an entity.

        All existing gallery entries are cleared first. A non-empty list is
        then written as one entry per attachment id, plus the image count
        and the media-type flag; an empty list removes the count and the
        flag as well, leaving no gallery metadata behind.

        Args:
            entity_id: The owning entity.
            attachment_ids: Attachment ids in gallery order.
        """
        ids = list(attachment_ids)
        self.delete_metadata(entity_id, MetaKey.GALLERY_IMAGES.value)

        if not ids:
            self.delete_metadata(entity_id, MetaKey.GALLERY_IMAGES_COUNT.value)
            self.delete_metadata(entity_id, MetaKey.GALLERY_MEDIA_TYPE.value)
            return

        for attachment_id in ids:
            self.add_metadata(entity_id, MetaKey.GALLERY_IMAGES.value, str(attachment_id))
        self.set_metadata(entity_id, MetaKey.GALLERY_IMAGES_COUNT.value, len(ids))
        self.set_metadata(entity_id, MetaKey.GALLERY_MEDIA_TYPE.value, GALLERY_MEDIA_TYPE_IMAGE)

    def get_gallery_attachments(self, entity_id: int) -> List[int]:
        values = self.get_metadata(entity_id, MetaKey.GALLERY_IMAGES.value, single=False)
        return [int(value) for value in values]

    # =========================================================================
    # MEDIA OPERATIONS
    # =========================================================================

    def _create_attachment(
        self,
        path: Path,
        owner_id: int,
        title: str,
        mime_type: str
    ) -> int:
        attachment_id = self.create_entity({
            "post_type": ATTACHMENT_POST_TYPE,
            "post_status": ATTACHMENT_POST_STATUS,
            "post_title": title,
            "post_parent": owner_id,
            "post_mime_type": mime_type,
        })
        self.set_metadata(
            attachment_id,
            AttachmentMetaKey.ATTACHED_FILE.value,
            self.media.relative_path(path),
        )
        return attachment_id

    def import_remote_image(self, url: str, owner_id: int, alt_text: str = "") -> int:
        """
        Download an image and store it as an attachment of owner_id.

        Args:
            url: The remote image URL.
            owner_id: The entity the attachment belongs to.
            alt_text: Accessibility text; also used as attachment title.

        Returns:
            int: The new attachment id.

        Raises:
            ImageError: If the download, validation or file write fails.
            StoreError: If the attachment entity cannot be created.
        """
        data, filename, mime_type = self.fetcher(url)
        path = self.media.save_bytes(data, filename)
        attachment_id = self._create_attachment(path, owner_id, alt_text or path.stem, mime_type)

        if alt_text:
            self.set_metadata(attachment_id, AttachmentMetaKey.ALT_TEXT.value, alt_text)

        logger.info(f"Imported {url} as attachment {attachment_id}")
        return attachment_id

    def import_local_image(self, path: Union[str, Path], owner_id: int, title: str = "") -> int:
        """
        Copy a local image into the media library as an attachment.

        Raises:
            ImageError: If the file is missing, unreadable or not an image.
        """
        source = Path(path)
        try:
            _, mime_type = identify_image(source.read_bytes())
        except OSError as e:
            raise ImageError(f"Could not read local image {source}: {e}") from e

        stored = self.media.copy_file(source)
        attachment_id = self._create_attachment(stored, owner_id, title or stored.stem, mime_type)
        logger.info(f"Imported local image {source.name} as attachment {attachment_id}")
        return attachment_id

    def get_attachment_file_path(self, attachment_id: int) -> Optional[Path]:
        relative = self.get_metadata(attachment_id, AttachmentMetaKey.ATTACHED_FILE.value)
        if not relative:
            return None
        return self.media.absolute_path(relative)

    def generate_thumbnails(self, attachment_id: int, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Generate the size variants of an attachment's file.

        Raises:
            ImageError: If the file cannot be processed.
        """
        metadata = build_thumbnails(path, self.thumbnail_sizes)
        metadata["mime_type"] = guess_mime_type(str(path))
        return metadata

    def persist_thumbnail_metadata(self, attachment_id: int, metadata: Mapping[str, Any]) -> bool:
        if not metadata:
            return False
        self.set_metadata(attachment_id, AttachmentMetaKey.ATTACHMENT_METADATA.value, dict(metadata))
        return True
