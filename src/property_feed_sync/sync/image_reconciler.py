"""
Image reconciler: featured image and gallery attachments of an entity.

Attachments are cached by their source URL. Every imported attachment is
tagged with the URL it came from in the `_sideloaded_source_url` metadata,
and any later reference to the same URL (from the same record, another
record, or another run) reuses that attachment instead of downloading it
again. The bundled placeholder image is cached the same way under a
`file://` key.

Image failures never fail a record: a URL that cannot be imported is
logged and left out of the gallery, and a failed featured image falls back
to the placeholder when that is enabled.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from pathlib import Path
from typing import Any, List, Optional, Union

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import DEFAULT_THUMBNAIL_PATH, USE_DEFAULT_THUMBNAIL
from property_feed_sync.exceptions import ImageError, StoreError
from property_feed_sync.mapping.keys import AttachmentMetaKey
from property_feed_sync.mapping.record import NormalizedRecord
from property_feed_sync.store.base import ATTACHMENT_POST_TYPE, ContentStore

logger = get_logger(__name__)


class ImageReconciler:
    """
    Resolve image URLs to attachments and attach them to an entity.

    Args:
        store: The content store holding entities and attachments.
        default_thumbnail_path: Placeholder used when the featured image
            cannot be imported.
        use_default_thumbnail: Whether the placeholder fallback is enabled.
    """

    def __init__(
        self,
        store: ContentStore,
        default_thumbnail_path: Union[str, Path, None] = DEFAULT_THUMBNAIL_PATH,
        use_default_thumbnail: bool = USE_DEFAULT_THUMBNAIL
    ):
        self.store = store
        self.default_thumbnail_path = Path(default_thumbnail_path) if default_thumbnail_path else None
        self.use_default_thumbnail = use_default_thumbnail

    # =========================================================================
    # ATTACHMENTS
    # =========================================================================

    def find_cached_attachment(self, source_url: str) -> Optional[int]:
        """Return the attachment already imported from source_url, if any."""
        matches = self.store.find_entities(
            ATTACHMENT_POST_TYPE,
            meta={AttachmentMetaKey.SOURCE_URL.value: source_url},
            limit=1,
        )
        return matches[0] if matches else None

    def resolve_or_create_attachment(self, url: str, owner_id: int, alt_text: str = "") -> Optional[int]:
        """
        Return the attachment for url, importing it on a cache miss.

        Args:
            url: The remote image URL.
            owner_id: The entity a new attachment is parented to.
            alt_text: Accessibility text for a new attachment.

        Returns:
            The attachment id, or None if the image could not be imported.
        """
        try:
            cached = self.find_cached_attachment(url)
            if cached is not None:
                logger.debug(f"Reusing attachment {cached} for {url}")
                return cached

            attachment_id = self.store.import_remote_image(url, owner_id, alt_text)
        except (ImageError, StoreError) as e:
            logger.warning(f"Could not import image {url}: {e}")
            return None

        return self._finish_import(attachment_id, url, alt_text)

    def _finish_import(self, attachment_id: int, source_url: str, alt_text: str) -> Optional[int]:
        try:
            self.store.set_metadata(attachment_id, AttachmentMetaKey.SOURCE_URL.value, source_url)
            if alt_text:
                self.store.add_metadata(
                    attachment_id, AttachmentMetaKey.ALT_TEXT.value, alt_text, unique=True
                )
        except StoreError as e:
            logger.warning(f"Could not tag attachment {attachment_id} with {source_url}: {e}")
            self._discard_attachment(attachment_id)
            return None

        self.regenerate_thumbnails(attachment_id)
        return attachment_id

    def _discard_attachment(self, attachment_id: int) -> None:
        # An untagged attachment is never found again by its source URL.
        try:
            self.store.trash_entity(attachment_id)
        except StoreError as e:
            logger.error(f"Could not trash untagged attachment {attachment_id}: {e}")

    def regenerate_thumbnails(self, attachment_id: int) -> bool:
        """Generate and persist the size variants of an attachment."""
        try:
            path = self.store.get_attachment_file_path(attachment_id)
            if path is None:
                logger.warning(f"Attachment {attachment_id} has no file, thumbnails skipped")
                return False

            metadata = self.store.generate_thumbnails(attachment_id, path)
            return self.store.persist_thumbnail_metadata(attachment_id, metadata)
        except (ImageError, StoreError) as e:
            logger.warning(f"Thumbnail generation failed for attachment {attachment_id}: {e}")
            return False

    def default_thumbnail_attachment(self, owner_id: int, title: str = "") -> Optional[int]:
        """Return the placeholder attachment, importing it on first use."""
        if not self.use_default_thumbnail or self.default_thumbnail_path is None:
            return None

        cache_key = f"file://{self.default_thumbnail_path}"
        try:
            cached = self.find_cached_attachment(cache_key)
            if cached is not None:
                return cached

            attachment_id = self.store.import_local_image(self.default_thumbnail_path, owner_id, title)
        except (ImageError, StoreError) as e:
            logger.error(f"Default thumbnail unavailable: {e}")
            return None

        logger.info(f"Imported default thumbnail as attachment {attachment_id}")
        return self._finish_import(attachment_id, cache_key, title)

    # =========================================================================
    # ENTITY IMAGES
    # =========================================================================

    def sync_featured_image(self, entity_id: int, url: str, title: str = "") -> Optional[int]:
        """
        Set the featured image of an entity.

        Args:
            entity_id: The property entity.
            url: The featured image URL; nothing happens when empty.
            title: The entity title, used as alt text.

        Returns:
            The featured attachment id, or None if none could be set.
        """
        if not url:
            return None

        attachment_id = self.resolve_or_create_attachment(url, entity_id, title)
        if attachment_id is None:
            logger.warning(f"Featured image failed for entity {entity_id}, trying default thumbnail")
            attachment_id = self.default_thumbnail_attachment(entity_id, title)
            if attachment_id is None:
                return None

        if self.store.get_featured_image(entity_id) != attachment_id:
            self.store.set_featured_image(entity_id, attachment_id)
            logger.debug(f"Featured image of entity {entity_id} set to {attachment_id}")
        return attachment_id

    def sync_gallery(self, entity_id: int, urls: List[Any], title: str = "") -> List[int]:
        """
        Rewrite the gallery of an entity from its image URLs.

        The gallery is always cleared and rewritten, so a shrinking image
        list leaves no stale entries behind.

        Returns:
            The attachment ids written, in gallery order.
        """
        attachment_ids: List[int] = []

        for url in urls:
            if not isinstance(url, str) or not url:
                continue

            attachment_id = self.resolve_or_create_attachment(
                url, entity_id, f"{title} - Gallery Image {len(attachment_ids) + 1}"
            )
            if attachment_id is not None and attachment_id not in attachment_ids:
                attachment_ids.append(attachment_id)

        self.store.replace_gallery_attachments(entity_id, attachment_ids)
        logger.info(f"Gallery of entity {entity_id} now has {len(attachment_ids)} images")
        return attachment_ids

    def sync_images(self, entity_id: int, record: NormalizedRecord) -> None:
        """Sync the featured image and the gallery of a reconciled entity."""
        title = record.post_fields.title
        try:
            self.sync_featured_image(entity_id, record.featured_image_url, title)
        except StoreError as e:
            logger.error(f"Featured image sync for entity {entity_id} failed: {e}")

        # The gallery is rewritten even when the featured image failed.
        try:
            self.sync_gallery(entity_id, record.gallery_image_urls, title)
        except StoreError as e:
            logger.error(f"Gallery sync for entity {entity_id} failed: {e}")
