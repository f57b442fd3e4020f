"""
Image URL mapper.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict, List

from property_feed_sync.core.string_utils import is_valid_url
from property_feed_sync.mapping.record import NormalizedRecord, RecordPatch


def valid_image_urls(pictures: Any) -> List[str]:
    """
    Keep the trimmed entries of a picture list that are valid URLs.

    Example:
        >>> valid_image_urls(["http://x/1.jpg", "not-a-url", " http://x/2.jpg "])
        ['http://x/1.jpg', 'http://x/2.jpg']
    """
    if not isinstance(pictures, (list, tuple)):
        return []

    urls = []
    for picture in pictures:
        if not isinstance(picture, str):
            continue
        url = picture.strip()
        if is_valid_url(url):
            urls.append(url)
    return urls


class ImageMapper:
    """
    Map the picture list to the featured image and the gallery.

    The first valid URL is the featured image; the gallery is the whole
    filtered list, featured image included.
    """

    def map(self, raw: Dict[str, Any], current: NormalizedRecord) -> RecordPatch:
        urls = valid_image_urls(raw.get("pictures"))
        return RecordPatch(
            featured_image_url=urls[0] if urls else "",
            gallery_image_urls=urls,
        )
