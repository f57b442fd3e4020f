"""
Thumbnail generation with Pillow.

For every configured size variant, the source image is shrunk to fit the
bounding box (aspect ratio kept, never upscaled) and saved next to the
original as "<stem>-<width>x<height><suffix>". The returned metadata
describes the original and every variant, in the shape persisted on the
attachment.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

from PIL import Image, UnidentifiedImageError

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import THUMBNAIL_QUALITY, THUMBNAIL_SIZES
from property_feed_sync.exceptions import ImageError
from property_feed_sync.media.downloader import guess_mime_type

logger = get_logger(__name__)


def _save_variant(img: Image.Image, path: Path) -> None:
    suffix = path.suffix.lower()
    if suffix in (".jpg", ".jpeg"):
        if img.mode in ("RGBA", "P", "LA"):
            img = img.convert("RGB")
        img.save(path, format="JPEG", quality=THUMBNAIL_QUALITY, optimize=True)
    else:
        img.save(path)


def generate_thumbnails(
    path: Union[str, Path],
    sizes: Mapping[str, Tuple[int, int]] = THUMBNAIL_SIZES
) -> Dict[str, Any]:
    """
    Generate the size variants of an image.

    Args:
        path: Path to the original image.
        sizes: Variant name -> (max width, max height).

    Returns:
        dict: {"width", "height", "file", "sizes": {name: {"file",
            "width", "height", "mime_type"}}}. Variants not smaller than the
            original are left out.

    Raises:
        ImageError: If the original cannot be opened or a variant cannot
            be written.

    Example:
        >>> generate_thumbnails("media/2024/01/flat.jpg", {"thumbnail": (150, 150)})
        {'width': 800, 'height': 600, 'file': 'flat.jpg',
         'sizes': {'thumbnail': {'file': 'flat-150x112.jpg', 'width': 150,
                                 'height': 112, 'mime_type': 'image/jpeg'}}}
    """
    path = Path(path)
    try:
        with Image.open(path) as original:
            original.load()
            width, height = original.size
            variants = {}

            for name, (max_width, max_height) in sizes.items():
                if width <= max_width and height <= max_height:
                    continue

                variant = original.copy()
                variant.thumbnail((max_width, max_height), Image.LANCZOS)
                variant_path = path.with_name(
                    f"{path.stem}-{variant.width}x{variant.height}{path.suffix}"
                )
                _save_variant(variant, variant_path)

                variants[name] = {
                    "file": variant_path.name,
                    "width": variant.width,
                    "height": variant.height,
                    "mime_type": guess_mime_type(variant_path.name),
                }
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise ImageError(f"Could not generate thumbnails for {path}: {e}") from e

    logger.debug(f"Generated {len(variants)} thumbnails for {path.name}")
    return {"width": width, "height": height, "file": path.name, "sizes": variants}
