"""
Image downloader for the property feed sync package.

Remote listing images are fetched with requests under a bounded timeout
and checked with Pillow before they are handed to the media library. Any
failure (connection error, timeout, HTTP error status, payload that is not
an image) is raised as ImageError so that the image reconciler can degrade
to "no attachment".

Author: Leonardo Pacciani-Mori
License: MIT
"""

import mimetypes
import posixpath
from io import BytesIO
from typing import Optional, Tuple
from urllib.parse import unquote, urlsplit

import requests
from PIL import Image, UnidentifiedImageError

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import (
    IMAGE_DOWNLOAD_TIMEOUT_SECONDS,
    IMAGE_REQUEST_HEADERS,
)
from property_feed_sync.exceptions import ImageError

logger = get_logger(__name__)


# Pillow format name -> file extension and MIME type.
IMAGE_FORMATS = {
    "JPEG": (".jpg", "image/jpeg"),
    "PNG": (".png", "image/png"),
    "GIF": (".gif", "image/gif"),
    "WEBP": (".webp", "image/webp"),
    "BMP": (".bmp", "image/bmp"),
    "TIFF": (".tif", "image/tiff"),
}


def identify_image(data: bytes) -> Tuple[str, str]:
    """
    Check that a payload is a readable image and report its type.

    Args:
        data: Raw file bytes.

    Returns:
        Tuple[str, str]: (file extension, MIME type).

    Raises:
        ImageError: If Pillow cannot identify or verify the image.

    Example:
        >>> identify_image(open("photo.jpg", "rb").read())
        ('.jpg', 'image/jpeg')
    """
    try:
        with Image.open(BytesIO(data)) as img:
            image_format = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise ImageError(f"Payload is not a valid image: {e}") from e

    if image_format not in IMAGE_FORMATS:
        raise ImageError(f"Unsupported image format: {image_format}")
    return IMAGE_FORMATS[image_format]


def filename_from_url(url: str, extension: str) -> str:
    """
    Derive a file name for a downloaded image from its URL.

    Example:
        >>> filename_from_url("https://cdn.example.com/img/flat%201.JPG?w=800", ".jpg")
        'flat 1.jpg'
    """
    name = posixpath.basename(unquote(urlsplit(url).path)) or "image"
    stem, _ = posixpath.splitext(name)
    return f"{stem or 'image'}{extension}"


def download_image(
    url: str,
    session: Optional[requests.Session] = None,
    timeout: float = IMAGE_DOWNLOAD_TIMEOUT_SECONDS
) -> Tuple[bytes, str, str]:
    """
    Download and validate a remote image.

    Args:
        url: Absolute URL of the image.
        session: Optional requests session to reuse connections.
        timeout: Timeout in seconds for the whole request.

    Returns:
        Tuple containing:
            - bytes: The image payload.
            - str: A file name derived from the URL.
            - str: The MIME type detected by Pillow.

    Raises:
        ImageError: On network failure, timeout, HTTP error status or an
            invalid image payload.

    Example:
        >>> data, filename, mime_type = download_image("https://cdn.example.com/1.jpg")
    """
    http = session or requests
    logger.info(f"Downloading image {url}")

    try:
        response = http.get(url, headers=IMAGE_REQUEST_HEADERS, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise ImageError(f"Timed out after {timeout}s downloading {url}") from e
    except requests.exceptions.RequestException as e:
        raise ImageError(f"Could not download {url}: {e}") from e

    if response.status_code >= 400:
        raise ImageError(f"Error {response.status_code} when fetching {url}")

    data = response.content
    if not data:
        raise ImageError(f"Empty response body for {url}")

    extension, mime_type = identify_image(data)
    return data, filename_from_url(url, extension), mime_type


def guess_mime_type(filename: str) -> str:
    """Guess a MIME type from a file name, defaulting to a generic binary type."""
    return mimetypes.guess_type(filename)[0] or "application/octet-stream"
