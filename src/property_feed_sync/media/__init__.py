"""
Media module for the property feed sync package.

Submodules:
    downloader: Remote image download with timeout and Pillow validation.
    library: On-disk media library with unique file names.
    thumbnails: Pillow thumbnail generation.
"""

from .downloader import download_image, identify_image
from .library import MediaLibrary
from .thumbnails import generate_thumbnails
