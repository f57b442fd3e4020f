"""
Configuration settings for the property feed sync package.

This module centralizes all configuration constants, connection parameters
and default values used throughout the sync. Settings are grouped by their
functional area for easy maintenance.

Configuration includes:
    - Content store connection parameters (MongoDB)
    - Feed and dictionary file locations
    - Media library and thumbnail settings
    - HTTP settings for image downloads
    - Sync defaults and the contact-to-agency correlation table

Note:
    Every value that differs between deployments can be overridden through
    an environment variable of the same name.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import os
from importlib import resources as _resources


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# =============================================================================
# CONTENT STORE CONFIGURATION
# =============================================================================
# All connection settings support environment variables for Docker deployment.
# Fallback values are provided for local development.

# -----------------------------------------------------------------------------
# MongoDB Configuration
# -----------------------------------------------------------------------------
# Use MONGODB_HOST=mongodb for Docker, or 127.0.0.1 for local development.
MONGODB_HOST = os.getenv("MONGODB_HOST", "127.0.0.1")
MONGODB_PORT = int(os.getenv("MONGODB_PORT", "27017"))
MONGODB_USER = os.getenv("MONGODB_USER", "")
MONGODB_PASSWORD = os.getenv("MONGODB_PASSWORD", "")
MONGODB_AUTH_SOURCE = os.getenv("MONGODB_AUTH_SOURCE", "admin")

# Database holding the synced posts, attachments and id counters.
MONGODB_CONTENT_DB = os.getenv("MONGODB_CONTENT_DB", "property_content")

# Collection names inside the content database.
POSTS_COLLECTION = "posts"
COUNTERS_COLLECTION = "counters"

# Milliseconds to wait for a MongoDB server before giving up.
MONGODB_TIMEOUT_MS = int(os.getenv("MONGODB_TIMEOUT_MS", "5000"))

# =============================================================================
# FEED CONFIGURATION
# =============================================================================

# JSON feed file with the shape {"data": [record, ...]}.
FEED_DATA_FILE = os.getenv("FEED_DATA_FILE", "data/feed.json")

# Dictionary file with the shape {"success": true, "data": {category: {code: label}}}.
# Defaults to the sample dictionary bundled with the package.
DICTIONARY_FILE = os.getenv(
    "DICTIONARY_FILE",
    str(_resources.files("property_feed_sync").joinpath("data/dictionary.json")),
)

# =============================================================================
# MEDIA CONFIGURATION
# =============================================================================

# Directory where imported images and their thumbnails are written.
MEDIA_ROOT = os.getenv("MEDIA_ROOT", "media")

# Thumbnail size variants generated for each new attachment (name -> (width, height)).
THUMBNAIL_SIZES = {
    "thumbnail": (150, 150),
    "medium": (300, 300),
    "large": (1024, 1024),
}

# JPEG quality used when writing thumbnails.
THUMBNAIL_QUALITY = 85

# Placeholder image attached as featured image when the source image fails.
DEFAULT_THUMBNAIL_PATH = os.getenv(
    "DEFAULT_THUMBNAIL_PATH",
    str(_resources.files("property_feed_sync").joinpath("data/default-thumbnail.png")),
)
USE_DEFAULT_THUMBNAIL = _env_flag("USE_DEFAULT_THUMBNAIL", "true")

# =============================================================================
# HTTP CLIENT CONFIGURATION
# =============================================================================

# Timeout in seconds for a single image download.
# A timeout is treated as a failed image, never as a failed record.
IMAGE_DOWNLOAD_TIMEOUT_SECONDS = float(os.getenv("IMAGE_DOWNLOAD_TIMEOUT_SECONDS", "30"))

IMAGE_USER_AGENT = os.getenv(
    "IMAGE_USER_AGENT",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
)
IMAGE_REQUEST_HEADERS = {
    "User-Agent": IMAGE_USER_AGENT,
    "Accept": "image/avif,image/webp,image/png,image/jpeg,image/*;q=0.8,*/*;q=0.5",
}

# =============================================================================
# SYNC CONFIGURATION
# =============================================================================

# Number of feed records processed when no count or range is given.
DEFAULT_ITEMS_TO_PROCESS = int(os.getenv("DEFAULT_ITEMS_TO_PROCESS", "2"))

# Upper bound on the human-readable messages kept in a sync result.
MAX_RESULT_MESSAGES = int(os.getenv("MAX_RESULT_MESSAGES", "200"))

# Timezone of the site; created/modified dates are rendered in it,
# with a UTC variant alongside.
SITE_TIMEZONE = os.getenv("SITE_TIMEZONE", "UTC")

# Post type and status written for every synced property.
PROPERTY_POST_TYPE = "property"
PROPERTY_POST_STATUS = "publish"

# Zoom level appended to the combined "lat,lng,zoom" location field.
DEFAULT_MAP_ZOOM = 16

# =============================================================================
# AGENCY CONFIGURATION
# =============================================================================

# Feed contact ids that belong to an agency rather than an individual agent,
# mapped to the id of the agency post they should be attributed to.
AGENCY_CONTACT_MAP = {
    "145581": 2792,
    "136583": 2792,
    "147224": 2792,
    "130235": 2792,
    "145584": 2792,
    "80793": 2792,
    "79629": 2792,
    "120476": 2792,
}
