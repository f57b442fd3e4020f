"""
Exception types raised by the property feed sync package.

Store backends and media helpers raise these; the reconcilers translate
them into per-record outcomes so that a single bad record never aborts a
batch. Dictionary misses are deliberately absent: they always resolve to a
default value.

Author: Leonardo Pacciani-Mori
License: MIT
"""


class PropertySyncError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(PropertySyncError):
    """
    A record or a set of sync parameters failed validation.

    Raised for a missing source id, a record that is not a mapping, or
    inconsistent count/range parameters.
    """


class StoreError(PropertySyncError):
    """A content-store lookup, create or update failed."""


class ImageError(PropertySyncError):
    """
    Fetching, importing or thumbnailing an image failed.

    Always non-fatal for a sync: callers log it and continue with a missing
    image or the default placeholder.
    """


class FeedReadError(PropertySyncError):
    """The feed or dictionary file could not be read or decoded."""
