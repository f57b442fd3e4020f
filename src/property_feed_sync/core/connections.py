"""
Database connection utilities for the property feed sync package.

This module provides MongoDB connection management for the content store
backend: a client factory, a context manager that always closes the
client, and an accessor for the posts and counters collections.

Usage:
    from property_feed_sync.core.connections import (
        mongodb_connection,
        get_content_collections,
    )

    with mongodb_connection() as client:
        posts, counters = get_content_collections(client)
        print(posts.count_documents({"post_type": "property"}))

Author: Leonardo Pacciani-Mori
License: MIT
"""

from contextlib import contextmanager
from typing import Any, Optional, Tuple

from pymongo import MongoClient

from property_feed_sync.config.settings import (
    MONGODB_HOST,
    MONGODB_PORT,
    MONGODB_USER,
    MONGODB_PASSWORD,
    MONGODB_AUTH_SOURCE,
    MONGODB_CONTENT_DB,
    MONGODB_TIMEOUT_MS,
    POSTS_COLLECTION,
    COUNTERS_COLLECTION,
)


# =============================================================================
# CONTENT DATABASE ACCESS
# =============================================================================

def _get_mongo_auth_kwargs(
    username: Optional[str],
    password: Optional[str],
    auth_source: Optional[str],
) -> dict:
    if username and password:
        return {
            "username": username,
            "password": password,
            "authSource": auth_source or "admin",
        }
    return {}


def get_mongodb_client(
    host: str = MONGODB_HOST,
    port: int = MONGODB_PORT,
    username: Optional[str] = MONGODB_USER,
    password: Optional[str] = MONGODB_PASSWORD,
    auth_source: Optional[str] = MONGODB_AUTH_SOURCE,
    timeout_ms: Optional[int] = MONGODB_TIMEOUT_MS,
) -> MongoClient:
    """
    Build a MongoClient for the content database server.

    Credentials are only passed when both a username and a password are
    configured. PyMongo connects lazily, so an unreachable server surfaces
    on the first operation rather than here.

    Args:
        host: Server hostname or IP address.
        port: Server port.
        username: Optional username for authentication.
        password: Optional password for authentication.
        auth_source: Authentication database. Defaults to "admin".
        timeout_ms: Server selection timeout in milliseconds.

    Returns:
        MongoClient: A MongoDB client instance.

    Example:
        >>> client = get_mongodb_client()
        >>> posts, counters = get_content_collections(client)
        >>> client.close()
    """
    kwargs = _get_mongo_auth_kwargs(username, password, auth_source)
    if timeout_ms is not None:
        kwargs["serverSelectionTimeoutMS"] = timeout_ms
    return MongoClient(host, port, **kwargs)


@contextmanager
def mongodb_connection(**client_kwargs: Any):
    """
    Yield a MongoClient and close it when the block exits.

    Accepts the same keyword arguments as get_mongodb_client().

    Yields:
        MongoClient: A MongoDB client instance, closed on exit.

    Example:
        >>> with mongodb_connection() as client:
        ...     posts, _ = get_content_collections(client)
        ...     print(posts.count_documents({}))
    """
    client = get_mongodb_client(**client_kwargs)
    try:
        yield client
    finally:
        client.close()


def get_content_collections(
    client: MongoClient,
    database: str = MONGODB_CONTENT_DB
) -> Tuple[Any, Any]:
    """
    Get the posts and counters collections of the content database.

    Documents in the posts collection have the structure:
        {
            "_id": int,
            "post_type": "property" | "attachment",
            "post_title": "...",
            "post_status": "publish" | "trash" | "inherit",
            ...post fields...,
            "meta": [{"key": "...", "value": ...}, ...],
            "terms": {"taxonomy": ["term", ...]}
        }

    The counters collection holds one document per sequence:
        {"_id": "posts", "seq": int}

    Args:
        client: An active MongoDB client.
        database: Name of the content database.

    Returns:
        Tuple[Collection, Collection]: (posts, counters).
    """
    db = client[database]
    return db[POSTS_COLLECTION], db[COUNTERS_COLLECTION]
