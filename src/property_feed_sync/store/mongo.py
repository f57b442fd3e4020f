"""
MongoDB content store.

Entities live in one posts collection. Each document embeds its metadata
as an ordered array of {"key", "value"} entries (so repeated keys such as
gallery images are preserved) and its taxonomy terms as a
{taxonomy: [terms]} map. Integer ids come from a counters collection.

Usage:
    from property_feed_sync.core.connections import mongodb_connection
    from property_feed_sync.store.mongo import MongoContentStore

    with mongodb_connection() as client:
        store = MongoContentStore.from_client(client)
        ids = store.find_entities("property", meta={"_feed_json_id": "7"})

Author: Leonardo Pacciani-Mori
License: MIT
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from property_feed_sync.config.logging_config import get_logger
from property_feed_sync.config.settings import MONGODB_CONTENT_DB, POSTS_COLLECTION
from property_feed_sync.core.connections import get_content_collections
from property_feed_sync.exceptions import StoreError
from property_feed_sync.store.base import TRASH_STATUS, ContentStore

logger = get_logger(__name__)


class MongoContentStore(ContentStore):
    """
    ContentStore backed by MongoDB collections.

    Every PyMongo failure is re-raised as StoreError with the driver's
    message.

    Args:
        posts: The posts collection.
        counters: The counters collection used for id sequences.
        **kwargs: Passed to ContentStore (media_root, fetcher, ...).
    """

    def __init__(self, posts: Any, counters: Any, **kwargs: Any):
        super().__init__(**kwargs)
        self.posts = posts
        self.counters = counters

    @classmethod
    def from_client(cls, client: Any, database: str = MONGODB_CONTENT_DB, **kwargs: Any) -> "MongoContentStore":
        posts, counters = get_content_collections(client, database)
        return cls(posts, counters, **kwargs)

    def ensure_indexes(self) -> None:
        """Create the indexes used by the sync lookups."""
        try:
            self.posts.create_index([("post_type", ASCENDING), ("post_title", ASCENDING)])
            self.posts.create_index([("meta.key", ASCENDING), ("meta.value", ASCENDING)])
        except PyMongoError as e:
            raise StoreError(f"Could not create indexes: {e}") from e

    def _next_id(self) -> int:
        counter = self.counters.find_one_and_update(
            {"_id": POSTS_COLLECTION},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(counter["seq"])

    # =========================================================================
    # ENTITIES
    # =========================================================================

    def find_entities(
        self,
        entity_type: str,
        title: Optional[str] = None,
        meta: Optional[Mapping[str, Any]] = None,
        include_trashed: bool = False,
        limit: Optional[int] = None
    ) -> List[int]:
        conditions: List[Dict[str, Any]] = [{"post_type": entity_type}]
        if title is not None:
            conditions.append({"post_title": title})
        if not include_trashed:
            conditions.append({"post_status": {"$ne": TRASH_STATUS}})
        for key, value in (meta or {}).items():
            conditions.append({"meta": {"$elemMatch": {"key": key, "value": value}}})

        try:
            cursor = self.posts.find({"$and": conditions}, {"_id": 1}).sort("_id", ASCENDING)
            if limit is not None:
                cursor = cursor.limit(limit)
            return [doc["_id"] for doc in cursor]
        except PyMongoError as e:
            raise StoreError(f"Entity lookup failed: {e}") from e

    def create_entity(self, fields: Mapping[str, Any]) -> int:
        if not fields.get("post_type"):
            raise StoreError("Cannot create an entity without post_type")

        try:
            entity_id = self._next_id()
            document = dict(fields)
            document.update({"_id": entity_id, "meta": [], "terms": {}})
            self.posts.insert_one(document)
        except PyMongoError as e:
            raise StoreError(f"Entity insert failed: {e}") from e
        return entity_id

    def update_entity(self, entity_id: int, fields: Mapping[str, Any]) -> None:
        updates = {key: value for key, value in fields.items() if key not in ("_id", "meta", "terms")}
        try:
            result = self.posts.update_one({"_id": entity_id}, {"$set": updates})
        except PyMongoError as e:
            raise StoreError(f"Entity {entity_id} update failed: {e}") from e
        if result.matched_count == 0:
            raise StoreError(f"Entity {entity_id} does not exist")

    def get_entity(self, entity_id: int) -> Optional[Dict[str, Any]]:
        try:
            return self.posts.find_one({"_id": entity_id}, {"meta": 0, "terms": 0})
        except PyMongoError as e:
            raise StoreError(f"Entity {entity_id} read failed: {e}") from e

    # =========================================================================
    # METADATA
    # =========================================================================

    def get_metadata(self, entity_id: int, key: str, single: bool = True) -> Any:
        try:
            document = self.posts.find_one({"_id": entity_id}, {"meta": 1})
        except PyMongoError as e:
            raise StoreError(f"Metadata read for {entity_id} failed: {e}") from e

        entries = (document or {}).get("meta", [])
        values = [entry.get("value") for entry in entries if entry.get("key") == key]
        if single:
            return values[0] if values else None
        return values

    def add_metadata(self, entity_id: int, key: str, value: Any, unique: bool = False) -> bool:
        query: Dict[str, Any] = {"_id": entity_id}
        if unique:
            query["meta.key"] = {"$ne": key}

        try:
            result = self.posts.update_one(query, {"$push": {"meta": {"key": key, "value": value}}})
        except PyMongoError as e:
            raise StoreError(f"Metadata write for {entity_id} failed: {e}") from e
        return result.modified_count > 0

    def delete_metadata(self, entity_id: int, key: str, value: Any = None) -> int:
        condition: Dict[str, Any] = {"key": key}
        if value is not None:
            condition["value"] = value

        before = len(self.get_metadata(entity_id, key, single=False))
        try:
            self.posts.update_one({"_id": entity_id}, {"$pull": {"meta": condition}})
        except PyMongoError as e:
            raise StoreError(f"Metadata delete for {entity_id} failed: {e}") from e
        after = len(self.get_metadata(entity_id, key, single=False))
        return before - after

    # =========================================================================
    # TAXONOMIES
    # =========================================================================

    def set_taxonomy_terms(
        self,
        entity_id: int,
        taxonomy: str,
        terms: Iterable[str],
        append: bool = False
    ) -> None:
        terms = [term for term in dict.fromkeys(terms) if term]
        field = f"terms.{taxonomy}"
        update = {"$addToSet": {field: {"$each": terms}}} if append else {"$set": {field: terms}}

        try:
            result = self.posts.update_one({"_id": entity_id}, update)
        except PyMongoError as e:
            raise StoreError(f"Taxonomy write for {entity_id} failed: {e}") from e
        if result.matched_count == 0:
            raise StoreError(f"Entity {entity_id} does not exist")

    def get_taxonomy_terms(self, entity_id: int, taxonomy: str) -> List[str]:
        try:
            document = self.posts.find_one({"_id": entity_id}, {"terms": 1})
        except PyMongoError as e:
            raise StoreError(f"Taxonomy read for {entity_id} failed: {e}") from e
        return list((document or {}).get("terms", {}).get(taxonomy, []))
