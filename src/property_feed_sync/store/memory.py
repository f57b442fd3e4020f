"""
In-memory content store.

Keeps entities, metadata and taxonomy terms in plain dictionaries while
writing media files to a real media library. Used for dry runs of the CLI
and by the test suite.

Author: Leonardo Pacciani-Mori
License: MIT
"""

import copy
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from property_feed_sync.exceptions import StoreError
from property_feed_sync.store.base import TRASH_STATUS, ContentStore


class InMemoryContentStore(ContentStore):
    """
    ContentStore backed by dictionaries.

    Values are deep-copied on the way in and out, so callers never share
    mutable state with the store.

    Attributes:
        entities: Entity id -> core fields.
        metadata: Entity id -> ordered list of (key, value) entries.
        terms: Entity id -> taxonomy -> ordered term list.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.entities: Dict[int, Dict[str, Any]] = {}
        self.metadata: Dict[int, List[Tuple[str, Any]]] = {}
        self.terms: Dict[int, Dict[str, List[str]]] = {}
        self._next_id = 1

    def _require(self, entity_id: int) -> None:
        if entity_id not in self.entities:
            raise StoreError(f"Entity {entity_id} does not exist")

    def find_entities(
        self,
        entity_type: str,
        title: Optional[str] = None,
        meta: Optional[Mapping[str, Any]] = None,
        include_trashed: bool = False,
        limit: Optional[int] = None
    ) -> List[int]:
        matches = []
        for entity_id in sorted(self.entities):
            fields = self.entities[entity_id]
            if fields.get("post_type") != entity_type:
                continue
            if not include_trashed and fields.get("post_status") == TRASH_STATUS:
                continue
            if title is not None and fields.get("post_title") != title:
                continue
            if meta and not all(
                (key, value) in self.metadata.get(entity_id, [])
                for key, value in meta.items()
            ):
                continue

            matches.append(entity_id)
            if limit is not None and len(matches) >= limit:
                break
        return matches

    def create_entity(self, fields: Mapping[str, Any]) -> int:
        if not fields.get("post_type"):
            raise StoreError("Cannot create an entity without post_type")

        entity_id = self._next_id
        self._next_id += 1
        self.entities[entity_id] = copy.deepcopy(dict(fields))
        self.metadata[entity_id] = []
        self.terms[entity_id] = {}
        return entity_id

    def update_entity(self, entity_id: int, fields: Mapping[str, Any]) -> None:
        self._require(entity_id)
        self.entities[entity_id].update(copy.deepcopy(dict(fields)))

    def get_entity(self, entity_id: int) -> Optional[Dict[str, Any]]:
        fields = self.entities.get(entity_id)
        return copy.deepcopy(fields) if fields is not None else None

    def get_metadata(self, entity_id: int, key: str, single: bool = True) -> Any:
        values = [copy.deepcopy(v) for k, v in self.metadata.get(entity_id, []) if k == key]
        if single:
            return values[0] if values else None
        return values

    def add_metadata(self, entity_id: int, key: str, value: Any, unique: bool = False) -> bool:
        self._require(entity_id)
        entries = self.metadata[entity_id]
        if unique and any(k == key for k, _ in entries):
            return False
        entries.append((key, copy.deepcopy(value)))
        return True

    def delete_metadata(self, entity_id: int, key: str, value: Any = None) -> int:
        entries = self.metadata.get(entity_id, [])
        kept = [
            (k, v) for k, v in entries
            if k != key or (value is not None and v != value)
        ]
        self.metadata[entity_id] = kept
        return len(entries) - len(kept)

    def set_taxonomy_terms(
        self,
        entity_id: int,
        taxonomy: str,
        terms: Iterable[str],
        append: bool = False
    ) -> None:
        self._require(entity_id)
        current = self.terms[entity_id].get(taxonomy, []) if append else []
        updated = list(current)
        for term in terms:
            if term not in updated:
                updated.append(term)
        self.terms[entity_id][taxonomy] = updated

    def get_taxonomy_terms(self, entity_id: int, taxonomy: str) -> List[str]:
        return list(self.terms.get(entity_id, {}).get(taxonomy, []))
