"""
Normalized record types produced by the mapping pipeline.

A raw feed record is mapped into a NormalizedRecord in a fixed sequence of
steps. Each step returns a RecordPatch describing only its own slice, and
the orchestrator merges the patches one after the other into a fresh
record. No step ever mutates the record it was given.

Author: Leonardo Pacciani-Mori
License: MIT
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

from property_feed_sync.config.settings import PROPERTY_POST_STATUS, PROPERTY_POST_TYPE
from property_feed_sync.core.dict_utils import normalize_code, unique_ordered
from property_feed_sync.core.string_utils import as_text
from property_feed_sync.mapping.keys import MetaKey, Taxonomy


@dataclass(frozen=True)
class PostFields:
    """
    Core fields of the target post.

    Attributes:
        title: Post title, never empty for a record that gets written.
        content: Sanitized HTML body.
        status: Publication status.
        post_type: Entity type tag.
        created: Creation timestamp in the site timezone, if known.
        created_gmt: Creation timestamp in UTC, if known.
        modified: Modification timestamp in the site timezone, if known.
        modified_gmt: Modification timestamp in UTC, if known.
    """
    title: str = ""
    content: str = ""
    status: str = PROPERTY_POST_STATUS
    post_type: str = PROPERTY_POST_TYPE
    created: Optional[str] = None
    created_gmt: Optional[str] = None
    modified: Optional[str] = None
    modified_gmt: Optional[str] = None

    def to_store_fields(self) -> Dict[str, Any]:
        """
        Convert to the field names used by the content store.

        Timestamps that were not mapped are left out, so an update never
        blanks an existing date.
        """
        fields = {
            "post_title": self.title,
            "post_content": self.content,
            "post_status": self.status,
            "post_type": self.post_type,
        }
        optional = {
            "post_date": self.created,
            "post_date_gmt": self.created_gmt,
            "post_modified": self.modified,
            "post_modified_gmt": self.modified_gmt,
        }
        fields.update({key: value for key, value in optional.items() if value is not None})
        return fields


@dataclass
class RecordPatch:
    """
    The output of one mapping step.

    Attributes:
        post_fields: PostFields attributes to set.
        metadata: Metadata values to set, overwriting earlier values.
        taxonomy_terms: Terms to add per taxonomy; merged without duplicates.
        featured_image_url: Featured image URL, or None to leave unchanged.
        gallery_image_urls: Gallery URLs, or None to leave unchanged.
    """
    post_fields: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    taxonomy_terms: Dict[str, List[str]] = field(default_factory=dict)
    featured_image_url: Optional[str] = None
    gallery_image_urls: Optional[List[str]] = None

    def set_meta(self, key: MetaKey, value: Any) -> "RecordPatch":
        self.metadata[key.value] = value
        return self

    def add_terms(self, taxonomy: Taxonomy, *terms: str) -> "RecordPatch":
        existing = self.taxonomy_terms.setdefault(taxonomy.value, [])
        for term in terms:
            if term and term not in existing:
                existing.append(term)
        return self


@dataclass(frozen=True)
class NormalizedRecord:
    """
    A feed record mapped onto the target schema.

    Attributes:
        post_fields: Core post fields.
        metadata: Metadata key to scalar or structured value.
        taxonomy_terms: Taxonomy name to an ordered list of unique labels.
        featured_image_url: URL of the featured image, or "".
        gallery_image_urls: Ordered gallery URLs, including the featured one.

    Example:
        >>> record = NormalizedRecord().merge(RecordPatch(post_fields={"title": "Flat A"}))
        >>> record.post_fields.title
        'Flat A'
    """
    post_fields: PostFields = field(default_factory=PostFields)
    metadata: Dict[str, Any] = field(default_factory=dict)
    taxonomy_terms: Dict[str, List[str]] = field(default_factory=dict)
    featured_image_url: str = ""
    gallery_image_urls: List[str] = field(default_factory=list)

    def merge(self, patch: RecordPatch) -> "NormalizedRecord":
        """Return a new record with the patch applied on top of this one."""
        metadata = dict(self.metadata)
        metadata.update(patch.metadata)

        taxonomy_terms = {name: list(terms) for name, terms in self.taxonomy_terms.items()}
        for name, terms in patch.taxonomy_terms.items():
            if not terms:
                continue
            taxonomy_terms[name] = unique_ordered(taxonomy_terms.get(name, []) + list(terms))

        return NormalizedRecord(
            post_fields=replace(self.post_fields, **patch.post_fields),
            metadata=metadata,
            taxonomy_terms=taxonomy_terms,
            featured_image_url=(
                self.featured_image_url if patch.featured_image_url is None
                else patch.featured_image_url
            ),
            gallery_image_urls=(
                list(self.gallery_image_urls) if patch.gallery_image_urls is None
                else list(patch.gallery_image_urls)
            ),
        )

    def meta(self, key: Union[MetaKey, str], default: Any = None) -> Any:
        name = key.value if isinstance(key, MetaKey) else key
        return self.metadata.get(name, default)

    def terms(self, taxonomy: Union[Taxonomy, str]) -> List[str]:
        name = taxonomy.value if isinstance(taxonomy, Taxonomy) else taxonomy
        return list(self.taxonomy_terms.get(name, []))


def correlation_id(source_id: Any) -> str:
    """
    Normalize a feed id to the text stored in the JSON_ID metadata.

    The same normalization is applied when writing and when looking an
    entity up, so 7, "7" and 7.0 all find the same entity.

    Example:
        >>> correlation_id(7.0)
        '7'
        >>> correlation_id(None)
        ''
    """
    return as_text(normalize_code(source_id))
