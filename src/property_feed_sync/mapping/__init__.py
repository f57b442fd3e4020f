"""
Mapping module for the property feed sync package.

This module turns a raw feed record into a NormalizedRecord: post fields,
metadata, taxonomy terms and image URLs.

Submodules:
    keys: Metadata keys, taxonomy names and feed codes of the target schema.
    record: PostFields, RecordPatch and NormalizedRecord.
    core_post: Title, content, status and timestamps.
    property_details: Identifiers, price, size, rooms, building and garage.
    address: Street, map address and coordinates.
    agent: Agent or agency contact metadata.
    features: Additional features list and feature terms.
    taxonomy: Type, location, status and label terms.
    images: Featured and gallery image URLs.
    orchestrator: PropertyMapper, running every step in order.
"""

from .record import NormalizedRecord, PostFields, RecordPatch, correlation_id
from .orchestrator import PropertyMapper
