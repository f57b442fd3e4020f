"""
Property Feed Sync Package.

This package reconciles a batch of property listings pulled from an external
JSON feed into a content-management system's post / metadata / taxonomy
model, attaching featured and gallery images along the way.

Modules:
    config: Configuration settings and logging setup.
    core: Shared coercion, sanitization, date and connection utilities.
    dictionary: Coded-value lookup tables and their loader.
    mapping: Field mappers composing a raw record into a normalized record.
    media: Image download, media library storage and thumbnail generation.
    store: The content-store interface and its in-memory/MongoDB backends.
    sync: Duplicate filter, post/image reconcilers and the batch driver.
    utils: Reporting helpers for the CLI.

Author: Leonardo Pacciani-Mori
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Leonardo Pacciani-Mori"
