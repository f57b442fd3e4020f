"""
Dictionary module for the property feed sync package.

Submodules:
    resolver: DictionaryCategory enum, DictionaryResolver and the file loader.
"""

from .resolver import (
    DictionaryCategory,
    DictionaryResolver,
    is_unspecified,
    load_dictionary,
)
