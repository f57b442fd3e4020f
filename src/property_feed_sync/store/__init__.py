"""
Content store module for the property feed sync package.

Submodules:
    base: The ContentStore abstract base class and shared media operations.
    memory: Dictionary-backed store for dry runs and tests.
    mongo: MongoDB-backed store.
"""

from .base import ContentStore
from .memory import InMemoryContentStore
