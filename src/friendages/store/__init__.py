"""Callback-style document store collaborators."""

from .base import (
    Document,
    DocumentCollection,
    Query,
    StoreConflictError,
    StoreException,
    StoreTimeoutError,
)
from .factory import create_collection
from .implementations.local import LocalCollection
from .implementations.memory import MemoryCollection

__all__ = [
    "Document",
    "DocumentCollection",
    "LocalCollection",
    "MemoryCollection",
    "Query",
    "StoreConflictError",
    "StoreException",
    "StoreTimeoutError",
    "create_collection",
]
