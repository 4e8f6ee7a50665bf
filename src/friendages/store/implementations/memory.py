"""In-memory document collection for development and tests."""

import asyncio
from typing import Any

from ...logging import get_logger
from ..base import (
    Document,
    DocumentCollection,
    DocumentIndex,
    Query,
    StoreCallback,
    StoreException,
)

logger = get_logger(__name__)


class MemoryCollection(DocumentCollection):
    """Dict-backed collection.

    Callbacks are scheduled on the running event loop when there is one, so
    callers observe the same asynchrony a networked store would give them.
    Without a running loop they are invoked synchronously.
    """

    def __init__(self, name: str, key_field: str = "name"):
        self.name = name
        self.index = DocumentIndex(key_field=key_field)

    def _dispatch(self, callback: StoreCallback, error: Any, result: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            callback(error, result)
            return
        loop.call_soon(callback, error, result)

    def find(self, query: Query, callback: StoreCallback) -> None:
        try:
            documents = self.index.find(query)
        except StoreException as e:
            self._dispatch(callback, e, None)
            return
        self._dispatch(callback, None, documents)

    def save(self, document: Document, callback: StoreCallback) -> None:
        try:
            saved = self.index.save(document)
        except StoreException as e:
            logger.debug("Save rejected", collection=self.name, error=str(e))
            self._dispatch(callback, e, None)
            return
        self._dispatch(callback, None, saved)
