"""Core document store interfaces and the shared in-process index."""

import copy
import threading
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..logging import get_logger

logger = get_logger(__name__)

Document = dict[str, Any]
StoreCallback = Callable[[Any, Any], None]

ID_FIELD = "_id"
VERSION_FIELD = "_version"


class StoreException(Exception):
    """Base exception for store operations."""

    pass


class StoreConflictError(StoreException):
    """A write lost a race: stale version token or duplicate key."""

    pass


class StoreTimeoutError(StoreException):
    """A store call did not complete within the configured timeout."""

    pass


@dataclass
class Query:
    """Equality query over document fields."""

    filters: dict[str, Any] = field(default_factory=dict)
    limit: int | None = None

    def equal_to(self, field_name: str, value: Any) -> "Query":
        self.filters[field_name] = value
        return self

    def limit_to(self, limit: int) -> "Query":
        if limit < 1:
            raise ValueError(f"Query limit must be positive, got {limit}")
        self.limit = limit
        return self

    def matches(self, document: Document) -> bool:
        return all(
            field_name in document and document[field_name] == value
            for field_name, value in self.filters.items()
        )


class DocumentCollection(ABC):
    """Abstract base class for callback-style document collections.

    Every operation reports its outcome by calling ``callback(error, result)``
    exactly once.
    """

    name: str

    @abstractmethod
    def find(self, query: Query, callback: StoreCallback) -> None:
        """Find documents matching ``query``; result is a list of documents."""
        pass

    @abstractmethod
    def save(self, document: Document, callback: StoreCallback) -> None:
        """Insert or update ``document``; result is the saved document.

        Documents without an ``_id`` are inserted. Documents with an ``_id``
        replace the stored copy only if their ``_version`` matches it.
        """
        pass

    def close(self) -> None:
        """Release resources held by the collection."""
        pass


class DocumentIndex:
    """Thread-safe in-process document table keyed by ``_id``.

    Enforces a unique ``key_field`` across documents and compare-and-swap
    semantics on ``_version``.
    """

    def __init__(self, key_field: str = "name", documents: list[Document] | None = None):
        self.key_field = key_field
        self._documents: dict[str, Document] = {}
        self.lock = threading.RLock()
        for document in documents or []:
            stored = copy.deepcopy(document)
            # Hand-written seed documents may lack store metadata
            stored.setdefault(ID_FIELD, uuid.uuid4().hex)
            stored.setdefault(VERSION_FIELD, 1)
            self._documents[stored[ID_FIELD]] = stored

    def __len__(self) -> int:
        with self.lock:
            return len(self._documents)

    def snapshot(self) -> list[Document]:
        with self.lock:
            return [copy.deepcopy(doc) for doc in self._documents.values()]

    def get(self, doc_id: str) -> Document | None:
        with self.lock:
            document = self._documents.get(doc_id)
            return copy.deepcopy(document) if document is not None else None

    def restore(self, doc_id: str, previous: Document | None) -> None:
        """Put back the stored copy of ``doc_id`` as it was before a save.

        ``previous`` of None removes the document, undoing an insert.
        """
        with self.lock:
            if previous is None:
                self._documents.pop(doc_id, None)
            else:
                self._documents[doc_id] = copy.deepcopy(previous)

    def find(self, query: Query) -> list[Document]:
        with self.lock:
            matches: list[Document] = []
            for document in self._documents.values():
                if query.matches(document):
                    matches.append(copy.deepcopy(document))
                    if query.limit is not None and len(matches) >= query.limit:
                        break
            return matches

    def _key_taken(self, document: Document) -> bool:
        key = document.get(self.key_field)
        doc_id = document.get(ID_FIELD)
        return any(
            other.get(self.key_field) == key and other_id != doc_id
            for other_id, other in self._documents.items()
        )

    def save(self, document: Document) -> Document:
        with self.lock:
            if self._key_taken(document):
                raise StoreConflictError(
                    f"Document with {self.key_field}={document.get(self.key_field)!r} already exists"
                )

            doc_id = document.get(ID_FIELD)
            if doc_id is None:
                stored = copy.deepcopy(document)
                stored[ID_FIELD] = uuid.uuid4().hex
                stored[VERSION_FIELD] = 1
            else:
                current = self._documents.get(doc_id)
                if current is None:
                    raise StoreException(f"Document not found: {doc_id}")
                if document.get(VERSION_FIELD) != current.get(VERSION_FIELD):
                    raise StoreConflictError(
                        f"Version mismatch for {doc_id}: "
                        f"expected {current.get(VERSION_FIELD)}, got {document.get(VERSION_FIELD)}"
                    )
                stored = copy.deepcopy(document)
                stored[VERSION_FIELD] = current[VERSION_FIELD] + 1

            self._documents[stored[ID_FIELD]] = stored
            logger.debug(
                "Saved document",
                document_id=stored[ID_FIELD],
                version=stored[VERSION_FIELD],
            )
            return copy.deepcopy(stored)
