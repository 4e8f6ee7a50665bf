"""Local filesystem document collection for development and self-hosted deployments."""

import json
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from ...logging import get_logger
from ..base import (
    ID_FIELD,
    Document,
    DocumentCollection,
    DocumentIndex,
    Query,
    StoreCallback,
    StoreException,
)

logger = get_logger(__name__)


class LocalCollection(DocumentCollection):
    """Collection persisted as one JSON file per collection.

    Operations run on a worker thread pool and report back by invoking the
    callback from the worker thread, the way a client SDK with its own I/O
    threads would.
    """

    def __init__(
        self,
        name: str,
        base_path: Path,
        key_field: str = "name",
        max_workers: int = 4,
    ):
        self.name = name
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.file_path = self._get_safe_file_path(f"{name}.json")
        self.index = DocumentIndex(key_field=key_field, documents=self._load())
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=f"friendages-{name}"
        )

    def _get_safe_file_path(self, filename: str) -> Path:
        """Resolve a file inside base_path, rejecting traversal."""
        file_path = (self.base_path / filename).resolve()
        try:
            file_path.relative_to(self.base_path)
        except ValueError as e:
            raise StoreException(f"Invalid collection name: {self.name}") from e
        return file_path

    def _load(self) -> list[Document]:
        if not self.file_path.exists():
            return []
        try:
            with open(self.file_path, encoding="utf-8") as f:
                documents = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreException(f"Failed to load collection {self.name}: {e}") from e
        if not isinstance(documents, list):
            raise StoreException(f"Collection file {self.file_path} must hold a JSON list")
        logger.debug("Loaded collection", collection=self.name, documents=len(documents))
        return documents

    def _flush(self) -> None:
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self.index.snapshot(), f, indent=2)
            os.replace(tmp_path, self.file_path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

    def _save_and_flush(self, document: Document) -> Document:
        # Hold the index lock across save and flush so the file never lags a newer save
        with self.index.lock:
            doc_id = document.get(ID_FIELD)
            previous = self.index.get(doc_id) if doc_id is not None else None
            saved = self.index.save(document)
            try:
                self._flush()
            except Exception:
                # The file still holds the old state; make the index match it
                self.index.restore(saved[ID_FIELD], previous)
                raise
            return saved

    def _run(self, work: Callable[..., Any], arg: Any, callback: StoreCallback) -> None:
        try:
            result = work(arg)
        except StoreException as e:
            callback(e, None)
            return
        except OSError as e:
            logger.error("File system error in collection", collection=self.name, error=str(e))
            callback(StoreException(f"File system error: {e}"), None)
            return
        except Exception as e:
            logger.error("Unexpected error in collection", collection=self.name, error=str(e))
            callback(StoreException(f"Unexpected store error: {e}"), None)
            return
        callback(None, result)

    def find(self, query: Query, callback: StoreCallback) -> None:
        self._executor.submit(self._run, self.index.find, query, callback)

    def save(self, document: Document, callback: StoreCallback) -> None:
        self._executor.submit(self._run, self._save_and_flush, document, callback)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
