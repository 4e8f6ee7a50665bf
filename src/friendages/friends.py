"""
Reading and writing a friend's age against a callback-style document collection
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .callbacks import promisify
from .logging import get_logger
from .store.base import (
    ID_FIELD,
    VERSION_FIELD,
    Document,
    DocumentCollection,
    Query,
    StoreTimeoutError,
)

NAME_FIELD = "name"
AGE_FIELD = "age"

AGE_UNSET_MESSAGE = "Sorry. You still have not set age for your friend - {name}. You can do that now."
AGE_SET_MESSAGE = "Your friend - {name}'s age is {age}."


class AgeStatus(Enum):
    NOT_FOUND = "not_found"
    AGE_UNSET = "age_unset"
    AGE_SET = "age_set"


@dataclass
class FriendRecord:
    """A stored friend document.

    ``extra`` keeps every other field on the stored document (including the
    store's ``_id`` and ``_version``) so updates write them back unchanged.
    """

    name: str
    age: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_document(cls, document: Document) -> "FriendRecord":
        extra = {k: v for k, v in document.items() if k not in (NAME_FIELD, AGE_FIELD)}
        return cls(name=document[NAME_FIELD], age=document.get(AGE_FIELD), extra=extra)

    def to_document(self) -> Document:
        document = dict(self.extra)
        document[NAME_FIELD] = self.name
        if self.age is not None:
            document[AGE_FIELD] = self.age
        return document

    @property
    def id(self) -> str | None:
        return self.extra.get(ID_FIELD)

    @property
    def version(self) -> int | None:
        return self.extra.get(VERSION_FIELD)


@dataclass
class FriendContext:
    """Per-request collaborators for the age operations."""

    collection: DocumentCollection
    logger: Any = field(default_factory=lambda: get_logger(__name__))
    store_timeout: float | None = None


def age_status(record: FriendRecord | None) -> AgeStatus:
    if record is None:
        return AgeStatus.NOT_FOUND
    # age=0 is a real age
    if record.age is None:
        return AgeStatus.AGE_UNSET
    return AgeStatus.AGE_SET


def describe_age(name: str, record: FriendRecord | None) -> str:
    if age_status(record) is AgeStatus.AGE_SET:
        return AGE_SET_MESSAGE.format(name=name, age=record.age)
    return AGE_UNSET_MESSAGE.format(name=name)


async def _call_store(context: FriendContext, operation: Any, *args: Any) -> Any:
    """Await one store operation, bounded by the context's timeout."""
    try:
        return await asyncio.wait_for(promisify(operation, *args), timeout=context.store_timeout)
    except TimeoutError as e:
        raise StoreTimeoutError(
            f"Store call {getattr(operation, '__name__', operation)!r} timed out "
            f"after {context.store_timeout}s"
        ) from e


async def lookup_friend(name: str, context: FriendContext) -> FriendRecord | None:
    """Fetch the first record stored under ``name``.

    Returns:
        The record, or None if the collection has no document for ``name``

    Raises:
        ValueError: If ``name`` is empty
        StoreException: On any store failure
    """
    if not name:
        raise ValueError("Friend name must be a non-empty string")

    query = Query().equal_to(NAME_FIELD, name).limit_to(1)
    documents = await _call_store(context, context.collection.find, query)
    if not documents:
        return None
    return FriendRecord.from_document(documents[0])


async def get_age(name: str, context: FriendContext) -> str:
    """Describe the stored age of ``name`` in a sentence."""
    try:
        record = await lookup_friend(name, context)
    except Exception as e:
        context.logger.error("Failed to read friend's age", name=name, error=str(e))
        raise

    return describe_age(name, record)


async def set_age(name: str, age: int, context: FriendContext) -> int:
    """Insert or update the age stored for ``name``.

    Returns:
        The age held by the saved document
    """
    try:
        record = await lookup_friend(name, context)
        if record is None:
            record = FriendRecord(name=name, age=age)
        else:
            record.age = age

        saved = await _call_store(context, context.collection.save, record.to_document())
    except Exception as e:
        context.logger.error("Failed to set friend's age", name=name, age=age, error=str(e))
        raise

    context.logger.info(
        "Friend's age saved",
        name=name,
        document_id=saved.get(ID_FIELD),
        version=saved.get(VERSION_FIELD),
    )
    return saved[AGE_FIELD]
