"""
Construction of the per-request GraphQL context
"""

from typing import Any

import strawberry

from ..config import settings
from ..friends import FriendContext
from ..logging import get_logger, get_request_id
from ..store.base import DocumentCollection

FRIENDS_CONTEXT_KEY = "friends"


def build_friend_context(
    collection: DocumentCollection, request_id: str | None = None
) -> FriendContext:
    """Bind a request-scoped logger and the collection into a FriendContext."""
    logger = get_logger("friendages.friends")
    request_id = request_id or get_request_id()
    if request_id:
        logger = logger.bind(request_id=request_id)

    return FriendContext(
        collection=collection,
        logger=logger,
        store_timeout=settings.store_timeout,
    )


def get_friend_context(info: strawberry.Info) -> FriendContext:
    context: Any = info.context
    try:
        return context[FRIENDS_CONTEXT_KEY]
    except (KeyError, TypeError) as e:
        raise RuntimeError("GraphQL context is missing the friends context") from e
