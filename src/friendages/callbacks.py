"""
Adapters turning error-first callback operations into awaitables.

Store SDKs in this project expose operations shaped like
``operation(*args, callback)`` where ``callback(error, result)`` is invoked
exactly once when the work is finished. ``promisify`` appends such a
callback, waits for it, and either returns ``result`` or raises ``error``.
The callback may fire synchronously, later on the event loop, or from a
worker thread.
"""

import asyncio
import functools
from collections.abc import Awaitable, Callable
from typing import Any

from .logging import get_logger

logger = get_logger(__name__)


class CallbackError(Exception):
    """Raised when a callback reports an error value that is not an exception."""

    def __init__(self, error: Any):
        super().__init__(f"Callback reported an error: {error!r}")
        self.error = error


def _settle(future: asyncio.Future, error: Any, result: Any) -> None:
    if future.done():
        # Late or duplicate callback invocation, or the awaiting task went away
        logger.debug(
            "Ignoring callback on settled future",
            cancelled=future.cancelled(),
            error=str(error) if error else None,
        )
        return

    if error:
        if isinstance(error, BaseException):
            future.set_exception(error)
        else:
            future.set_exception(CallbackError(error))
    else:
        future.set_result(result)


async def promisify(operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a callback-style operation and await its outcome.

    The handler is appended after ``args`` as the final positional argument;
    ``kwargs`` are forwarded unchanged.

    Args:
        operation: Callable accepting ``(*args, callback, **kwargs)``
        *args: Positional arguments placed ahead of the callback

    Returns:
        The ``result`` the operation passed to its callback

    Raises:
        The ``error`` the operation passed to its callback (non-exception
        values are wrapped in CallbackError), or whatever ``operation``
        raises while being called.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def handler(error: Any = None, result: Any = None) -> None:
        try:
            loop.call_soon_threadsafe(_settle, future, error, result)
        except RuntimeError:
            # Loop already closed; nobody is left to receive the outcome
            logger.debug("Callback invoked after event loop closed")

    operation(*args, handler, **kwargs)
    return await future


def awaitable(operation: Callable[..., Any]) -> Callable[..., Awaitable[Any]]:
    """Decorator form of ``promisify``.

    Example:
        find = awaitable(collection.find)
        documents = await find(query)
    """

    @functools.wraps(operation)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        return await promisify(operation, *args, **kwargs)

    return wrapper
