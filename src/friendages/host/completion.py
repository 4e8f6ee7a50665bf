"""Completion builder handed to registered functions."""

from dataclasses import dataclass, field
from typing import Any

OK = 200
CREATED = 201
BAD_REQUEST = 400
NOT_FOUND = 404
RUNTIME_ERROR = 550


@dataclass
class FunctionResponse:
    """Outcome of one function invocation.

    ``terminal`` is True when the function ended the request pipeline
    (``done()``) and False when it handed control onward (``next()``).
    """

    status_code: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    terminal: bool = True

    @property
    def succeeded(self) -> bool:
        return 200 <= self.status_code < 300


class CompletionError(Exception):
    """Raised when a completion is used incorrectly."""

    pass


class Completion:
    """Fluent response builder: ``complete().set_body(b).ok().next()``."""

    def __init__(self) -> None:
        self._status_code: int | None = None
        self._body: Any = None
        self._headers: dict[str, str] = {}
        self._finished = False

    def set_body(self, body: Any) -> "Completion":
        self._body = body
        return self

    def set_header(self, name: str, value: str) -> "Completion":
        self._headers[name] = value
        return self

    def _status(self, status_code: int, body: Any = None) -> "Completion":
        self._status_code = status_code
        if body is not None:
            self._body = body
        return self

    def ok(self, body: Any = None) -> "Completion":
        return self._status(OK, body)

    def created(self, body: Any = None) -> "Completion":
        return self._status(CREATED, body)

    def bad_request(self, message: Any = None) -> "Completion":
        return self._status(BAD_REQUEST, message)

    def not_found(self, message: Any = None) -> "Completion":
        return self._status(NOT_FOUND, message)

    def runtime_error(self, message: Any = None) -> "Completion":
        return self._status(RUNTIME_ERROR, message)

    def _finish(self, terminal: bool) -> FunctionResponse:
        if self._finished:
            raise CompletionError("Completion already finished")
        if self._status_code is None:
            raise CompletionError("Completion has no status; call ok(), runtime_error(), ...")
        self._finished = True
        return FunctionResponse(
            status_code=self._status_code,
            body=self._body,
            headers=dict(self._headers),
            terminal=terminal,
        )

    def done(self) -> FunctionResponse:
        """Finish and end the request pipeline."""
        return self._finish(terminal=True)

    def next(self) -> FunctionResponse:
        """Finish and let the request continue through the pipeline."""
        return self._finish(terminal=False)
