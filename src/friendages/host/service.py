"""
Function service: a registry of named handlers invoked with a request and a
completion factory, plus the ``query`` function that executes GraphQL.
"""

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from ..logging import get_logger, request_context
from ..store.base import DocumentCollection
from .completion import Completion, FunctionResponse

logger = get_logger(__name__)

CompletionFactory = Callable[[], Completion]
FunctionHandler = Callable[["FunctionRequest", CompletionFactory], Awaitable[FunctionResponse]]


@dataclass
class FunctionRequest:
    """Inbound request handed to a registered function."""

    query: dict[str, Any] = field(default_factory=dict)
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    request_id: str | None = None


class FunctionService:
    """Registry and dispatcher for named functions."""

    def __init__(self) -> None:
        self._functions: dict[str, FunctionHandler] = {}

    def register(self, name: str, handler: FunctionHandler | None = None) -> Any:
        """Register ``handler`` under ``name``; usable as a decorator."""

        def decorator(func: FunctionHandler) -> FunctionHandler:
            if name in self._functions:
                raise ValueError(f"Function already registered: {name}")
            self._functions[name] = func
            logger.debug("Registered function", function=name)
            return func

        if handler is not None:
            return decorator(handler)
        return decorator

    def list_names(self) -> list[str]:
        return sorted(self._functions)

    async def invoke(self, name: str, request: FunctionRequest) -> FunctionResponse:
        """Run the function registered under ``name``.

        Unknown functions complete with not_found; exceptions escaping the
        handler complete with runtime_error.
        """
        handler = self._functions.get(name)
        if handler is None:
            logger.warning("Unknown function invoked", function=name)
            return Completion().not_found(f"Function not found: {name}").done()

        with request_context(request.request_id):
            try:
                logger.info("Invoking function", function=name)
                return await handler(request, Completion)
            except Exception as e:
                logger.error("Function raised", function=name, error=str(e))
                return Completion().runtime_error({"error": str(e)}).done()


def _graphql_payload(request: FunctionRequest) -> dict[str, Any]:
    """Collect query, variables and operationName from the query string or body."""
    payload: dict[str, Any] = {}
    if isinstance(request.body, dict):
        payload.update(request.body)
    payload.update({k: v for k, v in request.query.items() if v is not None})

    variables = payload.get("variables")
    if isinstance(variables, str):
        payload["variables"] = json.loads(variables) if variables else None
    return payload


def format_execution_result(result: Any) -> dict[str, Any]:
    body: dict[str, Any] = {"data": result.data}
    if result.errors:
        body["errors"] = [error.formatted for error in result.errors]
    return body


def create_function_service(collection: DocumentCollection) -> FunctionService:
    """Create a service with the ``query`` function serving the GraphQL schema."""
    from ..graphql.schema import build_context, schema

    service = FunctionService()

    @service.register("query")
    async def query(request: FunctionRequest, complete: CompletionFactory) -> FunctionResponse:
        try:
            payload = _graphql_payload(request)
        except json.JSONDecodeError as e:
            return complete().bad_request({"error": f"Invalid variables: {e}"}).done()

        document = payload.get("query")
        if not isinstance(document, str) or not document:
            return complete().bad_request({"error": "Missing GraphQL query"}).done()

        try:
            result = await schema.execute(
                document,
                variable_values=payload.get("variables"),
                operation_name=payload.get("operationName"),
                context_value=build_context(collection, function_request=request),
            )
        except Exception as e:
            logger.error("GraphQL execution failed", error=str(e))
            return complete().set_body({"error": str(e)}).runtime_error().done()

        return complete().set_body(format_execution_result(result)).ok().next()

    return service
