"""Tests for the function host protocol and the GraphQL query function."""

import json

import pytest

from friendages.host import (
    Completion,
    CompletionError,
    FunctionRequest,
    FunctionService,
    create_function_service,
)
from friendages.host.completion import RUNTIME_ERROR
from friendages.logging import get_request_id
from friendages.store.base import StoreException


class TestCompletion:
    """Test the fluent completion builder."""

    def test_ok_next(self):
        response = Completion().set_body({"a": 1}).ok().next()

        assert response.status_code == 200
        assert response.body == {"a": 1}
        assert response.terminal is False
        assert response.succeeded

    def test_runtime_error_done(self):
        response = Completion().runtime_error("boom").done()

        assert response.status_code == RUNTIME_ERROR
        assert response.body == "boom"
        assert response.terminal is True
        assert not response.succeeded

    def test_headers(self):
        response = Completion().set_header("X-Test", "1").created().done()

        assert response.status_code == 201
        assert response.headers == {"X-Test": "1"}

    def test_finish_without_status(self):
        with pytest.raises(CompletionError, match="no status"):
            Completion().set_body("x").done()

    def test_finish_twice(self):
        completion = Completion().ok()
        completion.done()

        with pytest.raises(CompletionError, match="already finished"):
            completion.next()


class TestFunctionService:
    """Test function registration and dispatch."""

    @pytest.mark.asyncio
    async def test_register_and_invoke(self):
        service = FunctionService()

        @service.register("echo")
        async def echo(request, complete):
            return complete().set_body(request.body).ok().done()

        response = await service.invoke("echo", FunctionRequest(body="hi"))

        assert response.body == "hi"
        assert service.list_names() == ["echo"]

    def test_duplicate_registration(self):
        service = FunctionService()

        async def handler(request, complete):
            return complete().ok().done()

        service.register("f", handler)
        with pytest.raises(ValueError, match="already registered"):
            service.register("f", handler)

    @pytest.mark.asyncio
    async def test_unknown_function(self):
        response = await FunctionService().invoke("missing", FunctionRequest())

        assert response.status_code == 404
        assert response.terminal is True

    @pytest.mark.asyncio
    async def test_handler_exception_becomes_runtime_error(self):
        service = FunctionService()

        @service.register("broken")
        async def broken(request, complete):
            raise RuntimeError("kaput")

        response = await service.invoke("broken", FunctionRequest())

        assert response.status_code == RUNTIME_ERROR
        assert response.body == {"error": "kaput"}

    @pytest.mark.asyncio
    async def test_nested_invoke_keeps_outer_request_id(self):
        service = FunctionService()

        @service.register("inner")
        async def inner(request, complete):
            return complete().set_body(get_request_id()).ok().done()

        @service.register("outer")
        async def outer(request, complete):
            nested = await service.invoke("inner", FunctionRequest(request_id="req-inner"))
            return complete().set_body([nested.body, get_request_id()]).ok().done()

        response = await service.invoke("outer", FunctionRequest(request_id="req-outer"))

        assert response.body == ["req-inner", "req-outer"]
        assert get_request_id() is None


class TestQueryFunction:
    """Test the GraphQL query function."""

    @pytest.fixture
    def service(self, collection):
        return create_function_service(collection)

    @pytest.mark.asyncio
    async def test_get_age_from_query_string(self, service):
        request = FunctionRequest(query={"query": '{ getAge(name: "Alice") }'})

        response = await service.invoke("query", request)

        assert response.status_code == 200
        assert response.terminal is False
        assert response.body == {
            "data": {
                "getAge": (
                    "Sorry. You still have not set age for your friend - Alice. "
                    "You can do that now."
                )
            }
        }

    @pytest.mark.asyncio
    async def test_set_age_with_string_variables(self, service):
        request = FunctionRequest(
            query={
                "query": "mutation S($n: String!, $a: Int!) { setAge(name: $n, age: $a) }",
                "variables": json.dumps({"n": "Alice", "a": 30}),
            }
        )

        response = await service.invoke("query", request)

        assert response.body == {"data": {"setAge": "30"}}

    @pytest.mark.asyncio
    async def test_query_from_body(self, service):
        await service.invoke(
            "query", FunctionRequest(body={"query": 'mutation { setAge(name: "Bob", age: 0) }'})
        )

        response = await service.invoke(
            "query", FunctionRequest(body={"query": '{ getAge(name: "Bob") }'})
        )

        assert response.body == {"data": {"getAge": "Your friend - Bob's age is 0."}}

    @pytest.mark.asyncio
    async def test_missing_query(self, service):
        response = await service.invoke("query", FunctionRequest())

        assert response.status_code == 400
        assert response.body == {"error": "Missing GraphQL query"}

    @pytest.mark.asyncio
    async def test_invalid_variables(self, service):
        request = FunctionRequest(query={"query": "{ getAge(name: \"A\") }", "variables": "{oops"})

        response = await service.invoke("query", request)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_store_error_reported_in_body(self, service, collection, monkeypatch):
        def broken_find(query, callback):
            callback(StoreException("store unavailable"), None)

        monkeypatch.setattr(collection, "find", broken_find)

        response = await service.invoke(
            "query", FunctionRequest(query={"query": '{ getAge(name: "Alice") }'})
        )

        assert response.status_code == 200
        assert response.body["data"] == {"getAge": None}
        assert response.body["errors"][0]["message"] == "store unavailable"

    @pytest.mark.asyncio
    async def test_execution_exception_is_runtime_error(self, service, monkeypatch):
        from friendages.graphql import schema as schema_module

        async def exploding_execute(*args, **kwargs):
            raise RuntimeError("executor crashed")

        monkeypatch.setattr(schema_module.schema, "execute", exploding_execute)

        response = await service.invoke(
            "query", FunctionRequest(query={"query": '{ getAge(name: "Alice") }'})
        )

        assert response.status_code == RUNTIME_ERROR
        assert response.terminal is True
        assert response.body == {"error": "executor crashed"}
