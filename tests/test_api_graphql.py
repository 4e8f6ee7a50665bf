from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from friendages import __version__
from friendages.api.app import create_app
from friendages.middleware import REQUEST_ID_HEADER, operation_name_from_query
from friendages.store.implementations.memory import MemoryCollection


@pytest.fixture
def client(collection: MemoryCollection):
    with TestClient(create_app(collection)) as test_client:
        yield test_client


def _graphql(client: TestClient, query: str, **variables):
    resp = client.post("/graphql", json={"query": query, "variables": variables})
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_health(client: TestClient):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "version": __version__}


def test_get_age_unknown_friend(client: TestClient):
    data = _graphql(client, "query GetAge($name: String!) { getAge(name: $name) }", name="Alice")

    assert data["data"]["getAge"] == (
        "Sorry. You still have not set age for your friend - Alice. You can do that now."
    )


def test_set_then_get_age(client: TestClient, collection: MemoryCollection):
    data = _graphql(
        client,
        "mutation SetAge($name: String!, $age: Int!) { setAge(name: $name, age: $age) }",
        name="Alice",
        age=30,
    )
    assert data["data"]["setAge"] == "30"

    data = _graphql(client, '{ getAge(name: "Alice") }')
    assert data["data"]["getAge"] == "Your friend - Alice's age is 30."
    assert len(collection.index) == 1


def test_request_id_echoed(client: TestClient):
    resp = client.get("/health", headers={REQUEST_ID_HEADER: "req-123"})

    assert resp.headers[REQUEST_ID_HEADER] == "req-123"


def test_request_id_generated(client: TestClient):
    resp = client.get("/health")

    assert resp.headers[REQUEST_ID_HEADER]


def test_operation_name_from_query():
    assert operation_name_from_query("query GetAge { getAge(name: \"A\") }") == "GetAge"
    assert operation_name_from_query("mutation SetAge { x }") == "mutation:SetAge"
    assert operation_name_from_query("{ getAge(name: \"A\") }") == "unnamed_operation"
    assert operation_name_from_query("query IntrospectionQuery { __schema { types { name } } }") == (
        "__introspection"
    )
    assert operation_name_from_query("") is None
