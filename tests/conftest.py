"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock

import pytest
import strawberry

from friendages.friends import FriendContext
from friendages.graphql.context import FRIENDS_CONTEXT_KEY
from friendages.store.implementations.memory import MemoryCollection


@pytest.fixture
def collection() -> MemoryCollection:
    """Fresh in-memory friends collection."""
    return MemoryCollection("FriendsAges")


@pytest.fixture
def mock_logger() -> MagicMock:
    """Logging sink that records calls."""
    return MagicMock()


@pytest.fixture
def friend_context(collection: MemoryCollection, mock_logger: MagicMock) -> FriendContext:
    """Context wired to the in-memory collection and a mock logger."""
    return FriendContext(collection=collection, logger=mock_logger, store_timeout=5.0)


@pytest.fixture
def mock_info(friend_context: FriendContext) -> MagicMock:
    """Create a mock GraphQL info object carrying the friends context."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {FRIENDS_CONTEXT_KEY: friend_context}
    return info


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: mark test as slow running")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]
