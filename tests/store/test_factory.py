"""Tests for the collection factory."""

from pathlib import Path

import pytest

from friendages.config import Settings
from friendages.store.factory import create_collection
from friendages.store.implementations.local import LocalCollection
from friendages.store.implementations.memory import MemoryCollection


class TestCreateCollection:
    """Test collection factory."""

    def test_create_memory_collection(self):
        collection = create_collection(Settings(store_backend="memory", collection_name="Pals"))

        assert isinstance(collection, MemoryCollection)
        assert collection.name == "Pals"

    def test_create_local_collection(self, tmp_path: Path):
        collection = create_collection(Settings(store_backend="LOCAL", store_path=str(tmp_path)))

        assert isinstance(collection, LocalCollection)
        assert collection.file_path == tmp_path.resolve() / "FriendsAges.json"
        collection.close()

    def test_create_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown store backend"):
            create_collection(Settings(store_backend="dynamo"))

    def test_defaults_to_global_settings(self):
        assert isinstance(create_collection(), MemoryCollection)
