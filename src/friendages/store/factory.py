"""Factory for creating document collections from settings."""

from pathlib import Path

from ..config import Settings
from ..logging import get_logger
from .base import DocumentCollection
from .implementations.local import LocalCollection
from .implementations.memory import MemoryCollection

logger = get_logger(__name__)


def create_collection(settings: Settings | None = None) -> DocumentCollection:
    """Create the document collection configured in settings.

    Args:
        settings: Settings to read; defaults to the global settings instance

    Returns:
        DocumentCollection instance

    Raises:
        ValueError: If the store backend is unknown
    """
    if settings is None:
        from ..config import settings as global_settings

        settings = global_settings

    backend = settings.store_backend.lower()
    if backend == "memory":
        collection: DocumentCollection = MemoryCollection(settings.collection_name)
    elif backend == "local":
        collection = LocalCollection(settings.collection_name, Path(settings.store_path))
    else:
        raise ValueError(f"Unknown store backend: {settings.store_backend}")

    logger.info(
        "Created document collection",
        backend=backend,
        collection=settings.collection_name,
    )
    return collection
