"""
friendages
Friends' ages over GraphQL, served from a serverless function host
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
