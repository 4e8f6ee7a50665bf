"""Serverless function host protocol."""

from .completion import Completion, CompletionError, FunctionResponse
from .service import FunctionRequest, FunctionService, create_function_service

__all__ = [
    "Completion",
    "CompletionError",
    "FunctionRequest",
    "FunctionResponse",
    "FunctionService",
    "create_function_service",
]
