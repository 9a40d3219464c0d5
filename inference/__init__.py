"""
Model boundary layer for LLM inference.

This package provides a clean abstraction for model invocation,
allowing the generation layer to remain agnostic of the underlying backend.

Supported backends:
- StubModelBackend: Deterministic fake model (default for CI/tests)
- GeminiModelBackend: Google Gemini generativelanguage REST API

Example usage:
    from inference import GeminiModelBackend, ModelRequest

    backend = GeminiModelBackend(api_key="...")
    models = backend.list_models()
    request = ModelRequest(task="topics", model=models[0], prompt="...")
    response = backend.generate(request)
"""

from .types import ModelRequest, ModelResponse
from .base import ModelBackend
from .errors import CompletionError, UpstreamError, QuotaExceeded, EmptyCompletion
from .stub import StubModelBackend
from .gemini import GeminiModelBackend

__all__ = [
    "ModelRequest",
    "ModelResponse",
    "ModelBackend",
    "CompletionError",
    "UpstreamError",
    "QuotaExceeded",
    "EmptyCompletion",
    "StubModelBackend",
    "GeminiModelBackend",
]
