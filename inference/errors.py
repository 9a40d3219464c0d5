"""
Completion failures raised by model backends.

One completion call either returns text or raises exactly one of these.
The orchestrator treats all of them as per-candidate failures.
"""

from typing import Optional


class CompletionError(Exception):
    """A single completion call against one model failed."""
    pass


class UpstreamError(CompletionError):
    """Provider answered with a non-200, non-429 status (or was unreachable)."""

    def __init__(self, status_code: Optional[int], body: str = ""):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"upstream request failed: {body}"
        else:
            message = f"upstream error: {status_code} - {body}"
        super().__init__(message)


class QuotaExceeded(CompletionError):
    """Provider rate-limited the call (HTTP 429)."""

    status_code = 429

    def __init__(self, body: str = ""):
        self.body = body
        super().__init__("quota exceeded (429)")


class EmptyCompletion(CompletionError):
    """Provider returned no candidates or no content parts."""

    def __init__(self, message: str = "empty response from model"):
        super().__init__(message)
