"""
Generation error taxonomy.

Per-candidate failures (completion errors, ParseError,
StructuralValidationError) are recovered inside a run. Callers only ever
see ValidationInputError, ConfigurationError, ExhaustionError or
GenerationCancelled.
"""

from typing import Optional


class GenerationError(Exception):
    """Base class for generation failures."""
    pass


class ConfigurationError(GenerationError):
    """Required configuration (the API credential) is missing."""
    pass


class ValidationInputError(GenerationError):
    """Caller-supplied request is invalid. Raised before any network call."""
    pass


class ParseError(GenerationError):
    """Extracted model output is not JSON of the expected shape."""
    pass


class StructuralValidationError(GenerationError):
    """Parsed artifact violates a domain invariant."""
    pass


class GenerationCancelled(GenerationError):
    """Caller cancelled the run, or its deadline passed."""
    pass


class ExhaustionError(GenerationError):
    """No candidate model produced a valid artifact."""

    def __init__(self, artifact: str, last_error: Optional[Exception] = None):
        self.artifact = artifact
        self.last_error = last_error
        if last_error is not None:
            message = f"failed to generate {artifact}: {last_error}"
        else:
            message = f"failed to generate {artifact}: no available model worked"
        super().__init__(message)
