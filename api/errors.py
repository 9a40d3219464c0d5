"""
HTTP error mapping.

Translates generation errors into {"error": ...} JSON responses.
A missing credential is reported generically; internal detail is logged only.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from generation import (
    ConfigurationError,
    ExhaustionError,
    GenerationCancelled,
    ValidationInputError,
)

logger = logging.getLogger(__name__)

CREDENTIAL_NOT_CONFIGURED = "API credential not configured"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return _error(status.HTTP_400_BAD_REQUEST, "invalid request body")

    first = errors[0]
    if first.get("type") == "json_invalid":
        return _error(status.HTTP_400_BAD_REQUEST, "invalid JSON body")

    field = str(first.get("loc", ("body",))[-1])
    if first.get("type") == "missing":
        return _error(status.HTTP_400_BAD_REQUEST, f"{field} is required")
    return _error(status.HTTP_400_BAD_REQUEST, f"invalid {field}: {first.get('msg', 'invalid value')}")


async def validation_input_handler(request: Request, exc: ValidationInputError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def configuration_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error(f"Configuration error on {request.url.path}: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, CREDENTIAL_NOT_CONFIGURED)


async def exhaustion_handler(request: Request, exc: ExhaustionError) -> JSONResponse:
    logger.error(
        f"Generation failed on {request.url.path}: {exc}",
        extra={"last_error": type(exc.last_error).__name__ if exc.last_error else None},
    )
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def cancelled_handler(request: Request, exc: GenerationCancelled) -> JSONResponse:
    logger.warning(f"Generation cancelled on {request.url.path}: {exc}")
    return _error(status.HTTP_504_GATEWAY_TIMEOUT, str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Install the generation error mapping on an app."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationInputError, validation_input_handler)
    app.add_exception_handler(ConfigurationError, configuration_handler)
    app.add_exception_handler(ExhaustionError, exhaustion_handler)
    app.add_exception_handler(GenerationCancelled, cancelled_handler)
