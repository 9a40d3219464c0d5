"""HTTP API layer - Module Exports"""

from .errors import register_exception_handlers
from .routes import get_generation_service, router

__all__ = [
    "register_exception_handlers",
    "get_generation_service",
    "router",
]
