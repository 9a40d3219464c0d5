"""
Infrastructure module exports.

Configuration and bootstrap for the generation service.
"""

from .config import InfraConfig, get_config, LLMBackendType, CREDENTIAL_MISSING_MESSAGE
from .bootstrap import InfraBootstrap, bootstrap_infrastructure

__all__ = [
    "InfraConfig",
    "get_config",
    "LLMBackendType",
    "CREDENTIAL_MISSING_MESSAGE",
    "InfraBootstrap",
    "bootstrap_infrastructure",
]
