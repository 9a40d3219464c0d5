"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
Production requires a Gemini API key; the testing profile tolerates an
empty one.
"""

import os
from dataclasses import dataclass
from typing import Literal, Tuple

from generation import ConfigurationError, GenerationService, LLMGenerationService
from generation.candidates import DEFAULT_FALLBACK_MODELS
from generation.orchestrator import DEFAULT_QUOTA_BACKOFF_S
from generation.service import SINGLE_SHOT_TIMEOUT_S, TRAIL_TIMEOUT_S
from inference import GeminiModelBackend, ModelBackend, StubModelBackend
from inference.gemini import DEFAULT_BASE_URL


LLMBackendType = Literal["stub", "gemini"]

CREDENTIAL_MISSING_MESSAGE = "GEMINI_API_KEY not configured. Set it in the .env file or the environment"


def _parse_models(raw: str) -> Tuple[str, ...]:
    models = tuple(name.strip() for name in raw.split(",") if name.strip())
    return models or DEFAULT_FALLBACK_MODELS


@dataclass(frozen=True)
class InfraConfig:
    """Infrastructure configuration from environment."""

    # LLM
    llm_backend: LLMBackendType
    gemini_api_key: str
    gemini_base_url: str
    fallback_models: Tuple[str, ...]

    # Orchestration
    quota_backoff_s: float
    request_timeout_s: float
    trail_timeout_s: float
    request_deadline_s: float   # 0 disables the per-request deadline

    @classmethod
    def from_env(cls, require_credential: bool = True) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Args:
            require_credential: Raise when the Gemini backend is selected
                                without an API key (production behaviour)

        Raises:
            ConfigurationError: credential missing and required
        """
        config = cls(
            # LLM Configuration
            llm_backend=os.getenv("LLM_BACKEND", "gemini"),  # type: ignore
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL),
            fallback_models=_parse_models(os.getenv("GEMINI_FALLBACK_MODELS", "")),

            # Orchestration Configuration
            quota_backoff_s=float(os.getenv("GEMINI_QUOTA_BACKOFF_SECONDS", str(DEFAULT_QUOTA_BACKOFF_S))),
            request_timeout_s=float(os.getenv("GEMINI_TIMEOUT_SECONDS", str(SINGLE_SHOT_TIMEOUT_S))),
            trail_timeout_s=float(os.getenv("GEMINI_TRAIL_TIMEOUT_SECONDS", str(TRAIL_TIMEOUT_S))),
            request_deadline_s=float(os.getenv("REQUEST_DEADLINE_SECONDS", "0")),
        )
        if require_credential:
            config.require_credential()
        return config

    @classmethod
    def for_testing(cls) -> "InfraConfig":
        """Environment configuration that tolerates an empty API key."""
        return cls.from_env(require_credential=False)

    def require_credential(self) -> None:
        """Raise ConfigurationError when the Gemini backend has no API key."""
        if self.llm_backend != "stub" and not self.gemini_api_key:
            raise ConfigurationError(CREDENTIAL_MISSING_MESSAGE)

    def create_llm_backend(self) -> ModelBackend:
        """Create LLM backend instance based on configuration."""
        if self.llm_backend == "stub":
            return StubModelBackend()
        return GeminiModelBackend(
            api_key=self.gemini_api_key,
            base_url=self.gemini_base_url,
        )

    def create_generation_service(self) -> GenerationService:
        """Create the generation service over the configured backend."""
        return LLMGenerationService(
            self.create_llm_backend(),
            fallback_models=self.fallback_models,
            quota_backoff_s=self.quota_backoff_s,
            timeout_s=self.request_timeout_s,
            trail_timeout_s=self.trail_timeout_s,
            request_deadline_s=self.request_deadline_s,
        )


def get_config() -> InfraConfig:
    """Get global infrastructure configuration."""
    return InfraConfig.from_env()
