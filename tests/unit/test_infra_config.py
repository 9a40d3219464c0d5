"""
tests/unit/test_infra_config.py

Unit tests for InfraConfig and InfraBootstrap.

Verifies:
✔ Gemini backend without an API key fails fast with ConfigurationError
✔ The stub backend and the testing profile tolerate a missing key
✔ Backend selection from LLM_BACKEND
✔ GEMINI_FALLBACK_MODELS parsing and defaults
✔ Orchestration settings reach the generation service
✔ InfraBootstrap is a resettable singleton
"""

import pytest

from generation import ConfigurationError, DEFAULT_FALLBACK_MODELS, LLMGenerationService
from inference import GeminiModelBackend, StubModelBackend
from infra import CREDENTIAL_MISSING_MESSAGE, InfraBootstrap, InfraConfig

_ENV_VARS = (
    "LLM_BACKEND",
    "GEMINI_API_KEY",
    "GEMINI_BASE_URL",
    "GEMINI_FALLBACK_MODELS",
    "GEMINI_QUOTA_BACKOFF_SECONDS",
    "GEMINI_TIMEOUT_SECONDS",
    "GEMINI_TRAIL_TIMEOUT_SECONDS",
    "REQUEST_DEADLINE_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestInfraConfigFromEnv:
    def test_missing_key_fails_fast(self):
        with pytest.raises(ConfigurationError) as exc_info:
            InfraConfig.from_env()
        assert str(exc_info.value) == CREDENTIAL_MISSING_MESSAGE

    def test_testing_profile_tolerates_missing_key(self):
        config = InfraConfig.for_testing()
        assert config.gemini_api_key == ""
        assert config.llm_backend == "gemini"

    def test_stub_backend_needs_no_key(self, monkeypatch):
        monkeypatch.setenv("LLM_BACKEND", "stub")
        config = InfraConfig.from_env()
        assert isinstance(config.create_llm_backend(), StubModelBackend)

    def test_gemini_backend(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        monkeypatch.setenv("GEMINI_BASE_URL", "https://gemini.example/v1beta/")
        backend = InfraConfig.from_env().create_llm_backend()
        assert isinstance(backend, GeminiModelBackend)
        assert backend.api_key == "secret"
        assert backend.base_url == "https://gemini.example/v1beta"

    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        config = InfraConfig.from_env()
        assert config.fallback_models == DEFAULT_FALLBACK_MODELS
        assert config.quota_backoff_s == 30.0
        assert config.request_timeout_s == 60.0
        assert config.trail_timeout_s == 180.0
        assert config.request_deadline_s == 0.0

    def test_fallback_models_parsing(self, monkeypatch):
        monkeypatch.setenv("LLM_BACKEND", "stub")
        monkeypatch.setenv("GEMINI_FALLBACK_MODELS", " gemini-2.0-flash, gemini-pro ,, ")
        assert InfraConfig.from_env().fallback_models == ("gemini-2.0-flash", "gemini-pro")

    def test_blank_fallback_models_use_defaults(self, monkeypatch):
        monkeypatch.setenv("LLM_BACKEND", "stub")
        monkeypatch.setenv("GEMINI_FALLBACK_MODELS", " , ")
        assert InfraConfig.from_env().fallback_models == DEFAULT_FALLBACK_MODELS

    def test_settings_reach_service(self, monkeypatch):
        monkeypatch.setenv("LLM_BACKEND", "stub")
        monkeypatch.setenv("GEMINI_FALLBACK_MODELS", "m1")
        monkeypatch.setenv("GEMINI_QUOTA_BACKOFF_SECONDS", "2")
        monkeypatch.setenv("GEMINI_TRAIL_TIMEOUT_SECONDS", "90")
        monkeypatch.setenv("REQUEST_DEADLINE_SECONDS", "45")

        service = InfraConfig.from_env().create_generation_service()

        assert isinstance(service, LLMGenerationService)
        assert service.orchestrator.fallback_models == ("m1",)
        assert service.orchestrator.quota_backoff_s == 2.0
        assert service.trail_timeout_s == 90.0
        assert service.request_deadline_s == 45.0


class TestInfraBootstrap:
    def test_singleton(self, monkeypatch):
        monkeypatch.setenv("LLM_BACKEND", "stub")
        first = InfraBootstrap.get_instance()
        second = InfraBootstrap.get_instance()
        assert first is second
        assert isinstance(first.get_generation_service(), LLMGenerationService)
        assert "llm=stub" in repr(first)

    def test_reset(self, monkeypatch):
        monkeypatch.setenv("LLM_BACKEND", "stub")
        first = InfraBootstrap.get_instance()
        InfraBootstrap.reset()
        assert InfraBootstrap.get_instance() is not first

    def test_missing_key_surfaces_on_first_use(self):
        with pytest.raises(ConfigurationError):
            InfraBootstrap.get_instance()
