"""
tests/integration/test_generation_flow.py

End-to-end generation through LLMGenerationService with a scripted backend.

Verifies:
✔ Topics("Python", count=0) → 10 topics from the first candidate, no retries
✔ Empty subject for every kind → ValidationInputError, zero network calls
✔ Two failing candidates → ExhaustionError with the second candidate's text
✔ Trails use the longer trail timeout
✔ The per-request deadline bounds every call's timeout
✔ Key results completion date flows into the prompt
"""

import json
from datetime import date, timedelta

import pytest

from generation import (
    ArtifactKind,
    ExhaustionError,
    GenerationRequest,
    LLMGenerationService,
    Orchestrator,
    RunState,
    ValidationInputError,
    build_prompt,
)
from inference import ModelBackend, ModelResponse, UpstreamError


# ─────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────


class RecordingBackend(ModelBackend):
    """Counts every discovery and completion call."""

    def __init__(self, outputs=(), models=("gemini-1.5-flash",)):
        self.outputs = list(outputs)
        self.models = list(models)
        self.calls = []
        self.list_calls = 0
        self.discovery_timeouts = []

    def list_models(self, timeout_s=None):
        self.list_calls += 1
        self.discovery_timeouts.append(timeout_s)
        return list(self.models)

    def generate(self, request):
        self.calls.append(request)
        output = self.outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        return ModelResponse(output=output, model=request.model)


def python_topics(count=10):
    return json.dumps({"subject": "Python", "topics": [f"Python topic {i + 1}" for i in range(count)]})


# ─────────────────────────────────────────────────────
# Scenarios
# ─────────────────────────────────────────────────────


class TestTopicsScenario:
    def test_default_count_single_call(self):
        backend = RecordingBackend([python_topics()])
        service = LLMGenerationService(backend, fallback_models=("gemini-1.5-pro",))

        topics = service.generate_topics("Python", count=0)

        assert topics.subject == "Python"
        assert len(topics.topics) == 10
        assert all(topic for topic in topics.topics)
        assert len(backend.calls) == 1
        assert backend.calls[0].model == "gemini-1.5-flash"
        assert backend.calls[0].constraints["count"] == 10
        assert "Generate a list of 10 important" in backend.calls[0].prompt

    def test_run_succeeds_on_first_candidate(self):
        backend = RecordingBackend([python_topics()])
        prompt, context = build_prompt(GenerationRequest(ArtifactKind.TOPICS, "Python", count=0))

        run = Orchestrator(backend).start(ArtifactKind.TOPICS, prompt, context)
        run.execute()

        assert run.state == RunState.SUCCESS
        assert run.index == 0
        assert run.attempts == 1


class TestInputValidationScenario:
    @pytest.mark.parametrize(
        "call",
        [
            lambda s, subject: s.generate_roadmap(subject, available_days=10),
            lambda s, subject: s.generate_topics(subject),
            lambda s, subject: s.generate_key_results(subject, completion_date="2026-12-31"),
            lambda s, subject: s.generate_educational_roadmap(subject),
            lambda s, subject: s.generate_educational_trail(subject),
        ],
        ids=["roadmap", "topics", "key_results", "educational_roadmap", "educational_trail"],
    )
    @pytest.mark.parametrize("subject", ["", "   "])
    def test_empty_subject_makes_no_calls(self, call, subject):
        backend = RecordingBackend([python_topics()])
        service = LLMGenerationService(backend)

        with pytest.raises(ValidationInputError, match="cannot be empty"):
            call(service, subject)

        assert backend.calls == []
        assert backend.list_calls == 0


class TestExhaustionScenario:
    def test_second_candidate_error_is_reported(self):
        backend = RecordingBackend(
            [UpstreamError(500, "model m1 overloaded"), UpstreamError(404, "model m2 not found")],
            models=(),
        )
        service = LLMGenerationService(backend, fallback_models=("m1", "m2"))

        with pytest.raises(ExhaustionError) as exc_info:
            service.generate_topics("Python")

        assert "model m2 not found" in str(exc_info.value)
        assert str(exc_info.value).startswith("failed to generate topics:")
        assert [call.model for call in backend.calls] == ["m1", "m2"]


class TestRequestShaping:
    def test_trail_uses_trail_timeout(self):
        trail = json.dumps({"topic": "SQL", "total_days": 1, "steps": [{"day": 1, "title": "Day 1"}]})
        backend = RecordingBackend([trail, python_topics()])
        service = LLMGenerationService(backend, timeout_s=60.0, trail_timeout_s=180.0)

        service.generate_educational_trail("SQL", available_days=1)
        service.generate_topics("Python")

        assert backend.calls[0].timeout_s == 180.0
        assert backend.calls[1].timeout_s == 60.0
        assert backend.calls[0].constraints["total_days"] == 1

    def test_request_deadline_bounds_timeout(self):
        backend = RecordingBackend([python_topics()])
        service = LLMGenerationService(backend, request_deadline_s=5.0)

        service.generate_topics("Python")

        assert backend.calls[0].timeout_s <= 5.0

    def test_completion_date_reaches_prompt(self):
        objective = json.dumps({"objective": "Ship v2", "key_results": ["Close 20 issues"]})
        backend = RecordingBackend([objective])
        service = LLMGenerationService(backend)
        deadline = date.today() + timedelta(days=400)

        key_results = service.generate_key_results("Ship v2", completion_date=deadline.isoformat())

        assert key_results.key_results == ["Close 20 issues"]
        assert "ambitious" in backend.calls[0].prompt
