"""
tests/unit/test_candidates.py

Verifies:
✔ Discovered models precede fallback models
✔ No duplicate identifiers, whatever the overlap
✔ Empty identifiers are skipped
✔ Empty discovery falls back to the configured list
✔ Orchestrator.candidates() uses the injected fallback list
"""

from unittest.mock import MagicMock

from generation import DEFAULT_FALLBACK_MODELS, ModelCandidate, Orchestrator, build_candidates
from inference import ModelBackend


class TestBuildCandidates:
    def test_discovered_first(self):
        candidates = build_candidates(["gemini-2.0-flash"], ("gemini-pro",))
        assert candidates == (
            ModelCandidate("gemini-2.0-flash", "discovered"),
            ModelCandidate("gemini-pro", "fallback"),
        )

    def test_overlap_is_not_repeated(self):
        candidates = build_candidates(["gemini-2.0-flash", "gemini-1.5-pro"], DEFAULT_FALLBACK_MODELS)
        ids = [c.model_id for c in candidates]
        assert len(ids) == len(set(ids))
        assert ids[:2] == ["gemini-2.0-flash", "gemini-1.5-pro"]
        assert len(ids) == 2 + len(DEFAULT_FALLBACK_MODELS) - 1
        # the overlapping id keeps its discovered position
        overlapping = [c for c in candidates if c.model_id == "gemini-1.5-pro"]
        assert overlapping == [ModelCandidate("gemini-1.5-pro", "discovered")]

    def test_duplicates_within_discovery_are_dropped(self):
        candidates = build_candidates(["a", "b", "a", ""], ())
        assert [c.model_id for c in candidates] == ["a", "b"]

    def test_all_discovered_precede_all_fallback(self):
        candidates = build_candidates(["x", "y"], ("y", "z", "x", "w"))
        sources = [c.source for c in candidates]
        assert sources == ["discovered", "discovered", "fallback", "fallback"]
        assert [c.model_id for c in candidates] == ["x", "y", "z", "w"]

    def test_empty_discovery_uses_fallback(self):
        candidates = build_candidates([])
        assert [c.model_id for c in candidates] == list(DEFAULT_FALLBACK_MODELS)
        assert all(c.source == "fallback" for c in candidates)

    def test_nothing_available(self):
        assert build_candidates([], ()) == ()


class TestOrchestratorCandidates:
    def test_injected_fallback_list(self):
        backend = MagicMock(spec=ModelBackend)
        backend.list_models.return_value = ["gemini-2.0-flash"]

        orchestrator = Orchestrator(backend, fallback_models=("m1", "m2"))

        assert [c.model_id for c in orchestrator.candidates()] == ["gemini-2.0-flash", "m1", "m2"]
        backend.list_models.assert_called_once()
