"""
Generation Orchestrator

Drives one request through the candidate model list.

State machine (one GenerationRun per request):

    IDLE ──> TRYING_CANDIDATE(i) ──> SUCCESS
                   │    ^
                   v    │
             NEXT_CANDIDATE ──(i == N)──> EXHAUSTED

Rules:
- Candidates are tried strictly in order, one at a time, never revisited
- QuotaExceeded: pause quota_backoff_s once, retry the same candidate once;
  any failure of the retry moves on to the next candidate
- Any other completion failure moves on immediately
- Parse or structural validation failure moves on, recording last_error
- EXHAUSTED raises ExhaustionError carrying the last error
- The cancellation token is checked before every attempt and interrupts the
  backoff pause
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from inference import CompletionError, ModelBackend, ModelRequest, ModelResponse, QuotaExceeded

from .cancellation import CancellationToken
from .candidates import DEFAULT_FALLBACK_MODELS, ModelCandidate, build_candidates
from .errors import ExhaustionError, GenerationCancelled, ParseError, StructuralValidationError
from .extraction import extract_json
from .prompting import PromptContext
from .schemas import ARTIFACT_MODELS, Artifact, ArtifactKind
from .validation import ArtifactValidator

logger = logging.getLogger(__name__)

DEFAULT_QUOTA_BACKOFF_S = 30.0
DEFAULT_TIMEOUT_S = 60.0
DEFAULT_DISCOVERY_TIMEOUT_S = 30.0


class RunState(str, Enum):
    IDLE = "idle"
    TRYING_CANDIDATE = "trying_candidate"
    NEXT_CANDIDATE = "next_candidate"
    SUCCESS = "success"
    EXHAUSTED = "exhausted"


_TERMINAL_STATES = (RunState.SUCCESS, RunState.EXHAUSTED)


@dataclass(frozen=True)
class Transition:
    """One state change of a run."""

    state: RunState
    model_id: Optional[str] = None
    detail: str = ""


def parse_artifact(kind: ArtifactKind, text: str) -> Artifact:
    """
    Extract and parse model output into the artifact model for `kind`.

    Raises:
        ParseError: no JSON object, malformed JSON, or fields of the wrong type
    """
    extracted = extract_json(text)
    try:
        data = json.loads(extracted)
    except json.JSONDecodeError as e:
        raise ParseError(f"failed to parse JSON: {e}")

    if not isinstance(data, dict):
        raise ParseError(f"failed to parse JSON: expected an object, got {type(data).__name__}")

    try:
        return ARTIFACT_MODELS[kind].model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ParseError(f"failed to parse JSON: {location}: {first.get('msg', 'invalid value')}")


class GenerationRun:
    """
    One request's walk through the candidate list.

    Owns its candidates, prompt context and outcome exclusively; nothing here
    is shared with other runs.
    """

    def __init__(
        self,
        kind: ArtifactKind,
        prompt: str,
        context: PromptContext,
        candidates: Sequence[ModelCandidate],
        backend: ModelBackend,
        validator: ArtifactValidator,
        quota_backoff_s: float = DEFAULT_QUOTA_BACKOFF_S,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        constraints: Optional[Dict[str, Any]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.kind = kind
        self.prompt = prompt
        self.context = context
        self.candidates: Tuple[ModelCandidate, ...] = tuple(candidates)
        self.backend = backend
        self.validator = validator
        self.quota_backoff_s = quota_backoff_s
        self.timeout_s = timeout_s
        self.constraints = constraints or {}
        self.cancel_token = cancel_token or CancellationToken()

        self.state = RunState.IDLE
        self.index = 0
        self.attempts = 0
        self.last_error: Optional[Exception] = None
        self.artifact: Optional[Artifact] = None
        self.transitions: List[Transition] = [Transition(RunState.IDLE)]

    @property
    def finished(self) -> bool:
        return self.state in _TERMINAL_STATES

    @property
    def current(self) -> Optional[ModelCandidate]:
        if self.index < len(self.candidates):
            return self.candidates[self.index]
        return None

    def _enter(self, state: RunState, detail: str = "") -> None:
        self.state = state
        model_id = self.current.model_id if self.current else None
        self.transitions.append(Transition(state, model_id=model_id, detail=detail))

    def step(self) -> RunState:
        """Advance the state machine by one transition."""
        if self.state == RunState.IDLE:
            if self.candidates:
                self._enter(RunState.TRYING_CANDIDATE)
            else:
                self._enter(RunState.EXHAUSTED, detail="no candidates")
        elif self.state == RunState.TRYING_CANDIDATE:
            self._try_current()
        elif self.state == RunState.NEXT_CANDIDATE:
            self.index += 1
            if self.index < len(self.candidates):
                self._enter(RunState.TRYING_CANDIDATE)
            else:
                self._enter(RunState.EXHAUSTED)
        return self.state

    def execute(self) -> Artifact:
        """
        Run to a terminal state.

        Returns:
            The first artifact that parsed and validated

        Raises:
            ExhaustionError: every candidate failed
            GenerationCancelled: the token was cancelled or its deadline passed
        """
        while not self.finished:
            self.step()

        if self.state == RunState.SUCCESS:
            return self.artifact
        raise ExhaustionError(self.kind.label, self.last_error)

    # ── Candidate attempt ────────────────────────────────────────────────────

    def _try_current(self) -> None:
        candidate = self.current
        self.cancel_token.raise_if_cancelled()

        logger.info(
            f"Generating {self.kind.label} with {candidate.model_id} "
            f"(candidate {self.index + 1}/{len(self.candidates)}, {candidate.source})"
        )

        try:
            response = self._complete(candidate)
        except CompletionError as e:
            self._reject(candidate, e)
            return

        try:
            artifact = parse_artifact(self.kind, response.output)
            self.validator.validate(self.kind, artifact, self.context)
        except (ParseError, StructuralValidationError) as e:
            self._reject(candidate, e)
            return

        self.artifact = artifact
        self._enter(RunState.SUCCESS)
        logger.info(f"Generated {self.kind.label} with {candidate.model_id}")

    def _reject(self, candidate: ModelCandidate, error: Exception) -> None:
        self.last_error = error
        logger.warning(
            f"Candidate {candidate.model_id} rejected: {error}",
            extra={"model": candidate.model_id, "error_type": type(error).__name__},
        )
        self._enter(RunState.NEXT_CANDIDATE, detail=str(error))

    def _complete(self, candidate: ModelCandidate) -> ModelResponse:
        try:
            return self._call(candidate)
        except QuotaExceeded:
            logger.warning(
                f"Quota exceeded for {candidate.model_id}; retrying once in {self.quota_backoff_s:.0f}s",
                extra={"model": candidate.model_id},
            )
            if self.cancel_token.wait(self.quota_backoff_s):
                raise GenerationCancelled("generation cancelled during quota backoff")
            return self._call(candidate)

    def _call(self, candidate: ModelCandidate) -> ModelResponse:
        self.cancel_token.raise_if_cancelled()
        self.attempts += 1
        request = ModelRequest(
            task=self.kind.value,
            model=candidate.model_id,
            prompt=self.prompt,
            constraints=self.constraints,
            timeout_s=self.cancel_token.bound_timeout(self.timeout_s),
        )
        return self.backend.generate(request)


class Orchestrator:
    """
    Composes discovery, candidate merging and the fallback run.

    The backend credential and base URL are the only state shared between
    requests; each run gets its own candidate list.
    """

    def __init__(
        self,
        backend: ModelBackend,
        fallback_models: Sequence[str] = DEFAULT_FALLBACK_MODELS,
        quota_backoff_s: float = DEFAULT_QUOTA_BACKOFF_S,
        validator: Optional[ArtifactValidator] = None,
        discovery_timeout_s: float = DEFAULT_DISCOVERY_TIMEOUT_S,
    ):
        self.backend = backend
        self.fallback_models: Tuple[str, ...] = tuple(fallback_models)
        self.quota_backoff_s = quota_backoff_s
        self.discovery_timeout_s = discovery_timeout_s
        self.validator = validator or ArtifactValidator()

    def candidates(self, cancel_token: Optional[CancellationToken] = None) -> Tuple[ModelCandidate, ...]:
        """
        Discovered models first, then unseen fallback models.

        Discovery is bounded by the token's remaining deadline.

        Raises:
            GenerationCancelled: the token expired during discovery
        """
        timeout_s = self.discovery_timeout_s
        if cancel_token is not None:
            timeout_s = cancel_token.bound_timeout(timeout_s)
        discovered = self.backend.list_models(timeout_s=timeout_s)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return build_candidates(discovered, self.fallback_models)

    def start(
        self,
        kind: ArtifactKind,
        prompt: str,
        context: PromptContext,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        constraints: Optional[Dict[str, Any]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> GenerationRun:
        """Discover models and create a run in the IDLE state."""
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return GenerationRun(
            kind=kind,
            prompt=prompt,
            context=context,
            candidates=self.candidates(cancel_token),
            backend=self.backend,
            validator=self.validator,
            quota_backoff_s=self.quota_backoff_s,
            timeout_s=timeout_s,
            constraints=constraints,
            cancel_token=cancel_token,
        )

    def run(
        self,
        kind: ArtifactKind,
        prompt: str,
        context: PromptContext,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        constraints: Optional[Dict[str, Any]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Artifact:
        """Create a run and execute it to completion."""
        return self.start(
            kind,
            prompt,
            context,
            timeout_s=timeout_s,
            constraints=constraints,
            cancel_token=cancel_token,
        ).execute()
