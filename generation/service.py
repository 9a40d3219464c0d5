"""
Generation service.

GenerationService is the capability interface HTTP handlers depend on; one
method per artifact kind. LLMGenerationService implements it on top of the
Orchestrator and any ModelBackend.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, Sequence, Union

from inference import ModelBackend

from .cancellation import CancellationToken
from .candidates import DEFAULT_FALLBACK_MODELS
from .orchestrator import DEFAULT_QUOTA_BACKOFF_S, Orchestrator
from .prompting import build_prompt
from .schemas import (
    Artifact,
    ArtifactKind,
    EducationalRoadmap,
    EducationalTrail,
    GenerationRequest,
    KeyResultsResponse,
    Roadmap,
    TopicsResponse,
)

logger = logging.getLogger(__name__)

SINGLE_SHOT_TIMEOUT_S = 60.0
TRAIL_TIMEOUT_S = 180.0


class GenerationService(ABC):
    """
    Abstract generation capability.
    Handlers must depend ONLY on this interface.
    """

    @abstractmethod
    def generate(
        self,
        request: GenerationRequest,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Artifact:
        """Generate the artifact described by `request`."""
        raise NotImplementedError

    def generate_roadmap(
        self,
        topic: str,
        available_days: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Roadmap:
        request = GenerationRequest(ArtifactKind.ROADMAP, topic, available_days=available_days)
        return self.generate(request, cancel_token=cancel_token)

    def generate_topics(
        self,
        subject: str,
        count: int = 0,
        cancel_token: Optional[CancellationToken] = None,
    ) -> TopicsResponse:
        request = GenerationRequest(ArtifactKind.TOPICS, subject, count=count)
        return self.generate(request, cancel_token=cancel_token)

    def generate_key_results(
        self,
        objective: str,
        count: int = 0,
        completion_date: Optional[Union[date, str]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> KeyResultsResponse:
        request = GenerationRequest(
            ArtifactKind.KEY_RESULTS,
            objective,
            count=count,
            completion_date=completion_date,
        )
        return self.generate(request, cancel_token=cancel_token)

    def generate_educational_roadmap(
        self,
        topic: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> EducationalRoadmap:
        request = GenerationRequest(ArtifactKind.EDUCATIONAL_ROADMAP, topic)
        return self.generate(request, cancel_token=cancel_token)

    def generate_educational_trail(
        self,
        topic: str,
        available_days: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> EducationalTrail:
        request = GenerationRequest(ArtifactKind.EDUCATIONAL_TRAIL, topic, available_days=available_days)
        return self.generate(request, cancel_token=cancel_token)


class LLMGenerationService(GenerationService):
    """GenerationService backed by a ModelBackend and the fallback orchestrator."""

    def __init__(
        self,
        backend: ModelBackend,
        fallback_models: Sequence[str] = DEFAULT_FALLBACK_MODELS,
        quota_backoff_s: float = DEFAULT_QUOTA_BACKOFF_S,
        timeout_s: float = SINGLE_SHOT_TIMEOUT_S,
        trail_timeout_s: float = TRAIL_TIMEOUT_S,
        request_deadline_s: float = 0.0,
    ):
        self.orchestrator = Orchestrator(
            backend,
            fallback_models=fallback_models,
            quota_backoff_s=quota_backoff_s,
        )
        self.timeout_s = timeout_s
        self.trail_timeout_s = trail_timeout_s
        self.request_deadline_s = request_deadline_s  # 0 disables

    def generate(
        self,
        request: GenerationRequest,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Artifact:
        """
        Validate input, build the prompt and run the fallback loop.

        Raises:
            ValidationInputError: invalid request (no network call is made)
            ExhaustionError: no candidate model produced a valid artifact
            GenerationCancelled: cancelled or past the token's deadline
        """
        request.validate()
        prompt, context = build_prompt(request)

        if cancel_token is None and self.request_deadline_s > 0:
            cancel_token = CancellationToken(deadline_s=self.request_deadline_s)

        timeout_s = self.timeout_s
        if request.kind == ArtifactKind.EDUCATIONAL_TRAIL:
            timeout_s = self.trail_timeout_s

        constraints = {
            "subject": request.subject,
            "count": context.count,
            "total_days": context.total_days,
            "available_days": context.available_days,
        }

        logger.info(
            f"Generation requested: {request.kind.label}",
            extra={"kind": request.kind.value, "available_days": context.available_days},
        )
        return self.orchestrator.run(
            request.kind,
            prompt,
            context,
            timeout_s=timeout_s,
            constraints=constraints,
            cancel_token=cancel_token,
        )
