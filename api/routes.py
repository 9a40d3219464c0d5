"""
Generation HTTP routes.

Request binding and response shaping only; every decision is delegated to
the GenerationService obtained through get_generation_service().

Routes (mounted at the root and under /api/v1):
  POST /roadmap              {topic, available_days?}
  POST /topics               {subject, count?}
  POST /key-results          {objective, count?, completion_date?}
  POST /educational-roadmap  {topic}
  POST /educational-trail    {topic, available_days?}
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from generation import Artifact, GenerationService
from infra import bootstrap_infrastructure

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generation"])


# ── Request bodies ───────────────────────────────────────────────────────────

class RoadmapBody(BaseModel):
    topic: str
    available_days: Optional[int] = None


class TopicsBody(BaseModel):
    subject: str
    count: int = 0


class KeyResultsBody(BaseModel):
    objective: str
    count: int = 0
    completion_date: Optional[str] = None  # YYYY-MM-DD


class EducationalRoadmapBody(BaseModel):
    topic: str


class EducationalTrailBody(BaseModel):
    topic: str
    available_days: Optional[int] = None


def get_generation_service() -> GenerationService:
    """Process-wide generation service (overridable in tests)."""
    return bootstrap_infrastructure().get_generation_service()


def _dump(artifact: Artifact) -> Dict[str, Any]:
    return artifact.model_dump(exclude_none=True)


# ── Routes ───────────────────────────────────────────────────────────────────

@router.post("/roadmap")
def generate_roadmap(
    body: RoadmapBody,
    service: GenerationService = Depends(get_generation_service),
) -> Dict[str, Any]:
    """Generate a categorized study roadmap."""
    return _dump(service.generate_roadmap(body.topic, available_days=body.available_days))


@router.post("/topics")
def generate_topics(
    body: TopicsBody,
    service: GenerationService = Depends(get_generation_service),
) -> Dict[str, Any]:
    """Generate a list of topics about a subject."""
    return _dump(service.generate_topics(body.subject, count=body.count))


@router.post("/key-results")
def generate_key_results(
    body: KeyResultsBody,
    service: GenerationService = Depends(get_generation_service),
) -> Dict[str, Any]:
    """Generate measurable key results for an OKR objective."""
    return _dump(
        service.generate_key_results(
            body.objective,
            count=body.count,
            completion_date=body.completion_date,
        )
    )


@router.post("/educational-roadmap")
def generate_educational_roadmap(
    body: EducationalRoadmapBody,
    service: GenerationService = Depends(get_generation_service),
) -> Dict[str, Any]:
    """Generate books, courses, videos, articles and projects for a topic."""
    return _dump(service.generate_educational_roadmap(body.topic))


@router.post("/educational-trail")
def generate_educational_trail(
    body: EducationalTrailBody,
    service: GenerationService = Depends(get_generation_service),
) -> Dict[str, Any]:
    """Generate a day-by-day learning trail."""
    return _dump(service.generate_educational_trail(body.topic, available_days=body.available_days))
