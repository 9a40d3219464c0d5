"""
Generation data contracts.

Requests are plain dataclasses validated before any network call.
Artifacts are pydantic models parsed from model output. Every artifact
field has an empty default so that a missing field is caught by structural
validation rather than by parsing.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import ValidationInputError

DEFAULT_TOPICS_COUNT = 10
DEFAULT_KEY_RESULTS_COUNT = 5


class ArtifactKind(str, Enum):
    ROADMAP = "roadmap"
    TOPICS = "topics"
    KEY_RESULTS = "key_results"
    EDUCATIONAL_ROADMAP = "educational_roadmap"
    EDUCATIONAL_TRAIL = "educational_trail"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


# ── Artifacts ────────────────────────────────────────────────────────────────

class _Artifact(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True, extra="ignore")


class RoadmapItem(_Artifact):
    id: str = ""
    title: str = ""
    completed: bool = False


class RoadmapCategory(_Artifact):
    category: str = ""
    items: List[RoadmapItem] = Field(default_factory=list)


class Roadmap(_Artifact):
    topic: str = ""
    roadmap: List[RoadmapCategory] = Field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(len(category.items) for category in self.roadmap)


class TopicsResponse(_Artifact):
    subject: str = ""
    topics: List[str] = Field(default_factory=list)


class KeyResultsResponse(_Artifact):
    objective: str = ""
    key_results: List[str] = Field(default_factory=list)


class EducationalResource(_Artifact):
    title: str = ""
    description: str = ""
    url: Optional[str] = None
    chapters: Optional[List[str]] = None
    duration: Optional[str] = None
    author: Optional[str] = None


class EducationalRoadmap(_Artifact):
    topic: str = ""
    books: List[EducationalResource] = Field(default_factory=list)
    courses: List[EducationalResource] = Field(default_factory=list)
    videos: List[EducationalResource] = Field(default_factory=list)
    articles: List[EducationalResource] = Field(default_factory=list)
    projects: List[EducationalResource] = Field(default_factory=list)


class Activity(_Artifact):
    type: str = ""            # read_chapters | watch_video | read_article | take_course | do_project
    resource_id: str = ""
    title: str = ""
    description: str = ""
    chapters: Optional[List[str]] = None
    duration: Optional[str] = None
    url: Optional[str] = None
    progress: Optional[str] = None  # e.g. "3 of 10 chapters"


class TrailStep(_Artifact):
    day: int = 0
    title: str = ""
    description: str = ""
    activities: List[Activity] = Field(default_factory=list)


class EducationalTrail(_Artifact):
    topic: str = ""
    total_days: int = 0
    description: str = ""
    steps: List[TrailStep] = Field(default_factory=list)
    resources: Dict[str, EducationalResource] = Field(default_factory=dict)


Artifact = Union[Roadmap, TopicsResponse, KeyResultsResponse, EducationalRoadmap, EducationalTrail]

ARTIFACT_MODELS = {
    ArtifactKind.ROADMAP: Roadmap,
    ArtifactKind.TOPICS: TopicsResponse,
    ArtifactKind.KEY_RESULTS: KeyResultsResponse,
    ArtifactKind.EDUCATIONAL_ROADMAP: EducationalRoadmap,
    ArtifactKind.EDUCATIONAL_TRAIL: EducationalTrail,
}


# ── Requests ─────────────────────────────────────────────────────────────────

_DAYS_KINDS = (ArtifactKind.ROADMAP, ArtifactKind.EDUCATIONAL_TRAIL)
_DATE_KINDS = (ArtifactKind.KEY_RESULTS,)
_COUNT_DEFAULTS = {
    ArtifactKind.TOPICS: DEFAULT_TOPICS_COUNT,
    ArtifactKind.KEY_RESULTS: DEFAULT_KEY_RESULTS_COUNT,
}


@dataclass(frozen=True)
class GenerationRequest:
    """
    One generation request.

    subject is the topic (roadmap, educational roadmap, trail), the subject
    (topics) or the objective (key results).
    """

    kind: ArtifactKind
    subject: str
    count: Optional[int] = None
    available_days: Optional[int] = None
    completion_date: Optional[Union[date, str]] = None

    @property
    def subject_field(self) -> str:
        if self.kind == ArtifactKind.TOPICS:
            return "subject"
        if self.kind == ArtifactKind.KEY_RESULTS:
            return "objective"
        return "topic"

    @property
    def effective_count(self) -> Optional[int]:
        """Requested count, or the kind's default when missing or non-positive."""
        default = _COUNT_DEFAULTS.get(self.kind)
        if default is None:
            return None
        if self.count is None or self.count <= 0:
            return default
        return self.count

    @property
    def days(self) -> Optional[int]:
        """available_days when it is a usable (positive) horizon."""
        if self.available_days is not None and self.available_days > 0:
            return self.available_days
        return None

    def validate(self) -> None:
        """
        Check caller input.

        Raises:
            ValidationInputError: empty subject, or a time-horizon field the
                artifact kind does not accept
        """
        if not self.subject or not self.subject.strip():
            raise ValidationInputError(f"{self.subject_field} cannot be empty")

        if self.available_days is not None and self.kind not in _DAYS_KINDS:
            raise ValidationInputError(f"available_days is not supported for {self.kind.label}")

        if self.completion_date is not None and self.kind not in _DATE_KINDS:
            raise ValidationInputError(f"completion_date is not supported for {self.kind.label}")
