"""
Artifact Validator

Structural checks applied to a parsed artifact before it is accepted.
JSON well-formedness is not checked here; that is the parse step.

Enforces:
- Required subject field (topic / subject / objective) is non-empty
- Required collections are non-empty (categories, topics, key results, steps)
- Roadmap total item count stays within available_days + ROADMAP_ITEM_SLACK
"""

import logging
from typing import Optional

from .errors import StructuralValidationError
from .prompting import PromptContext
from .schemas import (
    Artifact,
    ArtifactKind,
    EducationalRoadmap,
    EducationalTrail,
    KeyResultsResponse,
    Roadmap,
    TopicsResponse,
)

logger = logging.getLogger(__name__)


class ArtifactValidator:
    """
    Per-kind structural validation.

    Every check raises StructuralValidationError; a rejected artifact makes
    the run move on to the next candidate model.
    """

    # Items a roadmap may exceed its day count by
    ROADMAP_ITEM_SLACK = 5

    def validate(
        self,
        kind: ArtifactKind,
        artifact: Artifact,
        context: Optional[PromptContext] = None,
    ) -> None:
        """
        Validate an artifact of the given kind.

        Args:
            kind: Artifact kind the artifact was parsed as
            artifact: Parsed artifact
            context: PromptContext of the request (carries available_days)

        Raises:
            StructuralValidationError: artifact violates a rule for its kind
        """
        if kind == ArtifactKind.ROADMAP:
            available_days = context.available_days if context else None
            self.check_roadmap(artifact, available_days=available_days)
        elif kind == ArtifactKind.TOPICS:
            self.check_topics(artifact)
        elif kind == ArtifactKind.KEY_RESULTS:
            self.check_key_results(artifact)
        elif kind == ArtifactKind.EDUCATIONAL_ROADMAP:
            self.check_educational_roadmap(artifact)
        elif kind == ArtifactKind.EDUCATIONAL_TRAIL:
            self.check_educational_trail(artifact)
        else:
            raise StructuralValidationError(f"unsupported artifact kind: {kind}")

    def check_roadmap(self, roadmap: Roadmap, available_days: Optional[int] = None) -> None:
        if not roadmap.topic.strip() or not roadmap.roadmap:
            raise StructuralValidationError("response is not in the expected format: topic or categories missing")

        if available_days is None or available_days <= 0:
            return

        total_items = roadmap.total_items
        max_items = available_days + self.ROADMAP_ITEM_SLACK
        if total_items > max_items:
            raise StructuralValidationError(
                f"roadmap generated with {total_items} items, but the limit is {max_items} items "
                f"(available days: {available_days})"
            )

        logger.debug(
            f"Roadmap item count within limit: {total_items}/{max_items}",
            extra={"available_days": available_days, "total_items": total_items},
        )

    def check_topics(self, topics: TopicsResponse) -> None:
        if not topics.subject.strip() or not topics.topics:
            raise StructuralValidationError("response is not in the expected format: subject or topics missing")

    def check_key_results(self, key_results: KeyResultsResponse) -> None:
        if not key_results.objective.strip() or not key_results.key_results:
            raise StructuralValidationError(
                "response is not in the expected format: objective or key results missing"
            )

    def check_educational_roadmap(self, roadmap: EducationalRoadmap) -> None:
        # Resource lists may legitimately be empty
        if not roadmap.topic.strip():
            raise StructuralValidationError("response is not in the expected format: topic missing")

    def check_educational_trail(self, trail: EducationalTrail) -> None:
        if not trail.topic.strip() or not trail.steps:
            raise StructuralValidationError("response is not in the expected format: topic or steps missing")
