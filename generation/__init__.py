"""
Generation orchestration layer.

Turns a GenerationRequest into a validated artifact:
prompt building → model discovery → candidate fallback loop
→ JSON extraction → parsing → structural validation.

Example usage:
    from inference import StubModelBackend
    from generation import LLMGenerationService

    service = LLMGenerationService(StubModelBackend())
    topics = service.generate_topics("Python")
"""

from .errors import (
    ConfigurationError,
    ExhaustionError,
    GenerationCancelled,
    GenerationError,
    ParseError,
    StructuralValidationError,
    ValidationInputError,
)
from .schemas import (
    Artifact,
    ArtifactKind,
    EducationalResource,
    EducationalRoadmap,
    EducationalTrail,
    GenerationRequest,
    KeyResultsResponse,
    Roadmap,
    TopicsResponse,
)
from .prompting import PromptContext, build_prompt
from .candidates import DEFAULT_FALLBACK_MODELS, ModelCandidate, build_candidates
from .extraction import extract_json
from .validation import ArtifactValidator
from .cancellation import CancellationToken
from .orchestrator import GenerationRun, Orchestrator, RunState, parse_artifact
from .service import GenerationService, LLMGenerationService

__all__ = [
    "ConfigurationError",
    "ExhaustionError",
    "GenerationCancelled",
    "GenerationError",
    "ParseError",
    "StructuralValidationError",
    "ValidationInputError",
    "Artifact",
    "ArtifactKind",
    "EducationalResource",
    "EducationalRoadmap",
    "EducationalTrail",
    "GenerationRequest",
    "KeyResultsResponse",
    "Roadmap",
    "TopicsResponse",
    "PromptContext",
    "build_prompt",
    "DEFAULT_FALLBACK_MODELS",
    "ModelCandidate",
    "build_candidates",
    "extract_json",
    "ArtifactValidator",
    "CancellationToken",
    "GenerationRun",
    "Orchestrator",
    "RunState",
    "parse_artifact",
    "GenerationService",
    "LLMGenerationService",
]
