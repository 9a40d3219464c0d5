"""
Candidate list builder.

Merges discovered model ids with the configured fallback list into the
ordered, duplicate-free sequence a generation run walks through.
"""

from dataclasses import dataclass
from typing import Iterable, Literal, Tuple

CandidateSource = Literal["discovered", "fallback"]

DEFAULT_FALLBACK_MODELS: Tuple[str, ...] = (
    "gemini-1.5-flash-latest",
    "gemini-1.5-pro-latest",
    "gemini-pro",
    "gemini-1.5-flash",
    "gemini-1.5-pro",
)


@dataclass(frozen=True)
class ModelCandidate:
    model_id: str
    source: CandidateSource


def build_candidates(
    discovered: Iterable[str],
    fallback: Iterable[str] = DEFAULT_FALLBACK_MODELS,
) -> Tuple[ModelCandidate, ...]:
    """
    Merge discovered and fallback model ids.

    Discovered ids come first, fallback ids follow; order within each group
    is preserved and an id seen earlier is never repeated.
    """
    seen = set()
    candidates = []
    for source, model_ids in (("discovered", discovered), ("fallback", fallback)):
        for model_id in model_ids:
            if not model_id or model_id in seen:
                continue
            seen.add(model_id)
            candidates.append(ModelCandidate(model_id=model_id, source=source))
    return tuple(candidates)
