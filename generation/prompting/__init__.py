"""
Prompt Builder layer for artifact generation.

Exports build_prompt() and the PromptContext it derives.
"""

from .prompt_builder import (
    PromptContext,
    build_prompt,
    key_results_time_clause,
    roadmap_constraints,
    trail_activities_per_day,
)

__all__ = [
    "PromptContext",
    "build_prompt",
    "key_results_time_clause",
    "roadmap_constraints",
    "trail_activities_per_day",
]
