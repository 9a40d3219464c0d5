"""
JSON extraction from free-form model output.

Models often wrap the requested JSON in markdown fences or add a sentence
before it. extract_json() strips the fences and keeps the span from the
first "{" to the last "}".
"""

import re

_FENCE_JSON_RE = re.compile(r"```json\s*", re.IGNORECASE)
_FENCE_RE = re.compile(r"```\s*")
# Greedy: first "{" through the last "}" in the remaining text
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def extract_json(text: str) -> str:
    """
    Isolate the JSON object embedded in model output.

    Returns:
        The outermost {...} span, or the fence-stripped, trimmed text when no
        such span exists (parsing will then fail cleanly).
    """
    text = _FENCE_JSON_RE.sub("", text)
    text = _FENCE_RE.sub("", text)
    text = text.strip()

    match = _OBJECT_RE.search(text)
    if match:
        return match.group(0)
    return text
