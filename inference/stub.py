import json
from typing import List, Optional

from .base import ModelBackend
from .types import ModelRequest, ModelResponse

STUB_MODEL = "gemini-stub"


class StubModelBackend(ModelBackend):
    """
    Deterministic fake model for local development and CI.

    This backend never touches the network. It answers every request with a
    small, structurally valid payload for the requested artifact kind
    (ModelRequest.task), echoing the subject found in request.constraints.
    """

    def list_models(self, timeout_s: Optional[float] = None) -> List[str]:
        return [STUB_MODEL]

    def generate(self, request: ModelRequest) -> ModelResponse:
        """
        Generate a deterministic response based on task type.

        Args:
            request: ModelRequest with task, prompt and constraints

        Returns:
            ModelResponse whose output is a JSON document
        """
        constraints = request.constraints or {}
        subject = constraints.get("subject", "")
        payload = _stub_payload(request.task, subject, constraints)

        return ModelResponse(
            output=json.dumps(payload),
            model=request.model,
            metadata={"backend": "stub", "task": request.task},
        )


def _stub_payload(task: str, subject: str, constraints: dict) -> dict:
    if task == "roadmap":
        return {
            "topic": subject,
            "roadmap": [
                {
                    "category": "Fundamentals",
                    "items": [
                        {"id": "1", "title": f"Introduction to {subject}", "completed": False},
                        {"id": "2", "title": f"Core concepts of {subject}", "completed": False},
                    ],
                },
                {
                    "category": "Practice",
                    "items": [
                        {"id": "3", "title": f"First project with {subject}", "completed": False},
                    ],
                },
            ],
        }

    if task == "topics":
        count = constraints.get("count") or 3
        return {
            "subject": subject,
            "topics": [f"{subject} topic {i}" for i in range(1, count + 1)],
        }

    if task == "key_results":
        count = constraints.get("count") or 3
        return {
            "objective": subject,
            "key_results": [f"Deliver measurable result {i} for {subject}" for i in range(1, count + 1)],
        }

    if task == "educational_roadmap":
        return {
            "topic": subject,
            "books": [{"title": f"{subject} Handbook", "description": "Reference book", "author": "Stub Author", "chapters": ["Basics"]}],
            "courses": [{"title": f"{subject} 101", "description": "Intro course", "duration": "4 weeks"}],
            "videos": [],
            "articles": [],
            "projects": [{"title": f"Build something with {subject}", "description": "Hands-on project"}],
        }

    if task == "educational_trail":
        total_days = constraints.get("total_days") or 1
        return {
            "topic": subject,
            "total_days": total_days,
            "description": "Progressive learning trail",
            "resources": {
                "resource_1": {"title": f"{subject} Handbook", "description": "Reference book"},
            },
            "steps": [
                {
                    "day": day,
                    "title": f"Day {day}",
                    "description": f"Study session {day}",
                    "activities": [
                        {
                            "type": "read_chapters",
                            "resource_id": "resource_1",
                            "title": f"Read chapter {day}",
                            "description": "Focus on the key ideas",
                        },
                    ],
                }
                for day in range(1, total_days + 1)
            ],
        }

    return {"topic": subject}
