from dataclasses import dataclass, field
from typing import Optional, Dict, Any


@dataclass
class ModelRequest:
    task: str                  # artifact kind, e.g. "roadmap", "topics"
    model: str
    prompt: str
    constraints: Optional[Dict[str, Any]] = None
    timeout_s: Optional[float] = 60


@dataclass
class ModelResponse:
    output: str
    model: str
    metadata: Dict[str, Any] = field(default_factory=dict)
