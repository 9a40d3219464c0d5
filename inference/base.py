from abc import ABC, abstractmethod
from typing import List, Optional

from .types import ModelRequest, ModelResponse


class ModelBackend(ABC):
    """
    Abstract model boundary.
    Generation code must depend ONLY on this interface.
    """

    @abstractmethod
    def list_models(self, timeout_s: Optional[float] = None) -> List[str]:
        """Return currently usable model identifiers. Never raises."""
        raise NotImplementedError

    @abstractmethod
    def generate(self, request: ModelRequest) -> ModelResponse:
        """Run one completion against request.model. Raises CompletionError on failure."""
        raise NotImplementedError
