import logging
from typing import List, Optional

import requests

from .base import ModelBackend
from .errors import EmptyCompletion, QuotaExceeded, UpstreamError
from .types import ModelRequest, ModelResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Catalog entries must carry this marker to be usable for text generation
_GENERATION_MARKER = "gemini"
_EMBEDDING_MARKER = "embedding"
_MODEL_PREFIX = "models/"


class GeminiModelBackend(ModelBackend):
    """
    Gemini backend over the generativelanguage REST API.

    Two operations:
      - list_models(): model discovery (GET /models), never raises
      - generate():    one generateContent call against one named model

    The API key travels as the ``key`` query parameter. It is redacted from
    every log line and error message produced here.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        discovery_timeout_s: float = 30.0,
    ):
        """
        Initialize Gemini backend.

        Args:
            api_key:             Gemini API key (may be empty in tests)
            base_url:            Base URL of the v1beta API
            discovery_timeout_s: Timeout for the model catalog request
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.discovery_timeout_s = discovery_timeout_s

    def _redact(self, text: str) -> str:
        if self.api_key:
            return text.replace(self.api_key, "***")
        return text

    def list_models(self, timeout_s: Optional[float] = None) -> List[str]:
        """
        Query the provider catalog and keep generation-capable models.

        Args:
            timeout_s: Request timeout (defaults to discovery_timeout_s)

        Returns:
            Model identifiers with the "models/" prefix stripped, in catalog
            order. Empty list on any transport, status or decoding failure.
        """
        url = f"{self.base_url}/models"
        try:
            resp = requests.get(
                url,
                params={"key": self.api_key},
                timeout=self.discovery_timeout_s if timeout_s is None else timeout_s,
            )
        except requests.RequestException as e:
            logger.warning(f"Model discovery failed: {self._redact(str(e))}")
            return []

        if resp.status_code != 200:
            logger.warning(
                f"Model discovery returned {resp.status_code}",
                extra={"status_code": resp.status_code},
            )
            return []

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Model discovery returned a non-JSON body")
            return []

        models: List[str] = []
        entries = (data.get("models") or []) if isinstance(data, dict) else []
        for entry in entries:
            name = entry.get("name", "") if isinstance(entry, dict) else ""
            if not name:
                continue
            if name.startswith(_MODEL_PREFIX):
                name = name[len(_MODEL_PREFIX):]
            if _GENERATION_MARKER in name and _EMBEDDING_MARKER not in name:
                models.append(name)

        logger.info(f"Discovered {len(models)} generation models")
        return models

    def generate(self, request: ModelRequest) -> ModelResponse:
        """
        Generate content with one model.

        Args:
            request: ModelRequest with model, prompt and timeout

        Returns:
            ModelResponse with the text of the first part of the first candidate

        Raises:
            QuotaExceeded:   HTTP 429
            UpstreamError:   any other non-200 status, or transport failure
            EmptyCompletion: no candidates, no content parts or no text
        """
        url = f"{self.base_url}/models/{request.model}:generateContent"
        payload = {
            "contents": [
                {
                    "parts": [
                        {"text": request.prompt},
                    ],
                },
            ],
        }

        try:
            resp = requests.post(
                url,
                params={"key": self.api_key},
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=request.timeout_s,
            )
        except requests.Timeout:
            raise UpstreamError(None, f"timeout after {request.timeout_s}s")
        except requests.RequestException as e:
            raise UpstreamError(None, self._redact(str(e)))

        body = resp.text
        if resp.status_code == 429:
            raise QuotaExceeded(body)
        if resp.status_code != 200:
            raise UpstreamError(resp.status_code, self._redact(body))

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamError(resp.status_code, f"undecodable response body: {e}")

        text = _first_text(data)
        if not text:
            raise EmptyCompletion()

        return ModelResponse(
            output=text,
            model=request.model,
            metadata={
                "backend": "gemini",
                "model": request.model,
                "task": request.task,
            },
        )


def _first_text(data) -> Optional[str]:
    """Text of the first part of the first candidate, or None for any other shape."""
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return None
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) else None
