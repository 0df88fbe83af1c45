from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import requests

from mapa.core.config import settings
from mapa.core.errors import GenerationServiceError
from mapa.llm.client import GenerationContext

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a travel planning assistant. Reply with JSON only."


@dataclass
class OllamaBackend:
    """
    Itinerary backend using Ollama's chat API, for running against a local model.
    """

    host: str = field(default_factory=lambda: settings.ollama_host)
    model: str = field(default_factory=lambda: settings.ollama_model)
    timeout: float = field(default_factory=lambda: settings.llm_timeout_seconds)
    session: requests.Session = field(default_factory=requests.Session)
    name: str = "ollama"

    def _build_messages(self, context: GenerationContext) -> List[dict]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": context.prompt},
        ]

    def generate(self, context: GenerationContext) -> str:
        payload = {"model": self.model, "messages": self._build_messages(context), "stream": False}
        try:
            resp = self.session.post(f"{self.host.rstrip('/')}/api/chat", json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Ollama request failed: %s", exc)
            raise GenerationServiceError(f"Ollama request failed: {exc}") from exc

        try:
            content = resp.json().get("message", {}).get("content", "")
        except (ValueError, AttributeError) as exc:
            raise GenerationServiceError("Ollama response body is malformed") from exc
        if not content:
            raise GenerationServiceError("Ollama returned an empty message")
        return content
