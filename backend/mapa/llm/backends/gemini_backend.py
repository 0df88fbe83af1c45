from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import requests

from mapa.core.config import settings
from mapa.core.errors import ConfigurationError, GenerationServiceError
from mapa.llm.client import GenerationContext

logger = logging.getLogger(__name__)

SAFETY_CATEGORIES = [
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
]
SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"


@dataclass
class GeminiBackend:
    """
    Itinerary backend using the Gemini ``generateContent`` REST endpoint.
    Returns the text of the first candidate, parts joined.
    """

    api_key: Optional[str] = field(default_factory=lambda: settings.gemini_api_key)
    model: str = field(default_factory=lambda: settings.gemini_model)
    api_base: str = field(default_factory=lambda: settings.gemini_api_base)
    timeout: float = field(default_factory=lambda: settings.llm_timeout_seconds)
    session: requests.Session = field(default_factory=requests.Session)
    name: str = "gemini"

    def _payload(self, prompt: str) -> dict:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "safetySettings": [
                {"category": category, "threshold": SAFETY_THRESHOLD}
                for category in SAFETY_CATEGORIES
            ],
        }

    def generate(self, context: GenerationContext) -> str:
        if not self.api_key:
            raise ConfigurationError("GOOGLE_GEMINI_API_KEY is not set")

        url = f"{self.api_base.rstrip('/')}/models/{self.model}:generateContent"
        try:
            resp = self.session.post(
                url,
                json=self._payload(context.prompt),
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Gemini request failed: %s", exc)
            raise GenerationServiceError(f"Gemini request failed: {exc}") from exc

        if resp.status_code in (401, 403) or (
            resp.status_code == 400 and "API_KEY_INVALID" in resp.text
        ):
            logger.error("Gemini rejected the API key: HTTP %s", resp.status_code)
            raise ConfigurationError(f"Gemini rejected the API key (HTTP {resp.status_code})")
        if not resp.ok:
            logger.error("Gemini returned HTTP %s: %s", resp.status_code, resp.text[:500])
            raise GenerationServiceError(f"Gemini returned HTTP {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as exc:
            raise GenerationServiceError("Gemini response body is not JSON") from exc
        if not isinstance(body, dict):
            raise GenerationServiceError("Gemini response body is not a JSON object")
        return self._extract_text(body)

    @staticmethod
    def _extract_text(body: dict) -> str:
        candidates = [c for c in body.get("candidates") or [] if isinstance(c, dict)]
        if not candidates:
            reason = (body.get("promptFeedback") or {}).get("blockReason", "no candidates")
            logger.error("Gemini returned no candidates: %s", reason)
            raise GenerationServiceError(f"Gemini returned no candidates ({reason})")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            finish = candidates[0].get("finishReason", "unknown")
            raise GenerationServiceError(f"Gemini candidate has no text (finishReason={finish})")
        return text
