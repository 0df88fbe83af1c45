"""Turn raw model text into a :class:`GeneratedTripResponse`.

Two attempts, in order: the whole text as JSON, then the interior of the
first triple-backtick block. Anything else is a parse failure.
"""
import json
import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from mapa.core.errors import GenerationParseError
from mapa.models.schemas import GeneratedTripResponse

logger = logging.getLogger(__name__)

FENCE = "```"
EXCERPT_CHARS = 500


def excerpt(text: str, limit: int = EXCERPT_CHARS) -> str:
    text = text.strip()
    return text if len(text) <= limit else text[:limit] + "..."


def first_fenced_block(text: str) -> Optional[str]:
    """Interior of the first ``` ... ``` block, without an optional ``json`` tag."""
    start = text.find(FENCE)
    if start == -1:
        return None
    end = text.find(FENCE, start + len(FENCE))
    if end == -1:
        return None
    body = text[start + len(FENCE):end].strip()
    if body[:4].lower() == "json":
        body = body[4:].lstrip()
    return body


def _loads(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except json.JSONDecodeError:
        return False, None


def decode_model_output(raw: str) -> Any:
    ok, value = _loads(raw)
    if ok:
        return value

    logger.warning("Model output is not bare JSON, looking for a fenced block")
    block = first_fenced_block(raw)
    if block is None:
        raise GenerationParseError(
            "Model output is not JSON and contains no fenced block", raw_excerpt=excerpt(raw)
        )
    ok, value = _loads(block)
    if not ok:
        raise GenerationParseError("Fenced block in model output is not valid JSON", raw_excerpt=excerpt(raw))
    return value


def parse_generated_trip(raw: str, duration: int) -> GeneratedTripResponse:
    data = decode_model_output(raw)
    try:
        trip = GeneratedTripResponse.model_validate(data)
    except PydanticValidationError as exc:
        raise GenerationParseError(
            f"Model output does not match the itinerary shape: {exc.error_count()} error(s)",
            raw_excerpt=excerpt(raw),
        ) from exc

    for label, itinerary in (("budget", trip.budget_itinerary), ("experience", trip.experience_itinerary)):
        if len(itinerary.daily_plans) != duration:
            raise GenerationParseError(
                f"{label} itinerary has {len(itinerary.daily_plans)} days, expected {duration}",
                raw_excerpt=excerpt(raw),
            )
    return trip
