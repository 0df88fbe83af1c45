import json
import logging
from dataclasses import dataclass
from typing import Dict, List

from mapa.core.config import Settings
from mapa.llm.backends.gemini_backend import GeminiBackend
from mapa.llm.backends.ollama_backend import OllamaBackend
from mapa.llm.client import GenerationContext, ItineraryBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Framing:
    label: str
    activity: str
    lodging: str
    breakfast: str
    lunch: str
    dinner: str
    # divisors applied to budget / duration
    activity_div: int
    lodging_div: int
    breakfast_div: int
    lunch_div: int
    dinner_div: int
    total_ratio: float


BUDGET = _Framing(
    label="Budget-friendly",
    activity="Budget activity",
    lodging="Budget Accommodation",
    breakfast="Local breakfast",
    lunch="Street food lunch",
    dinner="Budget dinner",
    activity_div=3,
    lodging_div=4,
    breakfast_div=10,
    lunch_div=8,
    dinner_div=6,
    total_ratio=0.8,
)

EXPERIENCE = _Framing(
    label="Experience-focused",
    activity="Premium activity",
    lodging="Luxury Accommodation",
    breakfast="Hotel breakfast",
    lunch="Local restaurant lunch",
    dinner="Fine dining experience",
    activity_div=2,
    lodging_div=2,
    breakfast_div=8,
    lunch_div=5,
    dinner_div=3,
    total_ratio=1.2,
)


class MockItineraryBackend:
    """
    A deterministic backend that simulates model output for offline use.
    Costs are carved out of the requested budget so totals stay plausible.
    The answer is serialized to text and parsed like any real model reply.
    """

    name = "mock"

    def generate(self, context: GenerationContext) -> str:
        request = context.request
        country = context.destination_country_name
        payload = {
            "tripName": f"Trip to {country}",
            "budgetItinerary": self._itinerary(BUDGET, request.budget, request.duration, country),
            "experienceItinerary": self._itinerary(EXPERIENCE, request.budget, request.duration, country),
        }
        logger.info("Mock backend produced a %d-day trip to %s", request.duration, country)
        return json.dumps(payload)

    @staticmethod
    def _itinerary(framing: _Framing, budget: int, duration: int, country: str) -> Dict:
        def share(divisor: int) -> int:
            return budget // (duration * divisor)

        plans: List[Dict] = []
        for i in range(duration):
            day = i + 1
            plans.append(
                {
                    "day": day,
                    "activities": [
                        {
                            "time": time,
                            "description": f"{framing.activity} {day}{suffix} in {country}",
                            "cost": share(framing.activity_div),
                        }
                        for time, suffix in (("Morning", "A"), ("Afternoon", "B"), ("Evening", "C"))
                    ],
                    "accommodation": {
                        "name": f"{framing.lodging} for Day {day}",
                        "cost": share(framing.lodging_div),
                    },
                    "meals": {
                        "breakfast": {"description": framing.breakfast, "cost": share(framing.breakfast_div)},
                        "lunch": {"description": framing.lunch, "cost": share(framing.lunch_div)},
                        "dinner": {"description": framing.dinner, "cost": share(framing.dinner_div)},
                    },
                }
            )
        return {
            "summary": f"{framing.label} {duration}-day trip to {country}",
            "dailyPlans": plans,
            "totalCost": int(budget * framing.total_ratio),
        }


def make_backend(settings: Settings) -> ItineraryBackend:
    provider = settings.llm_provider.lower()
    if provider == "mock":
        return MockItineraryBackend()
    if provider == "ollama":
        return OllamaBackend(
            host=settings.ollama_host, model=settings.ollama_model, timeout=settings.llm_timeout_seconds
        )
    if provider != "gemini":
        logger.warning("Unknown LLM_PROVIDER %r, using gemini", settings.llm_provider)
    return GeminiBackend(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        api_base=settings.gemini_api_base,
        timeout=settings.llm_timeout_seconds,
    )
