import logging
from dataclasses import dataclass, field
from typing import List, Protocol

from mapa.llm.parsing import parse_generated_trip
from mapa.llm.prompts import build_trip_prompt
from mapa.models.schemas import GeneratedTripResponse, TripRequest

logger = logging.getLogger(__name__)


@dataclass
class GenerationContext:
    request: TripRequest
    origin_airport_name: str
    destination_country_name: str
    city_names: List[str] = field(default_factory=list)
    prompt: str = ""


class ItineraryBackend(Protocol):
    """Sends one prompt to a generative model and returns its raw text.

    Implementations raise ConfigurationError for missing/invalid credentials
    and GenerationServiceError for transport failures.
    """

    name: str

    def generate(self, context: GenerationContext) -> str:
        ...


class ItineraryClient:
    """
    Builds the prompt for a validated trip request, calls the backend once,
    and parses the answer into a budget/experience itinerary pair.
    Stateless; never persists anything.
    """

    def __init__(self, backend: ItineraryBackend):
        self.backend = backend

    def generate_trip(
        self,
        request: TripRequest,
        origin_airport_name: str,
        destination_country_name: str,
        city_names: List[str],
    ) -> GeneratedTripResponse:
        context = GenerationContext(
            request=request,
            origin_airport_name=origin_airport_name,
            destination_country_name=destination_country_name,
            city_names=list(city_names),
        )
        context.prompt = build_trip_prompt(
            request, origin_airport_name, destination_country_name, context.city_names
        )
        logger.info(
            "Generating %d-day trip to %s via %s backend",
            request.duration,
            destination_country_name,
            getattr(self.backend, "name", type(self.backend).__name__),
        )
        raw = self.backend.generate(context)
        return parse_generated_trip(raw, request.duration)
