import logging
from typing import List, Tuple

from mapa.core.errors import GenerationError
from mapa.llm.client import ItineraryClient
from mapa.models.schemas import GeneratedTripResponse, TripRequest
from mapa.storage.repository import Repository

logger = logging.getLogger(__name__)


class TripGenerationService:
    def __init__(self, repository: Repository, client: ItineraryClient):
        self.repository = repository
        self.client = client

    def resolve_names(self, request: TripRequest) -> Tuple[str, str, List[str]]:
        """Display names for the prompt. Unknown codes degrade, they never fail."""
        airport = self.repository.get_airport(request.origin_airport)
        country = self.repository.get_country(request.destination_country)
        origin_name = airport.name if airport else request.origin_airport
        country_name = country.name if country else request.destination_country

        city_names: List[str] = []
        for code in request.selected_cities or []:
            city = self.repository.get_city(request.destination_country, code)
            if city is None:
                logger.info("Dropping unknown city %s for %s", code, request.destination_country)
                continue
            city_names.append(city.name)
        return origin_name, country_name, city_names

    def generate(self, request: TripRequest) -> GeneratedTripResponse:
        origin_name, country_name, city_names = self.resolve_names(request)
        try:
            return self.client.generate_trip(request, origin_name, country_name, city_names)
        except GenerationError as exc:
            logger.error(
                "Trip generation failed [%s/%s]: %s%s",
                exc.category,
                type(exc).__name__,
                exc.message,
                f" | raw: {exc.raw_excerpt}" if getattr(exc, "raw_excerpt", "") else "",
            )
            raise
