from fastapi import APIRouter, Depends

from mapa.api import get_current_user, get_generation_service, json_body
from mapa.models.schemas import GeneratedTripResponse, TripRequest
from mapa.services.generation_service import TripGenerationService

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.post("/generate-trip", response_model=GeneratedTripResponse)
def generate_trip(
    payload: TripRequest = Depends(json_body(TripRequest)),
    service: TripGenerationService = Depends(get_generation_service),
) -> GeneratedTripResponse:
    return service.generate(payload)
