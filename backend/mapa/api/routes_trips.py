from typing import List

from fastapi import APIRouter, Depends, Response, status

from mapa.api import get_current_user, get_trip_service, json_body
from mapa.models.domain import User
from mapa.models.schemas import TripCreate, TripSchema, TripUpdate
from mapa.services.trip_service import TripService

router = APIRouter(prefix="/trips")


@router.get("", response_model=List[TripSchema])
def list_trips(
    user: User = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
) -> List[TripSchema]:
    return service.list_trips(user)


@router.get("/{trip_id}", response_model=TripSchema)
def get_trip(
    trip_id: int,
    user: User = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    return service.get_trip(user, trip_id)


@router.post("", response_model=TripSchema, status_code=status.HTTP_201_CREATED)
def create_trip(
    user: User = Depends(get_current_user),
    payload: TripCreate = Depends(json_body(TripCreate)),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    return service.create_trip(user, payload)


@router.patch("/{trip_id}", response_model=TripSchema)
def update_trip(
    trip_id: int,
    user: User = Depends(get_current_user),
    payload: TripUpdate = Depends(json_body(TripUpdate)),
    service: TripService = Depends(get_trip_service),
) -> TripSchema:
    return service.update_trip(user, trip_id, payload)


@router.delete("/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip(
    trip_id: int,
    user: User = Depends(get_current_user),
    service: TripService = Depends(get_trip_service),
) -> Response:
    service.delete_trip(user, trip_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
