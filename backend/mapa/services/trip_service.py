import logging
from typing import List

from mapa.core.errors import FieldError, Forbidden, NotFound, ValidationError
from mapa.models.domain import Trip, User
from mapa.models.schemas import TripCreate, TripSchema, TripUpdate
from mapa.storage.repository import Repository

logger = logging.getLogger(__name__)


class TripService:
    """Owner-scoped trip CRUD on top of the owner-agnostic repository."""

    def __init__(self, repository: Repository):
        self.repository = repository

    def _owned_trip(self, user: User, trip_id: int, action: str) -> Trip:
        trip = self.repository.get_trip(trip_id)
        if trip is None:
            raise NotFound("Trip not found")
        if trip.user_id != user.id:
            logger.warning("User %s tried to %s trip %s owned by %s", user.id, action, trip_id, trip.user_id)
            raise Forbidden(f"Not authorized to {action} this trip")
        return trip

    def list_trips(self, user: User) -> List[TripSchema]:
        return [TripSchema.from_domain(t) for t in self.repository.list_user_trips(user.id)]

    def get_trip(self, user: User, trip_id: int) -> TripSchema:
        return TripSchema.from_domain(self._owned_trip(user, trip_id, "view"))

    def create_trip(self, user: User, payload: TripCreate) -> TripSchema:
        trip = self.repository.create_trip(user.id, payload.to_fields())
        return TripSchema.from_domain(trip)

    def update_trip(self, user: User, trip_id: int, payload: TripUpdate) -> TripSchema:
        nulls = payload.explicit_nulls()
        if nulls:
            raise ValidationError([FieldError(path, "Cannot be null") for path in nulls])
        self._owned_trip(user, trip_id, "update")
        trip = self.repository.update_trip(trip_id, payload.to_fields())
        return TripSchema.from_domain(trip)

    def delete_trip(self, user: User, trip_id: int) -> None:
        self._owned_trip(user, trip_id, "delete")
        self.repository.delete_trip(trip_id)
        logger.info("User %s deleted trip %s", user.id, trip_id)
