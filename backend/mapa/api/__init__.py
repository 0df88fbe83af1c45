from typing import Awaitable, Callable, Type, TypeVar

from fastapi import Depends, HTTPException
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from mapa.api.errors import field_errors
from mapa.core.config import Settings
from mapa.core.errors import FieldError, Unauthenticated, ValidationError
from mapa.llm.client import ItineraryClient
from mapa.models.domain import User
from mapa.services.auth_service import AuthService
from mapa.services.email_service import EmailSender
from mapa.services.generation_service import TripGenerationService
from mapa.services.identity import ProviderProfileClient
from mapa.services.trip_service import TripService
from mapa.storage.repository import Repository

SESSION_USER_KEY = "user_id"

M = TypeVar("M", bound=BaseModel)


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=500, detail=f"{name.capitalize()} not initialized")
    return value


def get_repository(request: Request) -> Repository:
    return _state(request, "repository")


def get_settings(request: Request) -> Settings:
    return _state(request, "settings")


def get_email_sender(request: Request) -> EmailSender:
    return _state(request, "email_sender")


def get_itinerary_client(request: Request) -> ItineraryClient:
    return _state(request, "itinerary_client")


def get_profile_client(request: Request) -> ProviderProfileClient:
    return _state(request, "profile_client")


def get_current_user(request: Request, repository: Repository = Depends(get_repository)) -> User:
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise Unauthenticated()
    user = repository.get_user(user_id)
    if user is None:
        # session outlived its account
        request.session.pop(SESSION_USER_KEY, None)
        raise Unauthenticated()
    return user


def get_trip_service(repository: Repository = Depends(get_repository)) -> TripService:
    return TripService(repository=repository)


def get_generation_service(
    repository: Repository = Depends(get_repository),
    client: ItineraryClient = Depends(get_itinerary_client),
) -> TripGenerationService:
    return TripGenerationService(repository=repository, client=client)


def get_auth_service(
    repository: Repository = Depends(get_repository),
    email: EmailSender = Depends(get_email_sender),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(repository=repository, email=email, settings=settings)


def json_body(model: Type[M]) -> Callable[[Request], Awaitable[M]]:
    """Body dependency that decodes only when resolved.

    FastAPI decodes declared body params before any dependency runs, so a
    route that must reject anonymous callers first lists ``get_current_user``
    and then ``Depends(json_body(Model))`` instead of a plain body param.
    """

    async def parse(request: Request) -> M:
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError([FieldError("", "Request body is not valid JSON")]) from None
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            raise ValidationError(field_errors(exc.errors())) from None

    return parse


def login_session(request: Request, user: User) -> None:
    request.session[SESSION_USER_KEY] = user.id


def logout_session(request: Request) -> None:
    request.session.clear()
