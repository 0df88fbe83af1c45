"""Error taxonomy shared by services and routes.

Each class carries the HTTP status it maps to; the handlers in
``mapa.api.errors`` turn them into JSON responses.
"""
from typing import List, Optional


class MapaError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class FieldError:
    __slots__ = ("path", "message")

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message

    def to_dict(self) -> dict:
        return {"path": self.path, "message": self.message}

    def __repr__(self) -> str:
        return f"FieldError({self.path!r}, {self.message!r})"


class ValidationError(MapaError):
    """Malformed request. Carries every field-level violation, not just the first."""

    status_code = 400
    default_message = "Invalid request"

    def __init__(self, errors: List[FieldError], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)


class BadRequestError(MapaError):
    status_code = 400
    default_message = "Bad request"


class Unauthenticated(MapaError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(MapaError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(MapaError):
    status_code = 404
    default_message = "Not found"


class GenerationError(MapaError):
    """Base for every failure of the itinerary generation client."""

    status_code = 502
    category = "service"
    default_message = "Failed to generate trip itinerary. Please try again."


class ConfigurationError(GenerationError):
    """External-service credentials are missing or invalid. Operator-fixable."""

    status_code = 503
    category = "configuration"


class GenerationServiceError(GenerationError):
    """Transport-level failure talking to the generative model."""

    category = "service"


class GenerationParseError(GenerationError):
    """The model answered, but not with the expected JSON shape."""

    category = "model_output"

    def __init__(self, message: Optional[str] = None, raw_excerpt: str = ""):
        self.raw_excerpt = raw_excerpt
        super().__init__(message)
