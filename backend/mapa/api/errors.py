"""Map the error taxonomy onto JSON responses."""
import logging
from typing import Any, Dict, List

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request

from mapa.core.errors import FieldError, GenerationError, MapaError, ValidationError

logger = logging.getLogger(__name__)


def field_errors(errors: List[Dict[str, Any]]) -> List[FieldError]:
    out = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        message = err.get("msg", "Invalid value")
        ctx_error = (err.get("ctx") or {}).get("error")
        if err.get("type") == "value_error" and ctx_error is not None:
            message = str(ctx_error)
        out.append(FieldError(".".join(loc), message))
    return out


def _error_list(errors: List[FieldError]) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"success": False, "errors": [e.to_dict() for e in errors]},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = field_errors(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
    return _error_list(errors)


async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_list(exc.errors)


async def generation_handler(request: Request, exc: GenerationError) -> JSONResponse:
    # detail was logged by the service; the caller only learns the category
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": GenerationError.default_message, "category": exc.category},
    )


async def mapa_error_handler(request: Request, exc: MapaError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_handler)
    app.add_exception_handler(GenerationError, generation_handler)
    app.add_exception_handler(MapaError, mapa_error_handler)
