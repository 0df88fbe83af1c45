import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from mapa.api import (
    routes_auth,
    routes_contact,
    routes_generate,
    routes_health,
    routes_reference,
    routes_trips,
)
from mapa.api.errors import register_error_handlers
from mapa.core.config import Settings, get_settings
from mapa.core.logging import configure_logging
from mapa.llm.client import ItineraryBackend, ItineraryClient
from mapa.llm.planner import make_backend
from mapa.services.email_service import EmailSender
from mapa.services.identity import ProviderProfileClient
from mapa.storage.database import init_db, make_engine, make_session_factory
from mapa.storage.repository import Repository, SqlRepository

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[Repository] = None,
    itinerary_backend: Optional[ItineraryBackend] = None,
    email_sender: Optional[EmailSender] = None,
    profile_client: Optional[ProviderProfileClient] = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.environment == "production",
    )
    register_error_handlers(app)

    if repository is None:
        engine = make_engine(settings.database_url)
        init_db(engine)
        repository = SqlRepository(make_session_factory(engine))

    backend = itinerary_backend or make_backend(settings)
    if getattr(backend, "name", "") == "gemini" and not settings.gemini_api_key:
        logger.warning("GOOGLE_GEMINI_API_KEY is not set; trip generation will fail until it is")
    email_sender = email_sender or EmailSender(settings)
    if not email_sender.configured:
        logger.warning("EMAIL_USER / EMAIL_APP_PASSWORD not set; account emails will not be sent")

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(routes_auth.router, prefix="/api", tags=["auth"])
    app.include_router(routes_generate.router, prefix="/api", tags=["generation"])
    app.include_router(routes_trips.router, prefix="/api", tags=["trips"])
    app.include_router(routes_reference.router, prefix="/api", tags=["reference"])
    app.include_router(routes_contact.router, prefix="/api", tags=["contact"])

    app.state.repository = repository
    app.state.settings = settings
    app.state.email_sender = email_sender
    app.state.itinerary_client = ItineraryClient(backend)
    app.state.profile_client = profile_client or ProviderProfileClient()
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
