import os

# before anything reads settings: no file database, no network model
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LLM_PROVIDER", "mock")

import json
from dataclasses import replace
from datetime import datetime
from itertools import count
from typing import Any, Dict, List, Optional

import pytest
import requests
from fastapi.testclient import TestClient

from main import create_app
from mapa.core.config import Settings
from mapa.core.errors import NotFound
from mapa.llm.client import GenerationContext
from mapa.llm.planner import MockItineraryBackend
from mapa.models.domain import (
    Airport,
    City,
    Country,
    Currency,
    IdentityProvider,
    Preference,
    Trip,
    User,
)
from mapa.models.schemas import TripRequest
from mapa.services.email_service import EmailSender
from mapa.services.identity import ProviderProfileClient
from mapa.storage.seed import seed_reference_data

PASSWORD = "secret123"


class InMemoryRepository:
    """Dict-backed stand-in for SqlRepository. Returns copies, like a real store."""

    def __init__(self) -> None:
        self.users: Dict[int, User] = {}
        self.trips: Dict[int, Trip] = {}
        self.airports: Dict[str, Airport] = {}
        self.countries: Dict[str, Country] = {}
        self.currencies: Dict[str, Currency] = {}
        self.preferences: Dict[str, Preference] = {}
        self.cities: Dict[tuple, City] = {}
        self._user_ids = count(1)
        self._trip_ids = count(1)

    # users
    def _find_user(self, **criteria: Any) -> Optional[User]:
        for user in self.users.values():
            if all(getattr(user, k) == v for k, v in criteria.items()):
                return replace(user)
        return None

    def get_user(self, user_id: int) -> Optional[User]:
        return self._find_user(id=user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._find_user(email=email)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._find_user(username=username)

    def get_user_by_provider_id(self, provider: IdentityProvider, provider_id: str) -> Optional[User]:
        if provider == IdentityProvider.local:
            return None
        return self._find_user(**{f"{provider.value}_id": provider_id})

    def get_user_by_verification_token(self, token: str) -> Optional[User]:
        return self._find_user(verification_token=token)

    def get_user_by_reset_token(self, token: str) -> Optional[User]:
        return self._find_user(reset_password_token=token)

    def create_user(self, **fields: Any) -> User:
        user = User(id=next(self._user_ids), created_at=datetime.utcnow(), **fields)
        self.users[user.id] = user
        return replace(user)

    def update_user(self, user_id: int, **fields: Any) -> User:
        if user_id not in self.users:
            raise NotFound(f"User with ID {user_id} not found")
        self.users[user_id] = replace(self.users[user_id], **fields)
        return replace(self.users[user_id])

    # trips
    def get_trip(self, trip_id: int) -> Optional[Trip]:
        trip = self.trips.get(trip_id)
        return replace(trip) if trip else None

    def list_user_trips(self, user_id: int) -> List[Trip]:
        return [replace(t) for t in self.trips.values() if t.user_id == user_id]

    def create_trip(self, user_id: int, fields: Dict[str, Any]) -> Trip:
        trip = Trip(id=next(self._trip_ids), user_id=user_id, created_at=datetime.utcnow(), **fields)
        self.trips[trip.id] = trip
        return replace(trip)

    def update_trip(self, trip_id: int, fields: Dict[str, Any]) -> Trip:
        if trip_id not in self.trips:
            raise NotFound("Trip not found")
        self.trips[trip_id] = replace(self.trips[trip_id], **fields)
        return replace(self.trips[trip_id])

    def delete_trip(self, trip_id: int) -> None:
        self.trips.pop(trip_id, None)

    # reference data
    def list_airports(self, philippine_only: bool = False) -> List[Airport]:
        return [a for a in self.airports.values() if a.is_philippine or not philippine_only]

    def get_airport(self, code: str) -> Optional[Airport]:
        return self.airports.get(code)

    def list_countries(self) -> List[Country]:
        return list(self.countries.values())

    def get_country(self, code: str) -> Optional[Country]:
        return self.countries.get(code)

    def list_currencies(self) -> List[Currency]:
        return list(self.currencies.values())

    def list_preferences(self) -> List[Preference]:
        return list(self.preferences.values())

    def list_cities(self, country_code: str) -> List[City]:
        return [c for c in self.cities.values() if c.country_code == country_code]

    def get_city(self, country_code: str, code: str) -> Optional[City]:
        return self.cities.get((country_code, code))

    @staticmethod
    def _put(table: dict, key, value) -> bool:
        created = key not in table
        table[key] = value
        return created

    def upsert_airport(self, airport: Airport) -> bool:
        return self._put(self.airports, airport.code, airport)

    def upsert_country(self, country: Country) -> bool:
        return self._put(self.countries, country.code, country)

    def upsert_currency(self, currency: Currency) -> bool:
        return self._put(self.currencies, currency.code, currency)

    def upsert_preference(self, preference: Preference) -> bool:
        return self._put(self.preferences, preference.code, preference)

    def upsert_city(self, city: City) -> bool:
        return self._put(self.cities, (city.country_code, city.code), city)


class ScriptedBackend:
    """Returns a canned reply (or raises a canned error) and records every call."""

    name = "scripted"

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: List[GenerationContext] = []

    def generate(self, context: GenerationContext) -> str:
        self.calls.append(context)
        if self.error is not None:
            raise self.error
        return self.reply


class RecordingMockBackend(MockItineraryBackend):
    def __init__(self) -> None:
        self.calls: List[GenerationContext] = []

    def generate(self, context: GenerationContext) -> str:
        self.calls.append(context)
        return super().generate(context)


class RecordingEmailSender(EmailSender):
    def __init__(self, settings: Settings):
        super().__init__(settings)
        self.outbox: List[Dict[str, Any]] = []

    @property
    def configured(self) -> bool:
        return True

    def send(self, to: str, subject: str, text: str, html: Optional[str] = None) -> bool:
        self.outbox.append({"to": to, "subject": subject, "text": text, "html": html})
        return True


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeSession:
    """Stands in for ``requests.Session``; records what was sent."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def _send(self, method, url, **kwargs):
        self.requests.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def post(self, url, **kwargs):
        return self._send("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._send("GET", url, **kwargs)


def make_trip_request(**overrides: Any) -> TripRequest:
    data = {
        "originAirport": "MNL",
        "destinationCountry": "JPN",
        "travelMonth": 4,
        "currency": "PHP",
        "duration": 3,
        "budget": 60000,
        "preferences": ["food", "culture"],
    }
    data.update(overrides)
    return TripRequest.model_validate(data)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="test",
        database_url="sqlite://",
        llm_provider="mock",
        bcrypt_rounds=4,
        base_url="http://mapa.test",
        email_user="mailer@mapa.test",
        email_app_password="app-password",
    )


@pytest.fixture
def repository() -> InMemoryRepository:
    repo = InMemoryRepository()
    seed_reference_data(repo)
    return repo


@pytest.fixture
def backend() -> RecordingMockBackend:
    return RecordingMockBackend()


@pytest.fixture
def email_sender(test_settings) -> RecordingEmailSender:
    return RecordingEmailSender(test_settings)


@pytest.fixture
def profile_session() -> FakeSession:
    return FakeSession(FakeResponse(status_code=401, body={"error": "no token configured"}))


@pytest.fixture
def app(test_settings, repository, backend, email_sender, profile_session):
    return create_app(
        settings=test_settings,
        repository=repository,
        itinerary_backend=backend,
        email_sender=email_sender,
        profile_client=ProviderProfileClient(session=profile_session),
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_client(app):
    def _make() -> TestClient:
        return TestClient(app)

    return _make


def register(client: TestClient, username: str = "juan", email: Optional[str] = None, password: str = PASSWORD):
    resp = client.post(
        "/api/register",
        json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
            "fullName": username.title(),
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["user"]


@pytest.fixture
def auth_client(client) -> TestClient:
    register(client)
    return client


@pytest.fixture
def trip_payload():
    """Valid model output for a request, as the camelCase dict the model would send."""

    def _make(duration: int = 3, budget: int = 60000, country: str = "Japan") -> Dict[str, Any]:
        context = GenerationContext(
            request=make_trip_request(duration=duration, budget=budget),
            origin_airport_name="Manila",
            destination_country_name=country,
        )
        return json.loads(MockItineraryBackend().generate(context))

    return _make
