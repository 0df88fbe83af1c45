from __future__ import annotations

import logging
from dataclasses import fields as dataclass_fields
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy import delete, select
from sqlalchemy.orm import sessionmaker

from mapa.core.errors import NotFound
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
from mapa.storage.tables import (
    AirportRow,
    CityRow,
    CountryRow,
    CurrencyRow,
    PreferenceRow,
    TripRow,
    UserRow,
)

logger = logging.getLogger(__name__)

_USER_FIELDS = {f.name for f in dataclass_fields(User)}
_TRIP_FIELDS = {f.name for f in dataclass_fields(Trip)}


class Repository(Protocol):
    """Everything the services need from persistence.

    Trip operations are owner-agnostic; ownership is checked by the caller.
    """

    # users
    def get_user(self, user_id: int) -> Optional[User]: ...
    def get_user_by_email(self, email: str) -> Optional[User]: ...
    def get_user_by_username(self, username: str) -> Optional[User]: ...
    def get_user_by_provider_id(self, provider: IdentityProvider, provider_id: str) -> Optional[User]: ...
    def get_user_by_verification_token(self, token: str) -> Optional[User]: ...
    def get_user_by_reset_token(self, token: str) -> Optional[User]: ...
    def create_user(self, **fields: Any) -> User: ...
    def update_user(self, user_id: int, **fields: Any) -> User: ...

    # trips
    def get_trip(self, trip_id: int) -> Optional[Trip]: ...
    def list_user_trips(self, user_id: int) -> List[Trip]: ...
    def create_trip(self, user_id: int, fields: Dict[str, Any]) -> Trip: ...
    def update_trip(self, trip_id: int, fields: Dict[str, Any]) -> Trip: ...
    def delete_trip(self, trip_id: int) -> None: ...

    # reference data
    def list_airports(self, philippine_only: bool = False) -> List[Airport]: ...
    def get_airport(self, code: str) -> Optional[Airport]: ...
    def list_countries(self) -> List[Country]: ...
    def get_country(self, code: str) -> Optional[Country]: ...
    def list_currencies(self) -> List[Currency]: ...
    def list_preferences(self) -> List[Preference]: ...
    def list_cities(self, country_code: str) -> List[City]: ...
    def get_city(self, country_code: str, code: str) -> Optional[City]: ...
    def upsert_airport(self, airport: Airport) -> bool: ...
    def upsert_country(self, country: Country) -> bool: ...
    def upsert_currency(self, currency: Currency) -> bool: ...
    def upsert_preference(self, preference: Preference) -> bool: ...
    def upsert_city(self, city: City) -> bool: ...


def _user_from_row(row: UserRow) -> User:
    return User(**{name: getattr(row, name) for name in _USER_FIELDS})


def _trip_from_row(row: TripRow) -> Trip:
    trip = Trip(**{name: getattr(row, name) for name in _TRIP_FIELDS})
    trip.preferences = list(row.preferences or [])
    return trip


class SqlRepository:
    """SQLAlchemy-backed implementation of :class:`Repository`.

    Each call runs in its own short-lived session.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    # -- users --------------------------------------------------------------

    def _find_user(self, **criteria: Any) -> Optional[User]:
        with self.session_factory() as session:
            stmt = select(UserRow).filter_by(**criteria)
            row = session.execute(stmt).scalar_one_or_none()
            return _user_from_row(row) if row else None

    def get_user(self, user_id: int) -> Optional[User]:
        return self._find_user(id=user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._find_user(email=email)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self._find_user(username=username)

    def get_user_by_provider_id(self, provider: IdentityProvider, provider_id: str) -> Optional[User]:
        if provider == IdentityProvider.google:
            return self._find_user(google_id=provider_id)
        if provider == IdentityProvider.facebook:
            return self._find_user(facebook_id=provider_id)
        return None

    def get_user_by_verification_token(self, token: str) -> Optional[User]:
        return self._find_user(verification_token=token)

    def get_user_by_reset_token(self, token: str) -> Optional[User]:
        return self._find_user(reset_password_token=token)

    def create_user(self, **fields: Any) -> User:
        values = {k: v for k, v in fields.items() if k in _USER_FIELDS and k not in ("id", "created_at")}
        with self.session_factory() as session:
            row = UserRow(**values)
            session.add(row)
            session.commit()
            session.refresh(row)
            logger.info("Created user %s (%s)", row.id, row.username)
            return _user_from_row(row)

    def update_user(self, user_id: int, **fields: Any) -> User:
        with self.session_factory() as session:
            row = session.get(UserRow, user_id)
            if row is None:
                raise NotFound(f"User with ID {user_id} not found")
            for key, value in fields.items():
                if key in _USER_FIELDS and key != "id":
                    setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return _user_from_row(row)

    # -- trips --------------------------------------------------------------

    def get_trip(self, trip_id: int) -> Optional[Trip]:
        with self.session_factory() as session:
            row = session.get(TripRow, trip_id)
            return _trip_from_row(row) if row else None

    def list_user_trips(self, user_id: int) -> List[Trip]:
        with self.session_factory() as session:
            rows = session.execute(select(TripRow).where(TripRow.user_id == user_id)).scalars()
            return [_trip_from_row(r) for r in rows]

    def create_trip(self, user_id: int, fields: Dict[str, Any]) -> Trip:
        values = {k: v for k, v in fields.items() if k in _TRIP_FIELDS and k not in ("id", "user_id", "created_at")}
        with self.session_factory() as session:
            row = TripRow(user_id=user_id, **values)
            session.add(row)
            session.commit()
            session.refresh(row)
            logger.info("Created trip %s for user %s", row.id, user_id)
            return _trip_from_row(row)

    def update_trip(self, trip_id: int, fields: Dict[str, Any]) -> Trip:
        with self.session_factory() as session:
            row = session.get(TripRow, trip_id)
            if row is None:
                raise NotFound("Trip not found")
            for key, value in fields.items():
                if key in _TRIP_FIELDS and key not in ("id", "user_id", "created_at"):
                    setattr(row, key, value)
            session.commit()
            session.refresh(row)
            return _trip_from_row(row)

    def delete_trip(self, trip_id: int) -> None:
        with self.session_factory() as session:
            session.execute(delete(TripRow).where(TripRow.id == trip_id))
            session.commit()

    # -- reference data -----------------------------------------------------

    def list_airports(self, philippine_only: bool = False) -> List[Airport]:
        with self.session_factory() as session:
            stmt = select(AirportRow).order_by(AirportRow.id)
            if philippine_only:
                stmt = stmt.where(AirportRow.is_philippine.is_(True))
            return [
                Airport(code=r.code, name=r.name, is_philippine=r.is_philippine)
                for r in session.execute(stmt).scalars()
            ]

    def get_airport(self, code: str) -> Optional[Airport]:
        with self.session_factory() as session:
            r = session.execute(select(AirportRow).where(AirportRow.code == code)).scalar_one_or_none()
            return Airport(code=r.code, name=r.name, is_philippine=r.is_philippine) if r else None

    def list_countries(self) -> List[Country]:
        with self.session_factory() as session:
            rows = session.execute(select(CountryRow).order_by(CountryRow.id)).scalars()
            return [Country(code=r.code, name=r.name) for r in rows]

    def get_country(self, code: str) -> Optional[Country]:
        with self.session_factory() as session:
            r = session.execute(select(CountryRow).where(CountryRow.code == code)).scalar_one_or_none()
            return Country(code=r.code, name=r.name) if r else None

    def list_currencies(self) -> List[Currency]:
        with self.session_factory() as session:
            rows = session.execute(select(CurrencyRow).order_by(CurrencyRow.id)).scalars()
            return [Currency(code=r.code, name=r.name) for r in rows]

    def list_preferences(self) -> List[Preference]:
        with self.session_factory() as session:
            rows = session.execute(select(PreferenceRow).order_by(PreferenceRow.id)).scalars()
            return [Preference(code=r.code, name=r.name, icon=r.icon) for r in rows]

    def list_cities(self, country_code: str) -> List[City]:
        with self.session_factory() as session:
            stmt = select(CityRow).where(CityRow.country_code == country_code).order_by(CityRow.id)
            return [
                City(code=r.code, name=r.name, country_code=r.country_code)
                for r in session.execute(stmt).scalars()
            ]

    def get_city(self, country_code: str, code: str) -> Optional[City]:
        with self.session_factory() as session:
            stmt = select(CityRow).where(CityRow.country_code == country_code, CityRow.code == code)
            r = session.execute(stmt).scalar_one_or_none()
            return City(code=r.code, name=r.name, country_code=r.country_code) if r else None

    def _upsert(self, model, key: Dict[str, Any], values: Dict[str, Any]) -> bool:
        """Insert or update the row identified by ``key``. True when a row was inserted."""
        with self.session_factory() as session:
            row = session.execute(select(model).filter_by(**key)).scalar_one_or_none()
            created = row is None
            if created:
                session.add(model(**key, **values))
            else:
                for attr, value in values.items():
                    setattr(row, attr, value)
            session.commit()
            return created

    def upsert_airport(self, airport: Airport) -> bool:
        return self._upsert(
            AirportRow, {"code": airport.code}, {"name": airport.name, "is_philippine": airport.is_philippine}
        )

    def upsert_country(self, country: Country) -> bool:
        return self._upsert(CountryRow, {"code": country.code}, {"name": country.name})

    def upsert_currency(self, currency: Currency) -> bool:
        return self._upsert(CurrencyRow, {"code": currency.code}, {"name": currency.name})

    def upsert_preference(self, preference: Preference) -> bool:
        return self._upsert(
            PreferenceRow, {"code": preference.code}, {"name": preference.name, "icon": preference.icon}
        )

    def upsert_city(self, city: City) -> bool:
        return self._upsert(CityRow, {"code": city.code, "country_code": city.country_code}, {"name": city.name})
