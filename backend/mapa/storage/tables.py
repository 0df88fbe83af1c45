from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False, unique=True)
    email = Column(Text, nullable=False, unique=True)
    # null for accounts created through an OAuth provider
    password = Column(Text, nullable=True)
    full_name = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    google_id = Column(Text, unique=True, nullable=True)
    facebook_id = Column(Text, unique=True, nullable=True)
    profile_picture = Column(Text, nullable=True)
    provider_data = Column(JSON, nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    verification_token = Column(Text, unique=True, nullable=True)
    verification_token_expires = Column(DateTime, nullable=True)
    reset_password_token = Column(Text, unique=True, nullable=True)
    reset_password_expires = Column(DateTime, nullable=True)


class TripRow(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    origin_airport = Column(Text, nullable=False)
    destination_country = Column(Text, nullable=False)
    travel_month = Column(Integer, nullable=False)
    currency = Column(Text, nullable=False)
    duration = Column(Integer, nullable=False)
    budget = Column(Integer, nullable=False)
    preferences = Column(JSON, nullable=False, default=list)
    status = Column(Text, nullable=False, default="upcoming")
    budget_itinerary = Column(JSON, nullable=True)
    experience_itinerary = Column(JSON, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)


class AirportRow(Base):
    __tablename__ = "airports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(8), nullable=False, unique=True)
    name = Column(Text, nullable=False)
    is_philippine = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class CountryRow(Base):
    __tablename__ = "countries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(8), nullable=False, unique=True)
    name = Column(Text, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class CurrencyRow(Base):
    __tablename__ = "currencies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(8), nullable=False, unique=True)
    name = Column(Text, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class PreferenceRow(Base):
    __tablename__ = "preferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(32), nullable=False, unique=True)
    name = Column(Text, nullable=False)
    icon = Column(Text, nullable=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class CityRow(Base):
    __tablename__ = "cities"
    __table_args__ = (UniqueConstraint("code", "country_code", name="uq_city_code_country"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(8), nullable=False)
    name = Column(Text, nullable=False)
    country_code = Column(String(8), ForeignKey("countries.code"), nullable=False, index=True)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
