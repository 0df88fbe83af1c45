from datetime import datetime
from typing import Any, ClassVar, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from mapa.models.domain import (
    Airport,
    City,
    Country,
    Currency,
    Preference,
    Trip,
    TripStatus,
    User,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Trip generation
# ---------------------------------------------------------------------------


class TripRequest(CamelModel):
    origin_airport: str = Field(min_length=3)
    destination_country: str = Field(min_length=2)
    travel_month: int = Field(ge=1, le=12)
    currency: str = Field(min_length=3)
    duration: int = Field(ge=1, le=30)
    budget: int = Field(ge=1)
    preferences: List[str] = Field(min_length=1)
    selected_cities: Optional[List[str]] = None


class ActivitySchema(CamelModel):
    time: str
    description: str
    cost: float = Field(ge=0)


class AccommodationSchema(CamelModel):
    name: str
    cost: float = Field(ge=0)


class MealSchema(CamelModel):
    description: str
    cost: float = Field(ge=0)


class MealsSchema(CamelModel):
    breakfast: MealSchema
    lunch: MealSchema
    dinner: MealSchema


class DailyPlanSchema(CamelModel):
    day: int = Field(ge=1)
    activities: List[ActivitySchema]
    accommodation: AccommodationSchema
    meals: MealsSchema


class ItinerarySchema(CamelModel):
    summary: str
    daily_plans: List[DailyPlanSchema] = Field(min_length=1)
    total_cost: float = Field(ge=0)

    @model_validator(mode="after")
    def days_are_contiguous(self) -> "ItinerarySchema":
        days = [plan.day for plan in self.daily_plans]
        if days != list(range(1, len(days) + 1)):
            raise ValueError(f"daily plan days must run 1..{len(days)} in order, got {days}")
        return self


class GeneratedTripResponse(CamelModel):
    trip_name: str
    budget_itinerary: ItinerarySchema
    experience_itinerary: ItinerarySchema


# ---------------------------------------------------------------------------
# Trips
# ---------------------------------------------------------------------------


class TripCreate(CamelModel):
    name: str = Field(min_length=1)
    origin_airport: str = Field(min_length=3)
    destination_country: str = Field(min_length=2)
    travel_month: int = Field(ge=1, le=12)
    currency: str = Field(min_length=3)
    duration: int = Field(ge=1, le=30)
    budget: int = Field(ge=1)
    preferences: List[str] = Field(min_length=1)
    status: TripStatus = TripStatus.upcoming
    budget_itinerary: Optional[ItinerarySchema] = None
    experience_itinerary: Optional[ItinerarySchema] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def to_fields(self) -> Dict[str, Any]:
        return _trip_fields(self.model_dump(exclude_unset=False))


class TripUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    origin_airport: Optional[str] = Field(None, min_length=3)
    destination_country: Optional[str] = Field(None, min_length=2)
    travel_month: Optional[int] = Field(None, ge=1, le=12)
    currency: Optional[str] = Field(None, min_length=3)
    duration: Optional[int] = Field(None, ge=1, le=30)
    budget: Optional[int] = Field(None, ge=1)
    preferences: Optional[List[str]] = Field(None, min_length=1)
    status: Optional[TripStatus] = None
    budget_itinerary: Optional[ItinerarySchema] = None
    experience_itinerary: Optional[ItinerarySchema] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    # may be cleared with an explicit null; everything else is NOT NULL in storage
    NULLABLE: ClassVar[frozenset] = frozenset(
        {"budget_itinerary", "experience_itinerary", "start_date", "end_date"}
    )

    def explicit_nulls(self) -> List[str]:
        """camelCase names of non-nullable fields the caller sent as null."""
        fields = type(self).model_fields
        return [
            fields[name].alias or name
            for name in fields
            if name in self.model_fields_set and name not in self.NULLABLE and getattr(self, name) is None
        ]

    def to_fields(self) -> Dict[str, Any]:
        """Only the fields the caller actually sent."""
        return _trip_fields(self.model_dump(exclude_unset=True))


def _trip_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    # itineraries are stored as the camelCase JSON the client sees
    for key in ("budget_itinerary", "experience_itinerary"):
        if data.get(key) is not None:
            data[key] = ItinerarySchema.model_validate(data[key]).model_dump(by_alias=True)
    if isinstance(data.get("status"), TripStatus):
        data["status"] = data["status"].value
    return data


class TripSchema(CamelModel):
    id: int
    user_id: int
    name: str
    origin_airport: str
    destination_country: str
    travel_month: int
    currency: str
    duration: int
    budget: int
    preferences: List[str]
    status: str
    budget_itinerary: Optional[Dict[str, Any]] = None
    experience_itinerary: Optional[Dict[str, Any]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, obj: Trip) -> "TripSchema":
        return cls(
            id=obj.id,
            user_id=obj.user_id,
            name=obj.name,
            origin_airport=obj.origin_airport,
            destination_country=obj.destination_country,
            travel_month=obj.travel_month,
            currency=obj.currency,
            duration=obj.duration,
            budget=obj.budget,
            preferences=list(obj.preferences),
            status=obj.status,
            budget_itinerary=obj.budget_itinerary,
            experience_itinerary=obj.experience_itinerary,
            start_date=obj.start_date,
            end_date=obj.end_date,
            created_at=obj.created_at,
        )


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


class UserSchema(CamelModel):
    id: int
    username: str
    email: str
    full_name: Optional[str] = None
    profile_picture: Optional[str] = None
    is_verified: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, obj: User) -> "UserSchema":
        return cls(
            id=obj.id,
            username=obj.username,
            email=obj.email,
            full_name=obj.full_name,
            profile_picture=obj.profile_picture,
            is_verified=obj.is_verified,
            created_at=obj.created_at,
        )


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=6, max_length=72)
    full_name: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)


class TokenSignInRequest(CamelModel):
    access_token: str = Field(min_length=1)


class VerifyEmailRequest(CamelModel):
    token: str = Field(min_length=1)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=6, max_length=72)
    confirm_password: str = Field(min_length=6, max_length=72)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and value != password:
            raise ValueError("Passwords do not match")
        return value


class AuthResponse(BaseModel):
    message: str
    user: UserSchema


class MessageResponse(BaseModel):
    message: str


class ContactRequest(CamelModel):
    name: str = Field(min_length=2)
    email: EmailStr
    phone: str = Field(min_length=10)
    message: str = Field(min_length=10)


class ContactResponse(BaseModel):
    message: str
    data: ContactRequest


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


class AirportSchema(CamelModel):
    code: str
    name: str
    is_philippine: bool = False

    @classmethod
    def from_domain(cls, obj: Airport) -> "AirportSchema":
        return cls(code=obj.code, name=obj.name, is_philippine=obj.is_philippine)


class CountrySchema(CamelModel):
    code: str
    name: str

    @classmethod
    def from_domain(cls, obj: Country) -> "CountrySchema":
        return cls(code=obj.code, name=obj.name)


class CurrencySchema(CamelModel):
    code: str
    name: str

    @classmethod
    def from_domain(cls, obj: Currency) -> "CurrencySchema":
        return cls(code=obj.code, name=obj.name)


class PreferenceSchema(CamelModel):
    code: str
    name: str
    icon: Optional[str] = None

    @classmethod
    def from_domain(cls, obj: Preference) -> "PreferenceSchema":
        return cls(code=obj.code, name=obj.name, icon=obj.icon)


class CitySchema(CamelModel):
    code: str
    name: str
    country_code: str

    @classmethod
    def from_domain(cls, obj: City) -> "CitySchema":
        return cls(code=obj.code, name=obj.name, country_code=obj.country_code)
