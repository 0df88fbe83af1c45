from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class TripStatus(str, Enum):
    upcoming = "upcoming"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"


class IdentityProvider(str, Enum):
    local = "local"
    google = "google"
    facebook = "facebook"


@dataclass
class User:
    id: int
    username: str
    email: str
    password: Optional[str] = None
    full_name: Optional[str] = None
    profile_picture: Optional[str] = None
    google_id: Optional[str] = None
    facebook_id: Optional[str] = None
    provider_data: Optional[Dict[str, Any]] = None
    is_verified: bool = False
    verification_token: Optional[str] = None
    verification_token_expires: Optional[datetime] = None
    reset_password_token: Optional[str] = None
    reset_password_expires: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def greeting_name(self) -> str:
        return self.full_name or self.username


@dataclass
class Trip:
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
    status: str = TripStatus.upcoming.value
    budget_itinerary: Optional[Dict[str, Any]] = None
    experience_itinerary: Optional[Dict[str, Any]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass
class Airport:
    code: str
    name: str
    is_philippine: bool = False


@dataclass
class Country:
    code: str
    name: str


@dataclass
class Currency:
    code: str
    name: str


@dataclass
class Preference:
    code: str
    name: str
    icon: Optional[str] = None


@dataclass
class City:
    code: str
    name: str
    country_code: str


@dataclass
class ProviderIdentity:
    """What every identity provider boils down to before user resolution."""

    provider: IdentityProvider
    provider_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    profile_picture: Optional[str] = None
    raw_profile: Dict[str, Any] = field(default_factory=dict)
