"""Normalize provider profiles into one :class:`ProviderIdentity` shape.

Only ``google`` and ``facebook`` come from outside; ``local`` accounts log in
with a password and never pass through here.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests

from mapa.core.errors import BadRequestError, Unauthenticated
from mapa.models.domain import IdentityProvider, ProviderIdentity

logger = logging.getLogger(__name__)


def _first_value(items: Any) -> Optional[str]:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0].get("value")
    return None


def from_google_profile(profile: Dict[str, Any]) -> ProviderIdentity:
    # OpenID userinfo uses sub/email/name/picture; passport-style profiles use id/emails/photos
    return ProviderIdentity(
        provider=IdentityProvider.google,
        provider_id=str(profile.get("sub") or profile["id"]),
        email=profile.get("email") or _first_value(profile.get("emails")),
        display_name=profile.get("name") or profile.get("displayName"),
        profile_picture=profile.get("picture") or _first_value(profile.get("photos")),
        raw_profile=profile,
    )


def from_facebook_profile(profile: Dict[str, Any]) -> ProviderIdentity:
    picture = profile.get("picture")
    if isinstance(picture, dict):
        picture = (picture.get("data") or {}).get("url")
    return ProviderIdentity(
        provider=IdentityProvider.facebook,
        provider_id=str(profile["id"]),
        email=profile.get("email") or _first_value(profile.get("emails")),
        display_name=profile.get("name") or profile.get("displayName"),
        profile_picture=picture or _first_value(profile.get("photos")),
        raw_profile=profile,
    )


NORMALIZERS: Dict[IdentityProvider, Callable[[Dict[str, Any]], ProviderIdentity]] = {
    IdentityProvider.google: from_google_profile,
    IdentityProvider.facebook: from_facebook_profile,
}

USERINFO_URLS = {
    IdentityProvider.google: "https://openidconnect.googleapis.com/v1/userinfo",
    IdentityProvider.facebook: "https://graph.facebook.com/me",
}


def normalize_profile(provider: IdentityProvider, profile: Dict[str, Any]) -> ProviderIdentity:
    try:
        normalizer = NORMALIZERS[provider]
    except KeyError:
        raise ValueError(f"{provider.value} is not an external identity provider") from None
    return normalizer(profile)


@dataclass
class ProviderProfileClient:
    """
    Trades a provider access token, obtained by the client, for the user's
    profile. Anything short of a usable profile is an authentication failure.
    """

    timeout: float = 10.0
    session: requests.Session = field(default_factory=requests.Session)

    def fetch_identity(self, provider: IdentityProvider, access_token: str) -> ProviderIdentity:
        if provider not in NORMALIZERS:
            raise BadRequestError(f"{provider.value} accounts cannot sign in with a token")

        params = {"fields": "id,name,email,picture"} if provider == IdentityProvider.facebook else None
        try:
            resp = self.session.get(
                USERINFO_URLS[provider],
                headers={"Authorization": f"Bearer {access_token}"},
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("%s profile request failed: %s", provider.value, exc)
            raise Unauthenticated(f"Could not verify {provider.value} sign-in") from exc

        if not resp.ok:
            logger.warning("%s rejected the access token: HTTP %s", provider.value, resp.status_code)
            raise Unauthenticated(f"Could not verify {provider.value} sign-in")
        try:
            profile = resp.json()
        except ValueError as exc:
            raise Unauthenticated(f"Could not verify {provider.value} sign-in") from exc
        if not isinstance(profile, dict) or not (profile.get("sub") or profile.get("id")):
            raise Unauthenticated(f"Could not verify {provider.value} sign-in")
        return normalize_profile(provider, profile)
