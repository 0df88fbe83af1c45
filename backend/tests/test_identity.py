import pytest
import requests

from conftest import FakeResponse, FakeSession
from mapa.core.errors import Unauthenticated
from mapa.models.domain import IdentityProvider, ProviderIdentity
from mapa.services.auth_service import AuthService
from mapa.services.identity import (
    ProviderProfileClient,
    from_facebook_profile,
    from_google_profile,
    normalize_profile,
)


@pytest.fixture
def service(repository, email_sender, test_settings):
    return AuthService(repository=repository, email=email_sender, settings=test_settings)


def test_google_userinfo_profile():
    identity = from_google_profile(
        {"sub": "1234", "email": "ana@gmail.com", "name": "Ana Reyes", "picture": "http://pic/ana"}
    )

    assert identity.provider == IdentityProvider.google
    assert identity.provider_id == "1234"
    assert identity.email == "ana@gmail.com"
    assert identity.display_name == "Ana Reyes"
    assert identity.profile_picture == "http://pic/ana"


def test_passport_style_profile():
    identity = from_google_profile(
        {"id": 99, "displayName": "Ana", "emails": [{"value": "ana@gmail.com"}], "photos": [{"value": "p.png"}]}
    )

    assert identity.provider_id == "99"
    assert identity.email == "ana@gmail.com"
    assert identity.profile_picture == "p.png"


def test_facebook_profile_with_nested_picture():
    identity = from_facebook_profile({"id": "fb-7", "name": "Ben", "picture": {"data": {"url": "http://fb/ben"}}})

    assert identity.provider == IdentityProvider.facebook
    assert identity.email is None
    assert identity.profile_picture == "http://fb/ben"


def test_local_is_not_an_external_provider():
    with pytest.raises(ValueError):
        normalize_profile(IdentityProvider.local, {})


def test_new_identity_creates_a_verified_user(service, repository):
    identity = ProviderIdentity(IdentityProvider.google, "g-1", "ana@gmail.com", "Ana Reyes", "http://pic/ana")

    user = service.resolve_oauth_user(identity)

    assert user.google_id == "g-1"
    assert user.is_verified is True
    assert user.password is None
    assert user.username.startswith("anareyes")
    assert user.username[len("anareyes"):].isdigit()
    assert service.resolve_oauth_user(identity).id == user.id
    assert len(repository.users) == 1


def test_identity_links_to_existing_email(service, repository):
    existing = repository.create_user(username="ana", email="ana@gmail.com", password="x")
    identity = ProviderIdentity(IdentityProvider.facebook, "fb-1", "ana@gmail.com", "Ana", "http://fb/ana")

    user = service.resolve_oauth_user(identity)

    assert user.id == existing.id
    assert user.facebook_id == "fb-1"
    assert user.profile_picture == "http://fb/ana"
    assert len(repository.users) == 1


def test_identity_without_email_gets_a_placeholder(service):
    user = service.resolve_oauth_user(ProviderIdentity(IdentityProvider.facebook, "fb-2", None, "Ben Cruz"))

    assert user.email == f"{user.username}@facebook.user"
    assert user.facebook_id == "fb-2"


def test_token_sign_in_with_google(client, profile_session, repository):
    profile_session.response = FakeResponse(
        body={"sub": "g-1", "email": "ana@gmail.com", "name": "Ana Reyes", "picture": "http://pic/ana"}
    )

    resp = client.post("/api/auth/google/token", json={"accessToken": "tok-1"})

    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "ana@gmail.com"
    assert client.get("/api/user").json()["username"].startswith("anareyes")
    sent = profile_session.requests[0]
    assert sent["url"] == "https://openidconnect.googleapis.com/v1/userinfo"
    assert sent["headers"] == {"Authorization": "Bearer tok-1"}
    assert sent["params"] is None
    assert len(repository.users) == 1


def test_token_sign_in_with_facebook_links_by_email(client, profile_session, repository):
    existing = repository.create_user(username="ben", email="ben@example.com", password="x")
    profile_session.response = FakeResponse(
        body={"id": "fb-9", "email": "ben@example.com", "picture": {"data": {"url": "http://fb/ben"}}}
    )

    resp = client.post("/api/auth/facebook/token", json={"accessToken": "tok-2"})

    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == existing.id
    assert profile_session.requests[0]["params"] == {"fields": "id,name,email,picture"}
    assert repository.get_user(existing.id).facebook_id == "fb-9"


def test_rejected_token_does_not_sign_in(client, repository):
    resp = client.post("/api/auth/google/token", json={"accessToken": "expired"})

    assert resp.status_code == 401
    assert client.get("/api/user").status_code == 401
    assert repository.users == {}


@pytest.mark.parametrize("provider", ["local", "twitter"])
def test_token_sign_in_needs_an_external_provider(client, profile_session, provider):
    resp = client.post(f"/api/auth/{provider}/token", json={"accessToken": "tok"})

    assert resp.status_code == 400
    assert profile_session.requests == []


def test_blank_token_is_rejected_before_calling_out(client, profile_session):
    assert client.post("/api/auth/google/token", json={"accessToken": ""}).status_code == 400
    assert profile_session.requests == []


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.ConnectionError("dns")),
        FakeSession(FakeResponse(body=None, text="<html>")),
        FakeSession(FakeResponse(body={"email": "no-id@example.com"})),
    ],
)
def test_unusable_profile_is_unauthenticated(session):
    with pytest.raises(Unauthenticated):
        ProviderProfileClient(session=session).fetch_identity(IdentityProvider.google, "tok")
