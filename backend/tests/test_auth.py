from datetime import timedelta

from conftest import PASSWORD, register
from mapa.services.auth_service import hash_password, utcnow


def _login(client, email="juan@example.com", password=PASSWORD):
    return client.post("/api/login", json={"email": email, "password": password})


def test_register_starts_a_session_and_sends_verification(client, repository, email_sender):
    user = register(client)

    assert user["username"] == "juan"
    assert user["fullName"] == "Juan"
    assert user["isVerified"] is False
    assert "password" not in user and "verificationToken" not in user
    assert client.get("/api/user").json()["id"] == user["id"]

    stored = repository.get_user(user["id"])
    assert stored.password != PASSWORD and stored.password.startswith("$2")
    assert stored.verification_token_expires > utcnow() + timedelta(hours=47)
    mail = email_sender.outbox[-1]
    assert mail["to"] == "juan@example.com"
    assert f"http://mapa.test/verify-email?token={stored.verification_token}" in mail["text"]


def test_duplicate_email_and_username(client, make_client):
    register(client)
    other = make_client()

    resp = other.post("/api/register", json={"username": "other", "email": "juan@example.com", "password": PASSWORD})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Email already in use"}

    resp = other.post("/api/register", json={"username": "juan", "email": "new@example.com", "password": PASSWORD})
    assert resp.status_code == 400
    assert resp.json() == {"message": "Username already taken"}


def test_register_validation(client):
    resp = client.post("/api/register", json={"username": "jd", "email": "bad", "password": "123"})

    assert resp.status_code == 400
    assert {e["path"] for e in resp.json()["errors"]} == {"username", "email", "password"}


def test_login_logout(client, make_client):
    register(client)
    client.post("/api/logout")
    assert client.get("/api/user").status_code == 401

    resp = _login(client)
    assert resp.status_code == 200
    assert resp.json()["user"]["email"] == "juan@example.com"
    assert client.get("/api/user").status_code == 200


def test_bad_credentials(client):
    register(client)
    client.post("/api/logout")

    for resp in (_login(client, password="wrong-password"), _login(client, email="nobody@example.com")):
        assert resp.status_code == 401
        assert resp.json() == {"message": "Incorrect email or password"}


def test_social_account_cannot_use_password(client, repository):
    repository.create_user(username="gina", email="gina@example.com", google_id="g-1", is_verified=True)

    resp = _login(client, email="gina@example.com")

    assert resp.status_code == 401
    assert resp.json() == {"message": "Please log in with your social account"}


def test_session_for_deleted_user_is_unauthenticated(client, repository):
    user = register(client)
    del repository.users[user["id"]]

    assert client.get("/api/user").status_code == 401


def test_verify_email(client, repository, email_sender):
    user = register(client)
    token = repository.get_user(user["id"]).verification_token

    resp = client.post("/api/verify-email", json={"token": token})

    assert resp.status_code == 200
    stored = repository.get_user(user["id"])
    assert stored.is_verified is True
    assert stored.verification_token is None
    assert email_sender.outbox[-1]["subject"] == "Welcome to MAPA AI!"
    assert client.post("/api/verify-email", json={"token": token}).status_code == 400


def test_expired_verification_token(client, repository):
    user = register(client)
    stored = repository.get_user(user["id"])
    repository.update_user(stored.id, verification_token_expires=utcnow() - timedelta(minutes=1))

    resp = client.post("/api/verify-email", json={"token": stored.verification_token})

    assert resp.status_code == 400
    assert repository.get_user(user["id"]).is_verified is False


def test_forgot_password_answers_the_same_either_way(client, repository, email_sender):
    register(client)
    sent_before = len(email_sender.outbox)

    unknown = client.post("/api/forgot-password", json={"email": "nobody@example.com"})
    assert len(email_sender.outbox) == sent_before
    known = client.post("/api/forgot-password", json={"email": "juan@example.com"})

    assert unknown.status_code == known.status_code == 200
    assert unknown.json() == known.json()
    stored = repository.get_user_by_email("juan@example.com")
    assert stored.reset_password_token
    assert f"reset-password?token={stored.reset_password_token}" in email_sender.outbox[-1]["text"]


def test_reset_password(client, repository):
    register(client)
    client.post("/api/forgot-password", json={"email": "juan@example.com"})
    token = repository.get_user_by_email("juan@example.com").reset_password_token

    resp = client.post(
        "/api/reset-password",
        json={"token": token, "password": "brand-new", "confirmPassword": "brand-new"},
    )

    assert resp.status_code == 200
    assert repository.get_user_by_email("juan@example.com").reset_password_token is None
    assert _login(client, password=PASSWORD).status_code == 401
    assert _login(client, password="brand-new").status_code == 200
    # a used token is gone
    resp = client.post(
        "/api/reset-password",
        json={"token": token, "password": "another1", "confirmPassword": "another1"},
    )
    assert resp.status_code == 400


def test_reset_password_mismatch(client):
    resp = client.post(
        "/api/reset-password",
        json={"token": "abc", "password": "brand-new", "confirmPassword": "different"},
    )

    assert resp.status_code == 400
    assert resp.json()["errors"] == [{"path": "confirmPassword", "message": "Passwords do not match"}]


def test_expired_reset_token(client, repository):
    user = register(client)
    repository.update_user(
        user["id"], reset_password_token="t0k3n", reset_password_expires=utcnow() - timedelta(seconds=1)
    )

    resp = client.post(
        "/api/reset-password",
        json={"token": "t0k3n", "password": "brand-new", "confirmPassword": "brand-new"},
    )

    assert resp.status_code == 400


def test_hash_password_round_trip():
    from mapa.services.auth_service import check_password

    hashed = hash_password("secret123", rounds=4)
    assert check_password("secret123", hashed)
    assert not check_password("secret124", hashed)
    assert not check_password("secret123", "not-a-hash")
