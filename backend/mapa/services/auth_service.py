import logging
import random
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt

from mapa.core.config import Settings
from mapa.core.errors import BadRequestError, Unauthenticated
from mapa.models.domain import IdentityProvider, ProviderIdentity, User
from mapa.models.schemas import RegisterRequest
from mapa.services.email_service import EmailSender
from mapa.storage.repository import Repository

logger = logging.getLogger(__name__)

VERIFICATION_TTL = timedelta(hours=48)
RESET_TTL = timedelta(hours=24)


def generate_token() -> str:
    return secrets.token_hex(32)


def utcnow() -> datetime:
    # naive UTC, matching what sqlite hands back
    return datetime.now(timezone.utc).replace(tzinfo=None)


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


def _expired(expires: Optional[datetime]) -> bool:
    if expires is None:
        return True
    if expires.tzinfo is not None:
        expires = expires.astimezone(timezone.utc).replace(tzinfo=None)
    return expires < utcnow()


class AuthService:
    """Local accounts, OAuth identity resolution and the token-based email flows."""

    def __init__(self, repository: Repository, email: EmailSender, settings: Settings):
        self.repository = repository
        self.email = email
        self.settings = settings

    def register(self, payload: RegisterRequest) -> User:
        if self.repository.get_user_by_email(payload.email):
            raise BadRequestError("Email already in use")
        if self.repository.get_user_by_username(payload.username):
            raise BadRequestError("Username already taken")

        token = generate_token()
        user = self.repository.create_user(
            username=payload.username,
            email=payload.email,
            password=hash_password(payload.password, self.settings.bcrypt_rounds),
            full_name=payload.full_name,
            is_verified=False,
            verification_token=token,
            verification_token_expires=utcnow() + VERIFICATION_TTL,
        )
        if not self.email.send_verification(user, token):
            logger.warning("Verification email for user %s was not sent", user.id)
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.repository.get_user_by_email(email)
        if user is None:
            raise Unauthenticated("Incorrect email or password")
        if not user.password:
            raise Unauthenticated("Please log in with your social account")
        if not check_password(password, user.password):
            raise Unauthenticated("Incorrect email or password")
        return user

    def resolve_oauth_user(self, identity: ProviderIdentity) -> User:
        """Find or create the account behind an external identity.

        Lookup order is provider id, then email (linking the provider id to
        the existing account), then a brand new account.
        """
        if identity.provider == IdentityProvider.local:
            raise ValueError("local identities log in with a password")
        id_field = f"{identity.provider.value}_id"

        user = self.repository.get_user_by_provider_id(identity.provider, identity.provider_id)
        if user is not None:
            return user

        if identity.email:
            user = self.repository.get_user_by_email(identity.email)
            if user is not None:
                updates = {id_field: identity.provider_id}
                if not user.profile_picture and identity.profile_picture:
                    updates["profile_picture"] = identity.profile_picture
                logger.info("Linking %s account to existing user %s", identity.provider.value, user.id)
                return self.repository.update_user(user.id, **updates)

        username = self._unique_username(identity)
        user = self.repository.create_user(
            username=username,
            email=identity.email or f"{username}@{identity.provider.value}.user",
            full_name=identity.display_name,
            profile_picture=identity.profile_picture,
            is_verified=True,
            provider_data=identity.raw_profile,
            **{id_field: identity.provider_id},
        )
        logger.info("Created user %s from %s profile", user.id, identity.provider.value)
        return user

    def _unique_username(self, identity: ProviderIdentity) -> str:
        base = identity.display_name or (identity.email or "").split("@")[0] or identity.provider.value
        base = re.sub(r"[^a-z0-9]", "", base.lower()) or identity.provider.value
        while True:
            candidate = f"{base}{random.randint(0, 9999)}"
            if self.repository.get_user_by_username(candidate) is None:
                return candidate

    def verify_email(self, token: str) -> User:
        user = self.repository.get_user_by_verification_token(token)
        if user is None or _expired(user.verification_token_expires):
            raise BadRequestError("Invalid or expired verification token")
        user = self.repository.update_user(
            user.id, is_verified=True, verification_token=None, verification_token_expires=None
        )
        self.email.send_welcome(user)
        return user

    def request_password_reset(self, email: str) -> None:
        user = self.repository.get_user_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return
        token = generate_token()
        user = self.repository.update_user(
            user.id, reset_password_token=token, reset_password_expires=utcnow() + RESET_TTL
        )
        if not self.email.send_password_reset(user, token):
            logger.warning("Password reset email for user %s was not sent", user.id)

    def reset_password(self, token: str, password: str) -> User:
        user = self.repository.get_user_by_reset_token(token)
        if user is None or _expired(user.reset_password_expires):
            raise BadRequestError("Invalid or expired reset token")
        return self.repository.update_user(
            user.id,
            password=hash_password(password, self.settings.bcrypt_rounds),
            reset_password_token=None,
            reset_password_expires=None,
        )
