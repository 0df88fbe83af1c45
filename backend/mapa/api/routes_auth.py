from fastapi import APIRouter, Depends, status
from starlette.requests import Request

from mapa.api import (
    get_auth_service,
    get_current_user,
    get_profile_client,
    login_session,
    logout_session,
)
from mapa.models.domain import IdentityProvider, User
from mapa.models.schemas import (
    AuthResponse,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
    TokenSignInRequest,
    UserSchema,
    VerifyEmailRequest,
)
from mapa.services.auth_service import AuthService
from mapa.services.identity import ProviderProfileClient

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    user = service.register(payload)
    login_session(request, user)
    return AuthResponse(
        message="Registration successful. Please check your email to verify your account.",
        user=UserSchema.from_domain(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    user = service.authenticate(payload.email, payload.password)
    login_session(request, user)
    return AuthResponse(message="Login successful", user=UserSchema.from_domain(user))


@router.post("/auth/{provider}/token", response_model=AuthResponse)
def token_sign_in(
    provider: IdentityProvider,
    payload: TokenSignInRequest,
    request: Request,
    profiles: ProviderProfileClient = Depends(get_profile_client),
    service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    identity = profiles.fetch_identity(provider, payload.access_token)
    user = service.resolve_oauth_user(identity)
    login_session(request, user)
    return AuthResponse(message="Login successful", user=UserSchema.from_domain(user))


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request) -> MessageResponse:
    logout_session(request)
    return MessageResponse(message="Logged out successfully")


@router.get("/user", response_model=UserSchema)
def current_user(user: User = Depends(get_current_user)) -> UserSchema:
    return UserSchema.from_domain(user)


@router.post("/verify-email", response_model=MessageResponse)
def verify_email(
    payload: VerifyEmailRequest, service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    service.verify_email(payload.token)
    return MessageResponse(message="Email verified successfully")


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(
    payload: ForgotPasswordRequest, service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    service.request_password_reset(payload.email)
    return MessageResponse(
        message="If an account with that email exists, a password reset link has been sent."
    )


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    payload: ResetPasswordRequest, service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    service.reset_password(payload.token, payload.password)
    return MessageResponse(message="Password has been reset successfully")
