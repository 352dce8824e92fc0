"""Authentication API endpoints."""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from authgate.dependencies import get_auth_service, get_bearer_token, get_current_user
from authgate.schemas.auth import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RequestResetRequest,
    ResetPasswordRequest,
    ResetTicketResponse,
    UserResponse,
)
from authgate.services.auth import AuthService, PublicUser

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["Authentication"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)


@router.post("/register", response_model=AuthResponse)
def register(body: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)) -> AuthResponse:
    """Register a new user account and open a session."""
    result = auth_service.register(body.email, body.password, body.name, body.role)
    return AuthResponse(**asdict(result))


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, auth_service: AuthService = Depends(get_auth_service)) -> AuthResponse:
    """Authenticate and receive a session token."""
    result = auth_service.login(body.email, body.password)
    return AuthResponse(**asdict(result))


@router.post("/logout", response_model=MessageResponse)
def logout(
    token: str | None = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    """End the session named by the bearer token. Always succeeds."""
    return MessageResponse(**asdict(auth_service.logout(token)))


@router.get("/me", response_model=UserResponse)
def me(user: PublicUser = Depends(get_current_user)) -> UserResponse:
    """Return the user behind the current session."""
    return UserResponse(**asdict(user))


@router.post("/request-reset", response_model=ResetTicketResponse)
def request_password_reset(
    body: RequestResetRequest, auth_service: AuthService = Depends(get_auth_service)
) -> ResetTicketResponse:
    """Start a password reset. The reset token is returned in the response."""
    return ResetTicketResponse(**asdict(auth_service.request_password_reset(body.email)))


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(
    body: ResetPasswordRequest, auth_service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """Set a new password with a valid reset token."""
    return MessageResponse(**asdict(auth_service.reset_password(body.token, body.password)))
