"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str
    role: str = "user"


class LoginRequest(BaseModel):
    email: str
    password: str


class RequestResetRequest(BaseModel):
    email: str


class ResetPasswordRequest(BaseModel):
    token: str
    password: str


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash or reset fields."""

    id: int
    email: str
    name: str
    role: str
    status: str
    last_login_at: datetime | None = None


class AuthResponse(BaseModel):
    token: str
    user: UserResponse


class MessageResponse(BaseModel):
    message: str


class ResetTicketResponse(BaseModel):
    message: str
    reset_token: str


class ErrorResponse(BaseModel):
    detail: str
    code: str
