"""Dependency wiring for FastAPI routes.

The auth service is assembled per request from its collaborators; only the
stateless collaborators are cached.
"""

from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from authgate.config import get_settings
from authgate.database import get_db
from authgate.services.auth import AuthService, PublicUser
from authgate.services.credentials import CredentialCodec
from authgate.services.gateway import SqlAlchemyGateway
from authgate.services.tokens import TokenIssuer
from authgate.services.validation import InputValidator


@lru_cache
def get_credential_codec() -> CredentialCodec:
    return CredentialCodec(rounds=get_settings().BCRYPT_ROUNDS)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(nbytes=get_settings().TOKEN_BYTES)


@lru_cache
def get_input_validator() -> InputValidator:
    return InputValidator()


def get_auth_service(
    db: Session = Depends(get_db),
    codec: CredentialCodec = Depends(get_credential_codec),
    issuer: TokenIssuer = Depends(get_token_issuer),
    validator: InputValidator = Depends(get_input_validator),
) -> AuthService:
    """Build an AuthService bound to this request's database session."""
    return AuthService(
        gateway=SqlAlchemyGateway(db),
        codec=codec,
        issuer=issuer,
        validator=validator,
        settings=get_settings(),
    )


def get_bearer_token(request: Request) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(
    token: str | None = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> PublicUser:
    """Resolve the bearer session token to a user. Raises AuthError (401) if invalid or expired."""
    return auth_service.authenticate(token)
