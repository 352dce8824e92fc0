"""Authentication service.

Owns the account lifecycle: registration, login, logout, session checks and
the password reset flow. Collaborators are passed in explicitly; each call
runs as one gateway transaction so a failure never leaves a half-written
user or an orphan session behind.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from authgate import errors
from authgate.config import Settings, get_settings
from authgate.database import utcnow
from authgate.models.user import ROLES, STATUS_ACTIVE, User
from authgate.services.credentials import CredentialCodec
from authgate.services.gateway import DuplicateRecordError, PersistenceGateway
from authgate.services.tokens import TokenIssuer
from authgate.services.validation import InputValidator

logger = logging.getLogger("authgate")


@dataclass
class PublicUser:
    """User fields that are safe to hand back to a caller."""

    id: int
    email: str
    name: str
    role: str
    status: str
    last_login_at: datetime | None = None

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            status=user.status,
            last_login_at=user.last_login_at,
        )


@dataclass
class AuthResult:
    """A freshly issued session token and its owner."""

    token: str
    user: PublicUser


@dataclass
class ResetTicket:
    """Acknowledgement of a reset request, carrying the reset token."""

    message: str
    reset_token: str


@dataclass
class Acknowledgement:
    message: str


class AuthService:
    """Handles user registration, authentication and password resets."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        codec: CredentialCodec,
        issuer: TokenIssuer,
        validator: InputValidator,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.gateway = gateway
        self.codec = codec
        self.issuer = issuer
        self.validator = validator
        self.settings = settings or get_settings()
        self.clock = clock

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self.settings.SESSION_TTL_HOURS)

    @property
    def reset_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.RESET_TOKEN_TTL_MINUTES)

    def register(self, email: str, password: str, name: str, role: str = "user") -> AuthResult:
        """Create an account and open its first session."""
        if not self.validator.validate_email(email):
            raise errors.invalid_input("Invalid email format")
        if not self.validator.validate_password(password):
            raise errors.invalid_input(errors.PASSWORD_RULES_MESSAGE)
        if role not in ROLES:
            raise errors.invalid_input(f"Role must be one of: {', '.join(ROLES)}")

        try:
            with self.gateway.transaction():
                if self.gateway.find_user_by_email(email) is not None:
                    logger.warning("Registration rejected: email already registered")
                    raise errors.conflict()

                user = self.gateway.create_user(
                    email=email,
                    password_hash=self.codec.hash(password),
                    name=name,
                    role=role,
                    status=STATUS_ACTIVE,
                )
                token = self._open_session(user)
                public = PublicUser.from_user(user)
        except DuplicateRecordError as exc:
            logger.warning("Registration lost a race on a unique constraint")
            raise errors.conflict() from exc

        logger.info("Registered user id=%s role=%s", public.id, public.role)
        return AuthResult(token=token, user=public)

    def login(self, email: str, password: str) -> AuthResult:
        """Check credentials and open a new session.

        Unknown email and wrong password fail with the same error, and both
        paths pay for one bcrypt check.
        """
        with self.gateway.transaction():
            user = self.gateway.find_user_by_email(email)
            if user is None:
                self.codec.dummy_verify(password)
                logger.warning("Login failed: invalid credentials")
                raise errors.unauthorized()

            if user.status != STATUS_ACTIVE:
                logger.warning("Login refused for user id=%s: status=%s", user.id, user.status)
                raise errors.forbidden()

            if not self.codec.verify(password, user.password_hash):
                logger.warning("Login failed: invalid credentials")
                raise errors.unauthorized()

            token = self._open_session(user)
            user = self.gateway.update_user(user.id, last_login_at=self.clock())
            public = PublicUser.from_user(user)

        logger.info("User id=%s logged in", public.id)
        return AuthResult(token=token, user=public)

    def logout(self, token: str | None) -> Acknowledgement:
        """Drop every session bound to the token. Unknown tokens are fine."""
        if token:
            with self.gateway.transaction():
                deleted = self.gateway.delete_sessions_by_token(token)
            logger.info("Logout removed %d session(s)", deleted)
        return Acknowledgement(message="Logged out successfully")

    def authenticate(self, token: str | None) -> PublicUser:
        """Resolve a session token to its user, enforcing the stored expiry."""
        if not token:
            raise errors.unauthorized("Not authenticated")

        session = self.gateway.find_session_by_token(token)
        if session is None:
            raise errors.unauthorized("Invalid or expired session")

        if session.expires_at <= self.clock():
            with self.gateway.transaction():
                self.gateway.delete_sessions_by_token(token)
            logger.info("Expired session for user id=%s discarded", session.user_id)
            raise errors.unauthorized("Invalid or expired session")

        user = self.gateway.find_user_by_id(session.user_id)
        if user is None or user.status != STATUS_ACTIVE:
            raise errors.unauthorized("Invalid or expired session")
        return PublicUser.from_user(user)

    def purge_expired_sessions(self) -> int:
        """Delete every session past its expiry. Returns how many went."""
        with self.gateway.transaction():
            purged = self.gateway.delete_expired_sessions(self.clock())
        logger.info("Purged %d expired session(s)", purged)
        return purged

    def request_password_reset(self, email: str) -> ResetTicket:
        """Start (or restart) a password reset for the account.

        A new request replaces any pending reset token for the user.
        """
        with self.gateway.transaction():
            user = self.gateway.find_user_by_email(email)
            if user is None:
                logger.warning("Password reset requested for unknown email")
                raise errors.not_found()

            reset_token = self.issuer.issue_reset_token()
            self.gateway.update_user(
                user.id,
                reset_token=reset_token,
                reset_token_expires_at=self.clock() + self.reset_token_ttl,
            )
            user_id = user.id

        logger.info("Password reset issued for user id=%s", user_id)
        # TODO: deliver the reset token by email instead of returning it to the requester.
        return ResetTicket(message="Password reset instructions sent", reset_token=reset_token)

    def reset_password(self, token: str, new_password: str) -> Acknowledgement:
        """Set a new password using a pending, unexpired reset token. Single use."""
        if not self.validator.validate_password(new_password):
            raise errors.invalid_input(errors.PASSWORD_RULES_MESSAGE)

        with self.gateway.transaction():
            now = self.clock()
            user = self.gateway.find_user_by_valid_reset_token(token, now) if token else None
            if user is None:
                logger.warning("Password reset rejected: invalid or expired token")
                raise errors.expired_or_invalid_token()

            consumed = self.gateway.consume_reset_token(
                user.id,
                token,
                now,
                password_hash=self.codec.hash(new_password),
            )
            if not consumed:
                logger.warning("Password reset for user id=%s lost a race on its token", user.id)
                raise errors.expired_or_invalid_token()
            user_id = user.id

        logger.info("Password reset completed for user id=%s", user_id)
        return Acknowledgement(message="Password reset successful")

    def _open_session(self, user: User) -> str:
        token = self.issuer.issue_session_token()
        self.gateway.create_session(user.id, token, self.clock() + self.session_ttl)
        return token
