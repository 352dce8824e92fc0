"""Persistence gateway for users and sessions.

The auth service only talks to storage through the ``PersistenceGateway``
protocol. ``SqlAlchemyGateway`` is the implementation backed by a SQLAlchemy
session; its methods flush but never commit, so every write made inside
``transaction()`` lands or rolls back together.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from authgate.models.session import UserSession
from authgate.models.user import User


class DuplicateRecordError(Exception):
    """A write collided with a unique constraint (email or session token)."""


class PersistenceGateway(Protocol):
    """Storage contract consumed by the auth service."""

    def transaction(self) -> Any: ...

    def find_user_by_email(self, email: str) -> User | None: ...

    def find_user_by_id(self, user_id: int) -> User | None: ...

    def find_user_by_valid_reset_token(self, token: str, now: datetime) -> User | None: ...

    def create_user(self, **fields: Any) -> User: ...

    def update_user(self, user_id: int, **fields: Any) -> User: ...

    def consume_reset_token(self, user_id: int, token: str, now: datetime, **fields: Any) -> bool: ...

    def create_session(self, user_id: int, token: str, expires_at: datetime) -> UserSession: ...

    def find_session_by_token(self, token: str) -> UserSession | None: ...

    def delete_sessions_by_token(self, token: str) -> int: ...

    def delete_expired_sessions(self, now: datetime) -> int: ...


class SqlAlchemyGateway:
    """PersistenceGateway over a SQLAlchemy ORM session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit everything done in the block, or roll it all back."""
        try:
            yield
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateRecordError(str(exc.orig)) from exc
        except Exception:
            self.db.rollback()
            raise

    def find_user_by_email(self, email: str) -> User | None:
        return self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def find_user_by_id(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def find_user_by_valid_reset_token(self, token: str, now: datetime) -> User | None:
        """Return the user holding this reset token, if it expires after ``now``."""
        stmt = select(User).where(
            User.reset_token == token,
            User.reset_token_expires_at.is_not(None),
            User.reset_token_expires_at > now,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def create_user(self, **fields: Any) -> User:
        user = User(**fields)
        self.db.add(user)
        self.db.flush()
        return user

    def update_user(self, user_id: int, **fields: Any) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise LookupError(f"user {user_id} does not exist")
        for key, value in fields.items():
            setattr(user, key, value)
        self.db.flush()
        return user

    def consume_reset_token(self, user_id: int, token: str, now: datetime, **fields: Any) -> bool:
        """Apply ``fields`` and clear the reset token, only if it still matches and is unexpired.

        Returns False when another request consumed or replaced the token first.
        """
        stmt = (
            update(User)
            .where(
                User.id == user_id,
                User.reset_token == token,
                User.reset_token_expires_at > now,
            )
            .values(reset_token=None, reset_token_expires_at=None, **fields)
            .execution_options(synchronize_session="fetch")
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def create_session(self, user_id: int, token: str, expires_at: datetime) -> UserSession:
        session = UserSession(user_id=user_id, token=token, expires_at=expires_at)
        self.db.add(session)
        self.db.flush()
        return session

    def find_session_by_token(self, token: str) -> UserSession | None:
        return self.db.execute(select(UserSession).where(UserSession.token == token)).scalar_one_or_none()

    def delete_sessions_by_token(self, token: str) -> int:
        result = self.db.execute(
            delete(UserSession).where(UserSession.token == token).execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def delete_expired_sessions(self, now: datetime) -> int:
        result = self.db.execute(
            delete(UserSession).where(UserSession.expires_at <= now).execution_options(synchronize_session="fetch")
        )
        return result.rowcount
