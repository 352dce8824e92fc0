"""Pytest configuration and fixtures."""

import os

# Cheap bcrypt for the test run; must be set before settings are loaded.
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from datetime import datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from authgate.database import Base, get_db  # noqa: E402
from authgate.dependencies import get_credential_codec  # noqa: E402
from authgate.models.session import UserSession  # noqa: E402, F401
from authgate.models.user import User  # noqa: E402, F401
from authgate.services.auth import AuthService  # noqa: E402
from authgate.services.credentials import CredentialCodec  # noqa: E402
from authgate.services.gateway import SqlAlchemyGateway  # noqa: E402
from authgate.services.tokens import TokenIssuer  # noqa: E402
from authgate.services.validation import InputValidator  # noqa: E402


class FakeClock:
    """Controllable stand-in for the service clock."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture(name="db_session")
def db_session_fixture():
    """Create an in-memory SQLite database for tests."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="codec")
def codec_fixture() -> CredentialCodec:
    return CredentialCodec(rounds=4)


@pytest.fixture(name="clock")
def clock_fixture() -> FakeClock:
    return FakeClock(datetime(2026, 1, 15, 12, 0, 0))


@pytest.fixture(name="gateway")
def gateway_fixture(db_session: Session) -> SqlAlchemyGateway:
    return SqlAlchemyGateway(db_session)


@pytest.fixture(name="auth_service")
def auth_service_fixture(gateway: SqlAlchemyGateway, codec: CredentialCodec, clock: FakeClock) -> AuthService:
    """AuthService over the test database with a controllable clock."""
    return AuthService(
        gateway=gateway,
        codec=codec,
        issuer=TokenIssuer(nbytes=32),
        validator=InputValidator(),
        clock=clock,
    )


@pytest.fixture(name="client")
def client_fixture(db_session: Session, codec: CredentialCodec):
    """Create a test client with overridden DB and codec dependencies."""
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_credential_codec] = lambda: codec
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(name="test_user")
def test_user_fixture(db_session: Session, codec: CredentialCodec):
    """Register a test user through the service and return its data and session token."""
    auth_service = AuthService(
        gateway=SqlAlchemyGateway(db_session),
        codec=codec,
        issuer=TokenIssuer(),
        validator=InputValidator(),
    )
    result = auth_service.register("test@example.com", "password123", "Test User")

    return {
        "user_id": result.user.id,
        "email": result.user.email,
        "name": result.user.name,
        "password": "password123",
        "token": result.token,
    }
