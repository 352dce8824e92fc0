"""User model."""

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from authgate.database import Base, utcnow

ROLES = ("user", "admin")
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"


class User(Base):
    """Application user.

    A pending password reset lives on the row itself: ``reset_token`` is set
    only while a reset is outstanding and always together with
    ``reset_token_expires_at``.
    """

    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    password_hash = Column(String(256), nullable=False)
    name = Column(String(256), nullable=False)
    role = Column(String(16), nullable=False, default="user", server_default="user")
    status = Column(String(16), nullable=False, default=STATUS_ACTIVE, server_default=STATUS_ACTIVE)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    last_login_at = Column(DateTime, nullable=True)
    reset_token = Column(String(256), nullable=True, index=True)
    reset_token_expires_at = Column(DateTime, nullable=True)

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
