"""Configuration settings for Authgate."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./authgate.db")

    # Sessions and password reset
    SESSION_TTL_HOURS: int = int(os.getenv("SESSION_TTL_HOURS", "24"))
    RESET_TOKEN_TTL_MINUTES: int = int(os.getenv("RESET_TOKEN_TTL_MINUTES", "60"))
    TOKEN_BYTES: int = int(os.getenv("TOKEN_BYTES", "32"))

    # Password hashing
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        errors = []
        if self.BCRYPT_ROUNDS < 10:
            errors.append(f"BCRYPT_ROUNDS={self.BCRYPT_ROUNDS} is below 10 - password hashes are cheap to brute-force")
        if self.TOKEN_BYTES < 16:
            errors.append(f"TOKEN_BYTES={self.TOKEN_BYTES} is below 16 - tokens may be guessable")
        if self.SESSION_TTL_HOURS <= 0:
            errors.append("SESSION_TTL_HOURS must be positive - sessions expire immediately")
        if self.RESET_TOKEN_TTL_MINUTES <= 0:
            errors.append("RESET_TOKEN_TTL_MINUTES must be positive - reset tokens expire immediately")
        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
