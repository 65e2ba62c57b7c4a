"""Configuration settings for Taskboard."""

import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./taskboard.db")

    # Tokens
    TOKEN_BYTES: int = int(os.getenv("TOKEN_BYTES", "40"))

    # Passwords
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # CORS
    CORS_ORIGINS: list[str] = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if origin.strip()
    ]

    # Application
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        warnings = []
        if self.TOKEN_BYTES < 32:
            warnings.append("TOKEN_BYTES is below 32 - issued tokens are easier to guess")
        if self.BCRYPT_ROUNDS < 10 and self.APP_ENV == "production":
            warnings.append("BCRYPT_ROUNDS is below 10 in production")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
