"""
Application configuration.

Loads settings from environment variables. The JWT signing secret has no
default: the service refuses to start without one.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from sfmanager.auth.errors import ServerConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 5000
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================================================
    # Authentication
    # ==========================================================================

    jwt_secret: str = ""  # JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def require_jwt_secret(self) -> str:
        """Return the signing secret, or raise if it is not configured."""
        secret = self.jwt_secret.strip()
        if not secret:
            raise ServerConfigurationError("JWT_SECRET is not set")
        return secret


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
