"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings
from functools import lru_cache

DEFAULT_JWT_SECRET = "default_secret"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Configuration
    app_env: str = "development"
    log_level: str = "INFO"
    api_prefix: str = "/api/admin"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Comma-separated list of allowed CORS origins (production only)
    cors_origins: str = ""

    # Storage
    database_path: Path = Path("data/shipdesk.db")
    database_timeout: float = 5.0  # seconds to wait on a locked database

    # Token signing
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Password hashing cost factor
    bcrypt_rounds: int = 10

    # Brute-force protection for /login
    login_rate_limit: str = "5/15minutes"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
