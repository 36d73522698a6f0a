"""
Application configuration using Pydantic settings.

Usage:
    from core.config import get_settings
    settings = get_settings()
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables and .env file.

    Required for production:
        - JWT_SECRET_KEY (min 32 chars)
        - PAT_TOKEN (for authenticated GitHub API requests)
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = Field(default="DevConnector Profiles", validation_alias="APP_NAME")
    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    max_request_size_mb: int = Field(default=1, validation_alias="MAX_REQUEST_SIZE_MB")

    # Database
    database_url: str = Field(default="sqlite:///profiles.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")
    auto_create_tables: bool = Field(default=True, validation_alias="AUTO_CREATE_TABLES")

    # JWT / Authentication
    jwt_secret_key: str = Field(default="CHANGE_ME", validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # GitHub
    github_api_base: str = Field(default="https://api.github.com", validation_alias="GITHUB_API_BASE")
    pat_token: Optional[str] = Field(default=None, validation_alias="PAT_TOKEN")
    github_repo_count: int = Field(default=5, validation_alias="GITHUB_REPO_COUNT")
    github_timeout: float = Field(default=10.0, validation_alias="GITHUB_TIMEOUT")

    # CORS
    cors_allowed_origins: str = Field(default="http://localhost:3000", validation_alias="CORS_ALLOWED_ORIGINS")

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Reject weak JWT secrets in production, warn elsewhere."""
        import os
        import warnings

        env = os.getenv("ENV", "development")
        is_production = env.lower() in ("production", "prod")

        forbidden_values = ["CHANGE_ME", "changeme", "secret", "jwtsecret", "mysecrettoken"]
        is_forbidden = v.lower() in [fv.lower() for fv in forbidden_values]

        if is_production:
            if is_forbidden:
                raise ValueError(f"JWT_SECRET_KEY cannot be a default value ('{v}') in production.")
            if len(v) < 32:
                raise ValueError(
                    f"JWT_SECRET_KEY must be at least 32 characters in production (got {len(v)})."
                )
        elif is_forbidden:
            warnings.warn(
                f"JWT_SECRET_KEY is set to a default value ('{v}'). "
                "Set a proper key for production.",
                UserWarning,
                stacklevel=2,
            )

        return v

    @field_validator("github_repo_count")
    @classmethod
    def validate_repo_count(cls, v: int) -> int:
        # GitHub caps per_page at 100
        if not 1 <= v <= 100:
            raise ValueError("GITHUB_REPO_COUNT must be between 1 and 100")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
