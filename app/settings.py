"""Application settings and configuration."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.auth.entities import TokenSettings


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables or a ``.env``
    file. Example: DATABASE_URL, JWT_SECRET_KEY, LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application settings
    debug: bool = Field(False)
    environment: str = Field("development")
    host: str = Field("0.0.0.0")
    port: int = Field(8000)

    # API settings
    api_title: str = Field("Auth Module API")
    api_version: str = Field("1.0.0")
    api_description: str = Field("Username/password authentication with bearer tokens")
    api_v1_prefix: str = Field("/api/v1")

    # Database settings
    database_url: str = Field(
        "sqlite+aiosqlite:///./auth.db",
        description="Async SQLAlchemy database URL",
    )

    # JWT settings
    jwt_secret_key: str = Field(
        "change-me-this-signing-secret-must-span-32-bytes",
        description="HMAC secret for access tokens, at least 32 bytes",
    )
    jwt_issuer: str = Field("AuthModule")
    jwt_audience: str = Field("AuthModuleUsers")
    jwt_algorithm: str = Field("HS256")
    jwt_access_token_expire_minutes: int = Field(60)

    # Refresh token settings
    remember_me_refresh_token_days: int = Field(30)
    rotated_refresh_token_days: int = Field(7)

    # Security settings
    bcrypt_rounds: int = Field(12)
    password_hash_workers: int = Field(4)

    # CORS settings
    allowed_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )

    # Logging settings
    log_level: str = Field("INFO")
    log_format: str = Field("json", description="Log format (json or text)")
    log_dir: str = Field("logs")

    # Seed accounts created at startup when a password is configured
    seed_admin_username: str = Field("admin")
    seed_admin_email: str = Field("admin@example.com")
    seed_admin_password: Optional[str] = Field(None)
    seed_user_username: str = Field("user")
    seed_user_email: str = Field("user@example.com")
    seed_user_password: Optional[str] = Field(None)

    @property
    def sync_database_url(self) -> str:
        """Database URL with the async driver swapped for its sync default."""
        return self.database_url.replace("+aiosqlite", "").replace("+asyncpg", "")

    def token_settings(self) -> TokenSettings:
        """
        Build the immutable signing configuration.

        Raises:
            ConfigurationException: If the JWT settings are unusable
        """
        return TokenSettings(
            secret_key=self.jwt_secret_key,
            issuer=self.jwt_issuer,
            audience=self.jwt_audience,
            algorithm=self.jwt_algorithm,
            access_token_expire_minutes=self.jwt_access_token_expire_minutes,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Singleton settings instance
    """
    return Settings()
