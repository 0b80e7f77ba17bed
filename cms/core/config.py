"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
    "postgres+psycopg2://",
)

# Only HMAC algorithms are accepted; "none" and asymmetric algorithms are never valid here.
ALLOWED_JWT_ALGORITHMS = ("HS256", "HS384", "HS512")

PROD_MIN_SECRET_LEN = 32


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # SQLite file by default; PostgreSQL is supported through psycopg2
    DATABASE_URL: str = "sqlite:///./cms.db"

    # Front-end origins allowed to send the session cookie
    CORS_ORIGINS: list[str] = ["http://localhost:5174"]

    # Session tokens. JWT_SECRET has no default: it must come from the environment.
    JWT_SECRET: SecretStr
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_TTL_SECONDS: int = 60 * 60 * 24 * 7

    # Password hashing cost (bcrypt log2 rounds)
    BCRYPT_ROUNDS: int = 12

    # Session cookie
    COOKIE_NAME: str = "access_token"
    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: Literal["lax", "strict", "none"] = "lax"

    # Logout records the token id in a deny-list until the token expires
    TOKEN_REVOCATION_ENABLED: bool = True

    # Purge of expired deny-list rows (run via cron or CLI)
    RETENTION_ENABLED: bool = True

    DEFAULT_WEBSITE_NAME: str = "CMSmall"

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.strip().startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:///./cms.db or postgresql://)"
            )
        return v.strip()

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            raise ValueError("API_PREFIX must start with '/' (e.g. /api)")
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value() or not v.get_secret_value().strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        return v

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        v = (v or "").strip().upper()
        if v not in ALLOWED_JWT_ALGORITHMS:
            raise ValueError(
                f"JWT_ALGORITHM must be one of {', '.join(ALLOWED_JWT_ALGORITHMS)}"
            )
        return v

    @field_validator("ACCESS_TOKEN_TTL_SECONDS")
    @classmethod
    def validate_access_token_ttl(cls, v: int) -> int:
        if v < 60 or v > 2592000:
            raise ValueError(
                "ACCESS_TOKEN_TTL_SECONDS must be between 60 and 2592000 (1 min to 30 days)"
            )
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        if v < 4 or v > 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("COOKIE_NAME")
    @classmethod
    def validate_cookie_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("COOKIE_NAME must be set and non-empty")
        return v.strip()

    @model_validator(mode="after")
    def validate_prod_requirements(self) -> "Settings":
        if self.APP_ENV != "prod":
            return self
        if len(self.JWT_SECRET.get_secret_value()) < PROD_MIN_SECRET_LEN:
            raise ValueError(
                f"JWT_SECRET must be at least {PROD_MIN_SECRET_LEN} characters in prod"
            )
        if self.COOKIE_SAMESITE == "none" and not self.COOKIE_SECURE:
            raise ValueError("COOKIE_SAMESITE=none requires COOKIE_SECURE=true")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()
