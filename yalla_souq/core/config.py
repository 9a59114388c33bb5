"""Application configuration using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from yalla_souq.core.logging import normalize_level

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)


class SupabaseConfig(BaseSettings):
    """Supabase auth and database configuration."""

    url: str | None = None
    anon_key: str | None = None
    service_key: str | None = None
    timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(env_prefix="SUPABASE_")


class AuthConfig(BaseSettings):
    """Login lockout and permission settings."""

    max_login_attempts: int = 5
    lockout_minutes: int = 15
    admin_email: str = "admin@yallasouq.ps"
    mock_login_delay_ms: int = 1000

    model_config = SettingsConfigDict(env_prefix="AUTH_")


class MockStoreConfig(BaseSettings):
    """In-memory mock data store configuration."""

    delay_enabled: bool = True
    default_delay_ms: int = 300

    model_config = SettingsConfigDict(env_prefix="MOCK_")


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    app_name: str = "Yalla Souq"
    environment: str = "development"
    debug: bool = False
    log_level: str = "info"
    use_mock_data: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    site_url: str = "http://localhost:3000"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    mock: MockStoreConfig = Field(default_factory=MockStoreConfig)

    model_config = SettingsConfigDict(env_file=str(_env_file), env_file_encoding="utf-8", extra="ignore")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str | None) -> str:
        return normalize_level(None if value is None else str(value))

    @property
    def is_development(self) -> bool:
        """True when running with NODE_ENV-style ``development``."""
        return self.environment == "development"


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()
