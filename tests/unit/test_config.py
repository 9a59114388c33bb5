"""Tests for application configuration."""

import pytest

from yalla_souq.auth.mock_provider import MockSessionProvider
from yalla_souq.auth.supabase_client import SupabaseAuthClient, create_supabase_client
from yalla_souq.core.config import AppConfig, SupabaseConfig
from yalla_souq.core.exceptions import ConfigurationError


class TestAppConfig:
    """Test cases for AppConfig."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("USE_MOCK_DATA", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        config = AppConfig(_env_file=None)

        assert config.use_mock_data is False
        assert config.is_development is True
        assert config.auth.max_login_attempts == 5
        assert config.auth.lockout_minutes == 15

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("USE_MOCK_DATA", "true")
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("AUTH_ADMIN_EMAIL", "ops@yallasouq.ps")
        monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
        config = AppConfig(_env_file=None)

        assert config.use_mock_data is True
        assert config.is_development is False
        assert config.auth.admin_email == "ops@yallasouq.ps"
        assert config.supabase.url == "https://demo.supabase.co"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("DEBUG", "debug"), ("warning", "warn"), ("ERROR", "error"), ("chatty", "info")],
    )
    def test_log_level_is_normalized(self, raw, expected):
        assert AppConfig(log_level=raw, _env_file=None).log_level == expected

    def test_cors_origins_from_env(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://yallasouq.ps", "http://localhost:3000"]')

        assert AppConfig(_env_file=None).cors_origins == ["https://yallasouq.ps", "http://localhost:3000"]


class TestSessionProviderSelection:
    """Test cases for choosing the session provider."""

    def test_missing_url(self):
        with pytest.raises(ConfigurationError):
            create_supabase_client(SupabaseConfig(url=None, anon_key="anon"))

    def test_missing_key(self):
        with pytest.raises(ConfigurationError):
            create_supabase_client(SupabaseConfig(url="https://demo.supabase.co", anon_key=None, service_key=None))

    def test_service_key_fallback(self):
        client = create_supabase_client(
            SupabaseConfig(url="https://demo.supabase.co/", anon_key=None, service_key="service")
        )

        assert isinstance(client, SupabaseAuthClient)
        assert client.api_key == "service"
        assert client.url == "https://demo.supabase.co"

    def test_container_uses_mock_provider_in_demo_mode(self, test_config):
        from yalla_souq.core.di_container import DIContainer

        container = DIContainer()
        container.config.override(test_config)
        try:
            assert isinstance(container.session_provider(), MockSessionProvider)
        finally:
            container.config.reset_override()


class TestAdRepositorySelection:
    """The ads and categories store follows USE_MOCK_DATA."""

    def test_demo_mode_uses_the_mock_store(self, test_config):
        from yalla_souq.core.di_container import DIContainer

        container = DIContainer()
        container.config.override(test_config)
        try:
            assert container.ad_repository() is container.mock_store()
        finally:
            container.config.reset_override()

    def test_supabase_mode_shares_the_auth_client(self):
        from yalla_souq.core.di_container import DIContainer
        from yalla_souq.store.supabase_repository import SupabaseAdRepository

        config = AppConfig(
            _env_file=None,
            use_mock_data=False,
            supabase=SupabaseConfig(url="https://demo.supabase.co", anon_key="anon"),
        )
        container = DIContainer()
        container.config.override(config)
        try:
            repository = container.ad_repository()

            assert isinstance(repository, SupabaseAdRepository)
            assert repository._auth is container.session_provider()
            assert repository._auth.app_logger is container.app_logger()
        finally:
            container.config.reset_override()
