"""Dependency Injector based DI Container."""

from dependency_injector import containers, providers

from yalla_souq.core.config import get_config

# --- Factory Functions (defined before class to avoid NameError) ---


def _create_app_logger(config):
    """Create the process-wide leveled logger."""
    from yalla_souq.core.logging import AppLogger

    return AppLogger(level=config.log_level, is_development=config.is_development)


def _create_mock_store(config, app_logger):
    """Create the in-memory marketplace store."""
    from yalla_souq.store.mock_store import MockDataStore

    return MockDataStore(
        logger=app_logger,
        delay_enabled=config.mock.delay_enabled,
        default_delay_ms=config.mock.default_delay_ms,
    )


def _create_session_provider(config, app_logger):
    """Create the auth backend: offline mock or Supabase."""
    if config.use_mock_data:
        from yalla_souq.auth.mock_provider import MockSessionProvider

        return MockSessionProvider(delay_ms=config.auth.mock_login_delay_ms)

    from yalla_souq.auth.supabase_client import create_supabase_client

    return create_supabase_client(config.supabase, app_logger=app_logger)


def _create_profile_repository(config, session_provider):
    """Create the profile store matching the session provider."""
    if config.use_mock_data:
        from yalla_souq.auth.mock_provider import MockProfileRepository

        return MockProfileRepository()

    from yalla_souq.auth.supabase_client import SupabaseProfileRepository

    return SupabaseProfileRepository(session_provider)


def _create_ad_repository(config, mock_store, session_provider, app_logger):
    """Create the ads and categories store: the in-memory mock or Supabase tables."""
    if config.use_mock_data:
        return mock_store

    from yalla_souq.store.supabase_repository import SupabaseAdRepository

    return SupabaseAdRepository(session_provider, logger=app_logger)


def _create_auth_manager(config, session_provider, profile_repository, app_logger):
    """Create the auth state manager."""
    from yalla_souq.auth.manager import AuthManager

    return AuthManager(
        provider=session_provider,
        profiles=profile_repository,
        logger=app_logger,
        max_login_attempts=config.auth.max_login_attempts,
        lockout_minutes=config.auth.lockout_minutes,
        admin_email=config.auth.admin_email,
        site_url=config.site_url,
    )


def _create_error_boundary(config, app_logger):
    """Create the request error boundary."""
    from yalla_souq.core.error_boundary import ErrorBoundary

    return ErrorBoundary(logger=app_logger, is_development=config.is_development)


class DIContainer(containers.DeclarativeContainer):
    """Main dependency injection container."""

    # Configuration provider
    config = providers.Singleton(get_config)

    # Leveled ring-buffer logger
    app_logger = providers.Singleton(
        _create_app_logger,
        config=config,
    )

    # Mock marketplace data
    mock_store = providers.Singleton(
        _create_mock_store,
        config=config,
        app_logger=app_logger,
    )

    # Auth backend
    session_provider = providers.Singleton(
        _create_session_provider,
        config=config,
        app_logger=app_logger,
    )

    # Profiles
    profile_repository = providers.Singleton(
        _create_profile_repository,
        config=config,
        session_provider=session_provider,
    )

    # Ads and categories, matching the auth backend
    ad_repository = providers.Singleton(
        _create_ad_repository,
        config=config,
        mock_store=mock_store,
        session_provider=session_provider,
        app_logger=app_logger,
    )

    # Auth state (single logical user per process)
    auth_manager = providers.Singleton(
        _create_auth_manager,
        config=config,
        session_provider=session_provider,
        profile_repository=profile_repository,
        app_logger=app_logger,
    )

    # Error boundary used by the HTTP middleware
    error_boundary = providers.Singleton(
        _create_error_boundary,
        config=config,
        app_logger=app_logger,
    )


# Global container instance
container = DIContainer()
