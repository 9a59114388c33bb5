"""Authentication: session providers, profiles and the auth state manager."""

from yalla_souq.auth.errors import get_error_message
from yalla_souq.auth.manager import AuthManager
from yalla_souq.auth.mock_provider import MockProfileRepository, MockSessionProvider
from yalla_souq.auth.schemas import (
    AuthChangeEvent,
    AuthResponse,
    AuthState,
    AuthUser,
    Session,
    SignupData,
    UserProfile,
)
from yalla_souq.auth.storage import ClientStorage
from yalla_souq.auth.supabase_client import (
    SupabaseAuthClient,
    SupabaseProfileRepository,
    create_supabase_client,
)

__all__ = [
    "AuthManager",
    "AuthChangeEvent",
    "AuthResponse",
    "AuthState",
    "AuthUser",
    "ClientStorage",
    "MockProfileRepository",
    "MockSessionProvider",
    "Session",
    "SignupData",
    "SupabaseAuthClient",
    "SupabaseProfileRepository",
    "UserProfile",
    "create_supabase_client",
    "get_error_message",
]
