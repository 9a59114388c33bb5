"""Custom exception hierarchy."""

from typing import Any


class AppError(Exception):
    """Base application exception."""

    status_code: int = 500

    def __init__(self, message: str, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
            }
        }


class ConfigurationError(AppError):
    """Configuration error."""

    def __init__(self, message: str):
        super().__init__(message, code="CONFIG_ERROR")


class NotFoundError(AppError):
    """Requested record does not exist."""

    status_code = 404

    def __init__(self, message: str, resource: str):
        self.resource = resource
        super().__init__(message, code="NOT_FOUND")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["error"]["details"] = {"resource": self.resource}
        return result


class ValidationError(AppError):
    """Input failed validation."""

    status_code = 422

    def __init__(self, message: str, fields: dict[str, str] | None = None):
        self.fields = fields or {}
        super().__init__(message, code="VALIDATION_ERROR")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.fields:
            result["error"]["details"] = {"fields": self.fields}
        return result


class AuthProviderError(AppError):
    """Auth backend (Supabase or mock) rejected or failed a call."""

    def __init__(self, message: str, status_code: int | None = None):
        self.provider_status = status_code
        super().__init__(message, code="AUTH_ERROR")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.provider_status is not None:
            result["error"]["details"] = {"provider_status": self.provider_status}
        return result
