"""
Sessionward exception hierarchy.

Every exception carries a machine-readable ``code``, a human readable
``message`` and an optional ``details`` dict so the API layer can turn
them into structured error responses.
"""

from typing import Any, Dict, List, Optional


class SessionwardError(Exception):
    """Base class for all Sessionward errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(SessionwardError):
    """Invalid wiring detected at startup (bad registration, bad settings)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="CONFIGURATION_ERROR", message=message, details=details)


class ProviderNotFoundError(ConfigurationError):
    """Raised when a manager is built against an unregistered backend name."""

    def __init__(self, name: str, known: List[str]):
        super().__init__(
            message=f"Session provider '{name}' is not registered",
            details={"provider": name, "known_providers": known},
        )
        self.code = "PROVIDER_NOT_FOUND"
        self.name = name


class RandomnessError(SessionwardError):
    """The secure entropy source could not produce an identifier."""

    def __init__(self, message: str = "Secure random source unavailable"):
        super().__init__(code="RANDOMNESS_FAILURE", message=message)


class CookieDecodeError(SessionwardError):
    """A session cookie value could not be decoded into an identifier."""

    def __init__(self, value: str):
        super().__init__(
            code="COOKIE_DECODE_ERROR",
            message="Session cookie value is malformed",
            details={"length": len(value)},
        )


class ProviderError(SessionwardError):
    """A storage backend failed while serving a lifecycle operation."""

    def __init__(self, operation: str, message: str, session_id: Optional[str] = None):
        details: Dict[str, Any] = {"operation": operation}
        if session_id is not None:
            details["session_id"] = session_id
        super().__init__(code="PROVIDER_ERROR", message=message, details=details)
        self.operation = operation
        self.session_id = session_id


__all__ = [
    "SessionwardError",
    "ConfigurationError",
    "ProviderNotFoundError",
    "RandomnessError",
    "CookieDecodeError",
    "ProviderError",
]
