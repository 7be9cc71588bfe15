"""Custom exceptions for the portal session core."""

from __future__ import annotations


class UonetError(Exception):
    """Base exception for all session core errors."""


class LoginVariantNotResolvedError(UonetError):
    """Raised when a handshake is attempted while the variant is still Auto."""


class UnknownLoginVariantError(UonetError):
    """Raised when the login page markup matches no known variant."""

    def __init__(self, message: str, title: str = "") -> None:
        super().__init__(message)
        self.title = title


class BadCredentialsError(UonetError):
    """Raised when the portal reports an authentication failure."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AccountInactiveError(UonetError):
    """Raised when the landing page says the account has no access."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ServiceUnavailableError(UonetError):
    """Raised when the landing page reports a database update in progress."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidHandshakeResponseError(UonetError):
    """Raised when an intermediate handshake page is malformed."""

    def __init__(self, message: str, snippet: str = "") -> None:
        super().__init__(message)
        self.snippet = snippet


class UnknownModuleStateError(UonetError):
    """Raised when a module priming response has an unrecognized shape."""

    def __init__(self, message: str, title: str = "") -> None:
        super().__init__(message)
        self.title = title


class SessionResetError(UonetError):
    """Raised when the session was reset while a module was being primed."""


class UnknownEndpointError(UonetError):
    """Raised when no endpoint identifier exists for a version/module/operation."""

    def __init__(self, version: str, module: str, operation: str) -> None:
        super().__init__(
            f"No endpoint for version={version!r} module={module!r} operation={operation!r}"
        )
        self.version = version
        self.module = module
        self.operation = operation
