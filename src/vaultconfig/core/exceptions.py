"""
Custom exception classes for vaultconfig.

Provides structured error handling with domain-specific exceptions
for the configure-time (settings, authentication) and read-time
(secret retrieval) layers of the provider.
"""

from typing import Iterable, Optional, Tuple


class VaultConfigError(Exception):
    """Base exception class for all vaultconfig exceptions."""

    pass


class ConfigurationError(VaultConfigError):
    """
    Raised when provider settings are malformed, missing or out of range.

    Fatal at configure time; the provider is never retried in place.

    Example:
        >>> raise ConfigurationError(
        ...     "Invalid provider settings",
        ...     settings=["max.retries"],
        ... )
    """

    def __init__(self, message: str, settings: Optional[Iterable[str]] = None):
        self.settings: Tuple[str, ...] = tuple(settings or ())
        if self.settings:
            message = f"{message}: {', '.join(self.settings)}"
        super().__init__(message)


class AuthenticationError(VaultConfigError):
    """Raised when Vault rejects the configured credentials or the login call fails."""

    pass


class ValidationError(AuthenticationError):
    """
    Raised when a login method is missing credentials it needs.

    ``missing`` lists only the setting names that were absent, so callers
    can report exactly what to fix.
    """

    def __init__(self, login_method: str, missing: Iterable[str]):
        self.login_method = login_method
        self.missing: Tuple[str, ...] = tuple(missing)
        super().__init__(
            f"{login_method} login requires the following settings to be set: {', '.join(self.missing)}"
        )


class UnsupportedLoginMethodError(VaultConfigError, NotImplementedError):
    """Raised when no auth handler is registered for a login method."""

    pass


class ProviderStateError(VaultConfigError):
    """Raised when the provider is used outside of its lifecycle (e.g. get() before configure())."""

    pass


class ConfigException(VaultConfigError):
    """
    Raised when reading a secret path fails.

    Carries the path plus, when Vault answered, the HTTP status, content type
    and raw body so the failure can be diagnosed without trace logging.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        status: Optional[int] = None,
        content_type: Optional[str] = None,
        body: Optional[str] = None,
    ):
        self.path = path
        self.status = status
        self.content_type = content_type
        self.body = body
        super().__init__(message)


class AuthRegistryError(RuntimeError):
    """Raised at startup when two auth handlers claim the same login method."""

    pass
