"""Authentication strategies for the Vault config provider.

DEFAULT_AUTH_REGISTRY is built once, when this package is imported; a
duplicate login-method claim aborts the import.
"""

from vaultconfig.auth.approle import AppRoleAuthHandler
from vaultconfig.auth.registry import AuthHandlerRegistry, build_auth_registry
from vaultconfig.auth.token import TokenAuthHandler
from vaultconfig.auth.types import AuthHandler, AuthOutcome, LoginMethod

DEFAULT_AUTH_HANDLERS = (
    TokenAuthHandler(),
    AppRoleAuthHandler(),
)

DEFAULT_AUTH_REGISTRY: AuthHandlerRegistry = build_auth_registry(DEFAULT_AUTH_HANDLERS)

__all__ = [
    "AppRoleAuthHandler",
    "AuthHandler",
    "AuthHandlerRegistry",
    "AuthOutcome",
    "DEFAULT_AUTH_HANDLERS",
    "DEFAULT_AUTH_REGISTRY",
    "LoginMethod",
    "TokenAuthHandler",
    "build_auth_registry",
]
