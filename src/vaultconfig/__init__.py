"""vaultconfig.

Vault Config Provider - resolves configuration values from HashiCorp Vault.

Secrets are fetched on demand with a static token or an AppRole login and
returned as key/value configuration plus a TTL hint telling the host when
to read them again.

Public API for host applications.
"""

from vaultconfig.core.contracts import ConfigData
from vaultconfig.core.exceptions import (
    AuthenticationError,
    ConfigException,
    ConfigurationError,
    UnsupportedLoginMethodError,
    ValidationError,
    VaultConfigError,
)
from vaultconfig.models.schema import config_schema
from vaultconfig.provider import ProviderState, VaultConfigProvider

__version__ = "0.1.0"

__all__ = [
    "AuthenticationError",
    "ConfigData",
    "ConfigException",
    "ConfigurationError",
    "ProviderState",
    "UnsupportedLoginMethodError",
    "ValidationError",
    "VaultConfigError",
    "VaultConfigProvider",
    "config_schema",
]
