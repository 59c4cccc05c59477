from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse

from vaultconfig.connectors.types import BackendConnection, RetryPolicy
from vaultconfig.core.environment import (
    VAULT_ADDR_ENV,
    VAULT_TOKEN_ENV,
    EnvironmentLookup,
    OsEnvironment,
)
from vaultconfig.core.exceptions import ConfigurationError
from vaultconfig.models.provider_config import ProviderSettings


def _first_non_empty(*values: Optional[str]) -> str:
    for value in values:
        if value:
            return value
    return ""


def _address_from_settings(settings: ProviderSettings, env: EnvironmentLookup) -> str:
    address = _first_non_empty(settings.address.strip(), (env.get(VAULT_ADDR_ENV) or "").strip())
    if not address:
        raise ConfigurationError(
            "Vault address is not set. Set 'address' or the "
            f"{VAULT_ADDR_ENV} environment variable",
        )
    parsed = urlparse(address)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"Vault address {address!r} is not a valid http(s) URL", settings=["address"])
    return address.rstrip("/")


def _token_from_settings(settings: ProviderSettings, env: EnvironmentLookup) -> str:
    return _first_non_empty(settings.token.get_secret_value(), env.get(VAULT_TOKEN_ENV))


def build_connection(
    settings: ProviderSettings,
    env: Optional[EnvironmentLookup] = None,
) -> BackendConnection:
    # This wiring module is the only layer that reads ProviderSettings for connection details.
    env = env or OsEnvironment()

    return BackendConnection(
        address=_address_from_settings(settings, env),
        verify=settings.ssl_verify_enabled,
        namespace=settings.namespace.strip(),
        prefix=settings.prefix.strip().strip("/"),
        token=_token_from_settings(settings, env),
        timeout_seconds=float(settings.request_timeout_seconds),
        retry=RetryPolicy(
            max_retries=settings.max_retries,
            interval_ms=settings.retry_interval_ms,
        ),
    )
