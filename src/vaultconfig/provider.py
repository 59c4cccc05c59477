from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional

import hvac
import requests
from hvac.adapters import Adapter
from hvac.exceptions import VaultError

from vaultconfig.auth import DEFAULT_AUTH_REGISTRY, AuthHandlerRegistry, AuthOutcome
from vaultconfig.connectors.secret_reader import SecretReader
from vaultconfig.connectors.types import BackendConnection
from vaultconfig.connectors.vault_client import create_client, create_raw_adapter
from vaultconfig.core.contracts import ConfigData
from vaultconfig.core.environment import EnvironmentLookup
from vaultconfig.core.exceptions import AuthenticationError, ProviderStateError
from vaultconfig.core.logger import get_logger
from vaultconfig.models.provider_config import ProviderSettings, resolve_settings
from vaultconfig.models.schema import SchemaDescriptor, config_schema
from vaultconfig.wiring.connection_wiring import build_connection

logger = get_logger(__name__)


class ProviderState(str, Enum):
    UNCONFIGURED = "unconfigured"
    AUTHENTICATING = "authenticating"
    READY = "ready"
    FAILED = "failed"


ClientFactory = Callable[[BackendConnection], hvac.Client]
AdapterFactory = Callable[[BackendConnection], Adapter]


class VaultConfigProvider:
    """
    Config provider that resolves configuration values from HashiCorp Vault.

    The provider is configured exactly once with the host's settings map. It
    authenticates with the configured login method and then serves any number
    of ``get()`` calls, each returning the (optionally filtered) values stored
    at a path plus a TTL telling the host when to read again.

    Example:
        >>> provider = VaultConfigProvider()
        >>> provider.configure({"address": "https://vault.example.com", "token": "s.abc"})
        >>> data = provider.get("secret/db", {"username", "password"})
        >>> data.values["username"], data.ttl_ms
    """

    def __init__(
        self,
        *,
        registry: AuthHandlerRegistry = DEFAULT_AUTH_REGISTRY,
        env: Optional[EnvironmentLookup] = None,
        client_factory: ClientFactory = create_client,
        adapter_factory: AdapterFactory = create_raw_adapter,
    ):
        """
        Args:
            registry: Login method -> auth handler table.
            env: Environment lookup used for VAULT_ADDR / VAULT_TOKEN fallbacks.
                 Defaults to the process environment.
            client_factory: Builds the hvac client used for authentication.
            adapter_factory: Builds the adapter used for reads, bound to the
                             post-authentication connection.
        """
        self._registry = registry
        self._env = env
        self._client_factory = client_factory
        self._adapter_factory = adapter_factory

        self._state = ProviderState.UNCONFIGURED
        self._settings: Optional[ProviderSettings] = None
        self._auth_outcome: Optional[AuthOutcome] = None
        self._reader: Optional[SecretReader] = None

    @property
    def state(self) -> ProviderState:
        return self._state

    @property
    def settings(self) -> Optional[ProviderSettings]:
        return self._settings

    @property
    def auth_outcome(self) -> Optional[AuthOutcome]:
        return self._auth_outcome

    def configure(self, settings: Mapping[str, Any]) -> None:
        """
        Resolve settings, authenticate and bind the reader.

        Raises:
            ProviderStateError: If the provider was already configured (or failed).
            ConfigurationError: If settings are invalid or no address can be resolved.
            UnsupportedLoginMethodError: If no handler is registered for ``login.by``.
            AuthenticationError: If Vault rejects the credentials.
        """
        if self._state is not ProviderState.UNCONFIGURED:
            raise ProviderStateError(
                f"configure() can only be called once; provider is {self._state.value}. "
                "Create a new provider instead."
            )

        self._state = ProviderState.AUTHENTICATING
        try:
            resolved = resolve_settings(settings)
            connection = build_connection(resolved, self._env)
            handler = self._registry.get(resolved.login_by)
            logger.info(
                f"Configuring Vault provider: address={connection.address} "
                f"login.by={resolved.login_by.value} namespace={connection.namespace or '-'} "
                f"retries={connection.retry.max_retries} max_retry_delay_ms={connection.retry.max_delay_ms}"
            )

            client = self._client_factory(connection)
            try:
                outcome = handler.authenticate(resolved, connection, client)
            except (VaultError, requests.RequestException) as exc:
                raise AuthenticationError("Exception while authenticating to Vault") from exc
            finally:
                # The auth client is only needed for login; reads use their own adapter.
                client.adapter.close()

            reader = SecretReader(
                self._adapter_factory(outcome.connection),
                resolved,
                prefix=outcome.connection.prefix,
            )
        except Exception:
            self._state = ProviderState.FAILED
            raise

        self._settings = resolved
        self._auth_outcome = outcome
        self._reader = reader
        self._state = ProviderState.READY
        logger.debug(f"authConfig = renewable={outcome.renewable}")

    def get(self, path: str, keys: Optional[Iterable[str]] = None) -> ConfigData:
        """
        Read ``path`` and return its values, limited to ``keys`` when given.

        Raises:
            ProviderStateError: If the provider is not ready.
            ConfigException: If the read fails; the provider stays ready.
        """
        if self._state is not ProviderState.READY or self._reader is None:
            raise ProviderStateError(f"Provider is {self._state.value}; call configure() first")
        return self._reader.get(path, keys)

    def close(self) -> None:
        """Release pooled HTTP connections. State is unchanged and later reads reconnect."""
        if self._reader is not None:
            self._reader.close()

    @staticmethod
    def config_schema() -> SchemaDescriptor:
        return config_schema()
