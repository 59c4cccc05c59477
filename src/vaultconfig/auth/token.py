from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, FrozenSet

import requests
from hvac.exceptions import VaultError

from vaultconfig.auth.types import AuthOutcome, LoginMethod
from vaultconfig.connectors.types import BackendConnection
from vaultconfig.core.exceptions import AuthenticationError
from vaultconfig.core.logger import TRACE, get_logger, is_trace_enabled

if TYPE_CHECKING:
    import hvac

    from vaultconfig.models.provider_config import ProviderSettings

logger = get_logger(__name__)


class TokenAuthHandler:
    """Validates an already configured token with a self-lookup."""

    def supports(self) -> FrozenSet[LoginMethod]:
        return frozenset({LoginMethod.TOKEN})

    def authenticate(
        self,
        settings: "ProviderSettings",
        connection: BackendConnection,
        client: "hvac.Client",
    ) -> AuthOutcome:
        try:
            response = client.auth.token.lookup_self()
        except (VaultError, requests.RequestException) as exc:
            raise AuthenticationError(f"Token lookup against {connection.address} failed: {exc}") from exc

        data: Dict[str, Any] = (response or {}).get("data") or {}
        if is_trace_enabled(logger):
            logger.log(
                TRACE,
                "LookupResponse: accessor=%s display_name=%s path=%s policies=%s renewable=%s ttl=%s",
                data.get("accessor"),
                data.get("display_name"),
                data.get("path"),
                data.get("policies"),
                data.get("renewable"),
                data.get("ttl"),
            )
        logger.info(
            f"Authenticated to Vault as {data.get('display_name')}: path: {data.get('path')} "
            f"policies: {data.get('policies')}"
        )
        return AuthOutcome(renewable=bool(data.get("renewable", False)), connection=connection)
