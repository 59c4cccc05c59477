from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, FrozenSet, List

import requests
from hvac.exceptions import VaultError

from vaultconfig.auth.types import AuthOutcome, LoginMethod
from vaultconfig.connectors.types import BackendConnection
from vaultconfig.core.exceptions import AuthenticationError, ValidationError
from vaultconfig.core.logger import TRACE, get_logger, is_trace_enabled

if TYPE_CHECKING:
    import hvac

    from vaultconfig.models.provider_config import ProviderSettings

logger = get_logger(__name__)


class AppRoleAuthHandler:
    """Logs in with role.id / secret.id and rebinds the connection to the issued token."""

    def supports(self) -> FrozenSet[LoginMethod]:
        return frozenset({LoginMethod.APPROLE})

    @staticmethod
    def _missing_settings(settings: "ProviderSettings") -> List[str]:
        missing = []
        if not settings.role_id.strip():
            missing.append("role.id")
        if not settings.secret_id.get_secret_value().strip():
            missing.append("secret.id")
        return missing

    def authenticate(
        self,
        settings: "ProviderSettings",
        connection: BackendConnection,
        client: "hvac.Client",
    ) -> AuthOutcome:
        missing = self._missing_settings(settings)
        if missing:
            raise ValidationError(LoginMethod.APPROLE.value, missing)

        try:
            response = client.auth.approle.login(
                role_id=settings.role_id,
                secret_id=settings.secret_id.get_secret_value(),
                use_token=False,
            )
        except (VaultError, requests.RequestException) as exc:
            raise AuthenticationError(
                f"AppRole login for role id {settings.role_id!r} against {connection.address} failed: {exc}"
            ) from exc

        auth: Dict[str, Any] = (response or {}).get("auth") or {}
        client_token = auth.get("client_token")
        if not client_token:
            raise AuthenticationError("AppRole login response did not contain a client token")

        if is_trace_enabled(logger):
            logger.log(
                TRACE,
                "AuthResponse: accessor=%s lease_duration=%s renewable=%s token_policies=%s metadata=%s",
                auth.get("accessor"),
                auth.get("lease_duration"),
                auth.get("renewable"),
                auth.get("token_policies"),
                auth.get("metadata"),
            )
        logger.info(
            f"Authenticated to Vault with AppRole {settings.role_id!r}: "
            f"policies: {auth.get('policies')}"
        )
        return AuthOutcome(
            renewable=bool(auth.get("renewable", False)),
            connection=connection.with_token(client_token),
        )
