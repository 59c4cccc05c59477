from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet, Protocol

from vaultconfig.connectors.types import BackendConnection

if TYPE_CHECKING:
    import hvac

    from vaultconfig.models.provider_config import ProviderSettings


class LoginMethod(str, Enum):
    """Login methods a provider can be configured with (``login.by``)."""

    TOKEN = "Token"          # https://developer.hashicorp.com/vault/docs/auth/token
    APPROLE = "AppRole"      # https://developer.hashicorp.com/vault/docs/auth/approle

    @classmethod
    def _missing_(cls, value: object) -> "LoginMethod | None":
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


@dataclass(frozen=True)
class AuthOutcome:
    renewable: bool
    connection: BackendConnection


class AuthHandler(Protocol):
    def supports(self) -> FrozenSet[LoginMethod]:
        ...

    def authenticate(
        self,
        settings: "ProviderSettings",
        connection: BackendConnection,
        client: "hvac.Client",
    ) -> AuthOutcome:
        ...
