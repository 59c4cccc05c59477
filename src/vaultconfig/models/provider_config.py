from __future__ import annotations

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, SecretStr, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from vaultconfig.auth.types import LoginMethod
from vaultconfig.core.exceptions import ConfigurationError


MINIMUM_SECRET_TTL_MS = 1000


class ProviderSettings(BaseModel):
    """Typed view of the host's settings map.

    Field aliases are the setting names the host uses (``login.by``,
    ``max.retries``...). Descriptions and ``importance`` feed the schema
    returned by ``config_schema()``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    address: str = Field(
        default="",
        alias="address",
        description=(
            "Address (URL) of the Vault server instance to which API calls should be sent. "
            "If no address is set explicitly the VAULT_ADDR environment variable is used; "
            "if neither is available configuration fails."
        ),
        json_schema_extra={"importance": "high"},
    )
    login_by: LoginMethod = Field(
        default=LoginMethod.TOKEN,
        alias="login.by",
        description="The login method to use. Token: authenticate with a static token. "
        "AppRole: authenticate with a role id and secret id.",
        json_schema_extra={"importance": "high"},
    )
    token: SecretStr = Field(
        default=SecretStr(""),
        alias="token",
        description="Token used to access Vault. If no token is set explicitly the VAULT_TOKEN "
        "environment variable is used.",
        json_schema_extra={"importance": "high"},
    )
    role_id: str = Field(
        default="",
        alias="role.id",
        description="Role id used for AppRole login. Requires secret.id to be set as well.",
        json_schema_extra={"importance": "high"},
    )
    secret_id: SecretStr = Field(
        default=SecretStr(""),
        alias="secret.id",
        description="Secret id used for AppRole login. Requires role.id to be set as well.",
        json_schema_extra={"importance": "high"},
    )
    namespace: str = Field(
        default="",
        alias="namespace",
        description="Global namespace (Vault Enterprise) sent with every request, if desired.",
        json_schema_extra={"importance": "low"},
    )
    prefix: str = Field(
        default="",
        alias="prefix",
        description=(
            "Prefix added to all secret paths, e.g. 'staging' or 'production', so the same "
            "configuration can be used across environments."
        ),
        json_schema_extra={"importance": "low"},
    )
    max_retries: int = Field(
        default=5,
        ge=0,
        alias="max.retries",
        description="Number of times a read is retried when a failure occurs.",
        json_schema_extra={"importance": "low"},
    )
    retry_interval_ms: int = Field(
        default=2000,
        ge=0,
        alias="retry.interval.ms",
        description="Milliseconds to wait in between retries.",
        json_schema_extra={"importance": "low"},
    )
    ssl_verify_enabled: bool = Field(
        default=True,
        alias="ssl.verify.enabled",
        description="Whether the SSL certificate of the Vault server is verified. "
        "Outside of development this should never be disabled.",
        json_schema_extra={"importance": "high"},
    )
    minimum_secret_ttl_ms: int = Field(
        default=MINIMUM_SECRET_TTL_MS,
        ge=MINIMUM_SECRET_TTL_MS,
        alias="secret.minimum.ttl.ms",
        description=(
            "Minimum amount of time a secret should be used. If a secret has no lease, this "
            "controls how often the host checks for updated secrets."
        ),
        json_schema_extra={"importance": "low"},
    )
    request_timeout_seconds: PositiveFloat = Field(
        default=30.0,
        alias="request.timeout.seconds",
        description="Timeout applied to every individual request made to Vault.",
        json_schema_extra={"importance": "low"},
    )
    kv_version: int = Field(
        default=1,
        ge=1,
        le=2,
        alias="kv.version",
        description="Version of the KV secrets engine serving the paths that are read (1 or 2).",
        json_schema_extra={"importance": "low"},
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_unset(cls, data: Any) -> Any:
        # Hosts may pass None for settings they did not set; treat those as absent.
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator("login_by", mode="before")
    @classmethod
    def _parse_login_by(cls, value: Any) -> Any:
        if isinstance(value, str):
            return LoginMethod(value)
        return value


def resolve_settings(raw: Mapping[str, Any]) -> ProviderSettings:
    """Parse the host settings map into ProviderSettings.

    Unknown keys are ignored. Any coercion or range failure is reported as a
    ConfigurationError naming the offending settings.
    """
    try:
        return ProviderSettings.model_validate(dict(raw))
    except PydanticValidationError as exc:
        names: Dict[str, None] = {}
        for err in exc.errors():
            loc = err.get("loc") or ("<settings>",)
            names[str(loc[0])] = None
        raise ConfigurationError(f"Invalid provider settings ({exc.error_count()} error(s))", settings=names) from exc
