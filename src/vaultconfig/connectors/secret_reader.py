from __future__ import annotations

import json
from typing import Any, Iterable, Optional

import requests
from hvac.adapters import Adapter
from hvac.exceptions import VaultError

from vaultconfig.core.contracts import ConfigData, SecretCollection
from vaultconfig.core.exceptions import ConfigException
from vaultconfig.core.logger import get_logger, push_secret_path, reset_secret_path
from vaultconfig.models.provider_config import ProviderSettings

logger = get_logger(__name__)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)


def join_path(prefix: str, path: str, *, kv_version: int = 1) -> str:
    """Join ``prefix`` and ``path``; for KV v2 insert ``data/`` after the mount segment."""
    parts = [p for p in (prefix.strip("/"), path.strip("/")) if p]
    full = "/".join(parts)
    if kv_version == 2:
        mount, _, rest = full.partition("/")
        full = f"{mount}/data/{rest}" if rest else f"{mount}/data"
    return full


class SecretReader:
    """Reads secret paths through an authenticated adapter and derives the TTL to report."""

    def __init__(self, adapter: Adapter, settings: ProviderSettings, *, prefix: str = ""):
        self._adapter = adapter
        self._settings = settings
        self._prefix = prefix

    def resolve_path(self, path: str) -> str:
        return join_path(self._prefix, path, kv_version=self._settings.kv_version)

    def read(self, path: str) -> SecretCollection:
        """Perform the raw read. Transport failures (after the session's retries) raise ConfigException."""
        vault_path = self.resolve_path(path)
        try:
            response = self._adapter.get(f"/v1/{vault_path}")
        except (requests.RequestException, VaultError) as exc:
            raise ConfigException(f"Exception thrown reading from '{path}'", path=path) from exc

        collection = SecretCollection(
            status=response.status_code,
            content_type=response.headers.get("Content-Type"),
            body=response.text or "",
        )
        if collection.status != 200:
            return collection

        try:
            payload = response.json() or {}
        except ValueError as exc:
            raise ConfigException(
                f"Vault path '{path}' returned a body that is not valid JSON. "
                f"Content-Type: {collection.content_type}",
                path=path,
                status=collection.status,
                content_type=collection.content_type,
                body=collection.body,
            ) from exc

        if not isinstance(payload, dict):
            raise self._malformed(path, collection, "a JSON body that is not an object")
        data = payload.get("data") or {}
        if self._settings.kv_version == 2 and isinstance(data, dict):
            data = data.get("data") or {}
        if not isinstance(data, dict):
            raise self._malformed(path, collection, "a 'data' field that is not an object")
        collection.data = {str(k): _stringify(v) for k, v in data.items()}
        lease = payload.get("lease_duration")
        if isinstance(lease, (int, float)) and not isinstance(lease, bool):
            collection.lease_duration_seconds = lease
        return collection

    @staticmethod
    def _malformed(path: str, collection: SecretCollection, what: str) -> ConfigException:
        return ConfigException(
            f"Vault path '{path}' returned {what}. Content-Type: {collection.content_type}",
            path=path,
            status=collection.status,
            content_type=collection.content_type,
            body=collection.body,
        )

    def ttl_ms(self, collection: SecretCollection) -> int:
        if collection.has_lease:
            return int(collection.lease_duration_seconds) * 1000
        return self._settings.minimum_secret_ttl_ms

    def get(self, path: str, keys: Optional[Iterable[str]] = None) -> ConfigData:
        wanted = frozenset(keys or ())
        token = push_secret_path(path)
        try:
            logger.info(f"get() - path = '{path}' keys = '{sorted(wanted)}'")
            collection = self.read(path)
            if collection.status != 200:
                raise ConfigException(
                    f"Vault path '{path}' was not found. Rest response details: "
                    f"{{ code: [{collection.status}], mimeType: [{collection.content_type}], "
                    f"response: [{collection.body}] }}",
                    path=path,
                    status=collection.status,
                    content_type=collection.content_type,
                    body=collection.body,
                )

            if wanted:
                values = {k: v for k, v in collection.data.items() if k in wanted}
            else:
                values = dict(collection.data)

            result = ConfigData(values=values, ttl_ms=self.ttl_ms(collection))
            logger.debug(f"Resolved {result!r}")
            return result
        finally:
            reset_secret_path(token)

    def close(self) -> None:
        self._adapter.close()
