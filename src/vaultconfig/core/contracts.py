from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class SecretCollection:
    """Raw result of a single Vault read, before key filtering and TTL derivation."""
    status: int                                   # HTTP status returned by Vault
    content_type: Optional[str] = None            # Response mime type, for diagnostics
    body: str = ""                                # Raw response body, for diagnostics
    data: Dict[str, str] = field(default_factory=dict)
    lease_duration_seconds: Optional[int] = None  # Vault lease; None/0 means "no lease"

    @property
    def has_lease(self) -> bool:
        return bool(self.lease_duration_seconds and self.lease_duration_seconds > 0)


@dataclass(frozen=True)
class ConfigData:
    """Resolved secret values plus the TTL (milliseconds) after which the host should re-read."""
    values: Dict[str, str]
    ttl_ms: int

    def __repr__(self) -> str:
        """Custom repr that lists key names only so secret values never end up in logs."""
        keys = sorted(self.values)
        if len(keys) <= 5:
            keys_preview = repr(keys)
        else:
            keys_preview = f"[{keys[0]!r}, {keys[1]!r}, ... +{len(keys) - 2} more]"
        return f"ConfigData(keys={keys_preview}, ttl_ms={self.ttl_ms})"
