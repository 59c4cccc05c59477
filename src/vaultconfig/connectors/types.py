from __future__ import annotations

from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 5
    interval_ms: int = 2000

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000.0

    @property
    def max_delay_ms(self) -> int:
        """Upper bound on wall-clock time spent waiting between attempts (excludes I/O)."""
        return self.max_retries * self.interval_ms


@dataclass(frozen=True)
class BackendConnection:
    address: str
    verify: bool
    namespace: str = ""
    prefix: str = ""
    token: str = field(default="", repr=False)
    timeout_seconds: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def with_token(self, token: str) -> "BackendConnection":
        """Return a copy bound to ``token``; every other field is left as is."""
        return replace(self, token=token)
