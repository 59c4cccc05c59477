from __future__ import annotations

import os
from typing import Mapping, Optional, Protocol

VAULT_ADDR_ENV = "VAULT_ADDR"
VAULT_TOKEN_ENV = "VAULT_TOKEN"


class EnvironmentLookup(Protocol):
    def get(self, name: str) -> Optional[str]:
        ...


class OsEnvironment:
    """Environment lookup backed by the process environment."""

    def get(self, name: str) -> Optional[str]:
        return os.environ.get(name)


class MappingEnvironment:
    """Environment lookup backed by a fixed mapping (tests, or hosts that manage their own environment)."""

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = dict(values or {})

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)
