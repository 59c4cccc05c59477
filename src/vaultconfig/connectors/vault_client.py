"""Factories for the hvac client objects the provider talks to Vault through.

Both factories mount a retrying ``requests.Session`` so that retry/backoff is
handled by the HTTP transport rather than by the provider itself.
"""

from __future__ import annotations

from typing import Any, Optional

import hvac
import requests
from hvac.adapters import RawAdapter
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from vaultconfig.connectors.types import BackendConnection, RetryPolicy


RETRY_STATUSES = (500, 502, 503, 504)


class FixedIntervalRetry(Retry):
    """urllib3 Retry that waits the same interval between every attempt."""

    def __init__(self, *args: Any, interval_seconds: float = 0.0, **kwargs: Any):
        self.interval_seconds = interval_seconds
        super().__init__(*args, **kwargs)

    def new(self, **kw: Any) -> "FixedIntervalRetry":
        retry = super().new(**kw)
        retry.interval_seconds = self.interval_seconds
        return retry

    def get_backoff_time(self) -> float:
        return self.interval_seconds


def build_retry(policy: RetryPolicy) -> FixedIntervalRetry:
    return FixedIntervalRetry(
        total=policy.max_retries,
        status_forcelist=RETRY_STATUSES,
        # Let the last response through so callers can report its status and body.
        raise_on_status=False,
        respect_retry_after_header=False,
        interval_seconds=policy.interval_seconds,
    )


def build_session(policy: RetryPolicy, *, verify: bool = True) -> requests.Session:
    session = requests.Session()
    # hvac prefers a truthy session.verify over its own verify argument.
    session.verify = verify
    adapter = HTTPAdapter(max_retries=build_retry(policy))
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def _bind_session(connection: BackendConnection, session: Optional[requests.Session]) -> requests.Session:
    if session is None:
        return build_session(connection.retry, verify=connection.verify)
    session.verify = connection.verify
    return session


def create_client(
    connection: BackendConnection,
    *,
    session: Optional[requests.Session] = None,
) -> hvac.Client:
    # Token is passed as "" rather than None so hvac does not re-read VAULT_TOKEN
    # behind the connection builder's back.
    return hvac.Client(
        url=connection.address,
        token=connection.token or "",
        verify=connection.verify,
        timeout=connection.timeout_seconds,
        namespace=connection.namespace or None,
        session=_bind_session(connection, session),
    )


def create_raw_adapter(
    connection: BackendConnection,
    *,
    session: Optional[requests.Session] = None,
) -> RawAdapter:
    """Adapter returning raw ``requests.Response`` objects, never raising on HTTP status."""
    return RawAdapter(
        base_uri=connection.address,
        token=connection.token or None,
        verify=connection.verify,
        timeout=connection.timeout_seconds,
        namespace=connection.namespace or None,
        session=_bind_session(connection, session),
        ignore_exceptions=True,
    )
