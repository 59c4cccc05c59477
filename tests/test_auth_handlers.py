import dataclasses
import logging
from unittest.mock import MagicMock

import pytest
import requests
from hvac.exceptions import Forbidden, InvalidRequest

from vaultconfig.auth.approle import AppRoleAuthHandler
from vaultconfig.auth.token import TokenAuthHandler
from vaultconfig.auth.types import LoginMethod
from vaultconfig.connectors.types import BackendConnection
from vaultconfig.core.exceptions import AuthenticationError, ValidationError
from vaultconfig.core.logger import TRACE
from vaultconfig.models.provider_config import resolve_settings


ADDRESS = "https://vault.example.com"


def _connection(token: str = "s.static") -> BackendConnection:
    return BackendConnection(address=ADDRESS, verify=False, namespace="ns", prefix="staging", token=token)


def _lookup_response(renewable: bool = True):
    return {
        "data": {
            "accessor": "acc-1",
            "display_name": "token-app",
            "path": "auth/token/create",
            "policies": ["default", "app"],
            "renewable": renewable,
            "ttl": 3600,
        }
    }


def test_token_handler_supports_token_only():
    assert TokenAuthHandler().supports() == frozenset({LoginMethod.TOKEN})


@pytest.mark.parametrize("renewable", [True, False])
def test_token_handler_returns_lookup_renewable_and_unchanged_connection(renewable):
    client = MagicMock()
    client.auth.token.lookup_self.return_value = _lookup_response(renewable=renewable)
    connection = _connection()

    outcome = TokenAuthHandler().authenticate(resolve_settings({}), connection, client)

    client.auth.token.lookup_self.assert_called_once_with()
    assert outcome.renewable is renewable
    assert outcome.connection is connection


def test_token_handler_wraps_rejected_token():
    client = MagicMock()
    error = Forbidden("permission denied")
    client.auth.token.lookup_self.side_effect = error

    with pytest.raises(AuthenticationError) as exc_info:
        TokenAuthHandler().authenticate(resolve_settings({}), _connection(), client)

    assert exc_info.value.__cause__ is error


def test_token_handler_wraps_transport_error():
    client = MagicMock()
    client.auth.token.lookup_self.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(AuthenticationError, match="Token lookup"):
        TokenAuthHandler().authenticate(resolve_settings({}), _connection(), client)


def test_token_handler_trace_dump_never_contains_token(caplog):
    client = MagicMock()
    client.auth.token.lookup_self.return_value = _lookup_response()
    caplog.set_level(TRACE, logger="vaultconfig.auth.token")

    TokenAuthHandler().authenticate(resolve_settings({}), _connection(token="s.static"), client)

    assert "LookupResponse" in caplog.text
    assert "token-app" in caplog.text
    assert "s.static" not in caplog.text


def test_token_handler_skips_trace_dump_at_info(caplog):
    client = MagicMock()
    client.auth.token.lookup_self.return_value = _lookup_response()
    caplog.set_level(logging.INFO, logger="vaultconfig.auth.token")

    TokenAuthHandler().authenticate(resolve_settings({}), _connection(), client)

    assert "LookupResponse" not in caplog.text
    assert "Authenticated to Vault as token-app" in caplog.text


def test_approle_missing_role_id_only():
    client = MagicMock()
    settings = resolve_settings({"login.by": "AppRole", "secret.id": "secret-123"})

    with pytest.raises(ValidationError) as exc_info:
        AppRoleAuthHandler().authenticate(settings, _connection(), client)

    assert exc_info.value.missing == ("role.id",)
    assert "role.id" in str(exc_info.value)
    assert "secret.id" not in str(exc_info.value)
    client.auth.approle.login.assert_not_called()


def test_approle_missing_secret_id_only():
    settings = resolve_settings({"login.by": "AppRole", "role.id": "role-123"})

    with pytest.raises(ValidationError) as exc_info:
        AppRoleAuthHandler().authenticate(settings, _connection(), MagicMock())

    assert exc_info.value.missing == ("secret.id",)


def test_approle_missing_both():
    settings = resolve_settings({"login.by": "AppRole"})

    with pytest.raises(ValidationError) as exc_info:
        AppRoleAuthHandler().authenticate(settings, _connection(), MagicMock())

    assert exc_info.value.missing == ("role.id", "secret.id")
    assert isinstance(exc_info.value, AuthenticationError)


def test_approle_login_rebinds_only_the_token():
    client = MagicMock()
    client.auth.approle.login.return_value = {
        "auth": {
            "client_token": "s.issued",
            "accessor": "acc-2",
            "policies": ["default", "test-secrets"],
            "renewable": True,
            "lease_duration": 2764800,
        }
    }
    settings = resolve_settings({"login.by": "AppRole", "role.id": "role-123", "secret.id": "secret-123"})
    connection = _connection(token="")

    outcome = AppRoleAuthHandler().authenticate(settings, connection, client)

    client.auth.approle.login.assert_called_once_with(
        role_id="role-123",
        secret_id="secret-123",
        use_token=False,
    )
    assert outcome.renewable is True
    assert outcome.connection.token == "s.issued"
    assert dataclasses.replace(outcome.connection, token="") == connection


def test_approle_login_rejected():
    client = MagicMock()
    client.auth.approle.login.side_effect = InvalidRequest("invalid role or secret ID")
    settings = resolve_settings({"login.by": "AppRole", "role.id": "role-123", "secret.id": "wrong"})

    with pytest.raises(AuthenticationError) as exc_info:
        AppRoleAuthHandler().authenticate(settings, _connection(), client)

    assert not isinstance(exc_info.value, ValidationError)
    assert "role-123" in str(exc_info.value)


def test_approle_response_without_client_token():
    client = MagicMock()
    client.auth.approle.login.return_value = {"auth": None}
    settings = resolve_settings({"login.by": "AppRole", "role.id": "role-123", "secret.id": "secret-123"})

    with pytest.raises(AuthenticationError, match="client token"):
        AppRoleAuthHandler().authenticate(settings, _connection(), client)
