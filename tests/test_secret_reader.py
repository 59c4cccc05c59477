from unittest.mock import MagicMock

import pytest
import requests
from hvac.adapters import RawAdapter

from vaultconfig.connectors.secret_reader import SecretReader, join_path
from vaultconfig.core.contracts import ConfigData
from vaultconfig.core.exceptions import ConfigException
from vaultconfig.models.provider_config import resolve_settings


FIVE = {"one": "1", "two": "2", "three": "3", "four": "4", "five": "5"}


def _response(status=200, payload=None, text=None, content_type="application/json"):
    response = MagicMock()
    response.status_code = status
    response.headers = {"Content-Type": content_type}
    response.text = text if text is not None else ""
    response.json.return_value = payload
    return response


def _reader(payload=None, *, status=200, text=None, settings=None, prefix=""):
    adapter = MagicMock(spec=RawAdapter)
    adapter.get.return_value = _response(status=status, payload=payload, text=text)
    return SecretReader(adapter, settings or resolve_settings({}), prefix=prefix), adapter


def test_get_returns_all_keys_with_minimum_ttl_when_no_lease():
    settings = resolve_settings({"secret.minimum.ttl.ms": "5000"})
    reader, adapter = _reader({"data": dict(FIVE)}, settings=settings)

    result = reader.get("secret/valid")

    adapter.get.assert_called_once_with("/v1/secret/valid")
    assert isinstance(result, ConfigData)
    assert result.values == FIVE
    assert result.ttl_ms == 5000


def test_get_filters_to_requested_keys():
    reader, _ = _reader({"data": dict(FIVE), "lease_duration": 0})

    result = reader.get("secret/selected", {"one", "three", "five"})

    assert result.values == {"one": "1", "three": "3", "five": "5"}
    assert result.ttl_ms == 1000


def test_empty_key_set_means_all_keys():
    reader, _ = _reader({"data": dict(FIVE)})

    assert reader.get("secret/valid", set()).values == FIVE
    assert reader.get("secret/valid", None).values == FIVE


def test_requested_keys_missing_from_secret_are_skipped():
    reader, _ = _reader({"data": dict(FIVE)})

    assert reader.get("secret/valid", {"one", "six"}).values == {"one": "1"}


def test_positive_lease_becomes_ttl_in_milliseconds():
    reader, _ = _reader({"data": {"a": "1"}, "lease_duration": 60})

    assert reader.get("database/creds/app").ttl_ms == 60000


def test_non_string_values_are_stringified():
    reader, _ = _reader({"data": {"port": 5432, "enabled": True, "tags": ["a", "b"], "name": "db"}})

    assert reader.get("secret/db").values == {
        "port": "5432",
        "enabled": "true",
        "tags": '["a", "b"]',
        "name": "db",
    }


def test_not_found_is_a_hard_failure():
    body = '{"errors":[]}'
    reader, _ = _reader(None, status=404, text=body)

    with pytest.raises(ConfigException) as exc_info:
        reader.get("secret/missing")

    err = exc_info.value
    assert err.path == "secret/missing"
    assert err.status == 404
    assert err.content_type == "application/json"
    assert err.body == body
    assert "was not found" in str(err)
    assert "404" in str(err)


def test_server_error_after_retries_is_reported_with_status():
    reader, _ = _reader(None, status=503, text="Vault is sealed")

    with pytest.raises(ConfigException) as exc_info:
        reader.get("secret/valid")

    assert exc_info.value.status == 503
    assert "Vault is sealed" in str(exc_info.value)


def test_transport_error_is_wrapped_with_path():
    adapter = MagicMock(spec=RawAdapter)
    error = requests.ConnectionError("Max retries exceeded")
    adapter.get.side_effect = error
    reader = SecretReader(adapter, resolve_settings({}))

    with pytest.raises(ConfigException, match="Exception thrown reading from 'secret/valid'") as exc_info:
        reader.get("secret/valid")

    assert exc_info.value.path == "secret/valid"
    assert exc_info.value.__cause__ is error


def test_invalid_json_body_fails():
    reader, adapter = _reader(None, text="<html>")
    adapter.get.return_value.json.side_effect = ValueError("Expecting value")

    with pytest.raises(ConfigException, match="not valid JSON"):
        reader.get("secret/valid")


@pytest.mark.parametrize(
    "payload",
    [["one", "two"], "plain text", 42],
)
def test_json_body_that_is_not_an_object_fails(payload):
    reader, _ = _reader(payload, text="[]")

    with pytest.raises(ConfigException, match="not an object") as excinfo:
        reader.get("secret/valid")

    assert excinfo.value.path == "secret/valid"
    assert excinfo.value.status == 200


@pytest.mark.parametrize(
    "payload, kv_version",
    [
        ({"data": ["one", "two"]}, "1"),
        ({"data": "plain text"}, "1"),
        ({"data": {"data": ["one"], "metadata": {}}}, "2"),
        ({"data": ["one"]}, "2"),
    ],
)
def test_data_field_that_is_not_an_object_fails(payload, kv_version):
    settings = resolve_settings({"kv.version": kv_version})
    reader, _ = _reader(payload, settings=settings)

    with pytest.raises(ConfigException, match="'data' field that is not an object"):
        reader.get("secret/valid")


def test_non_numeric_lease_falls_back_to_minimum_ttl():
    settings = resolve_settings({"secret.minimum.ttl.ms": "5000"})
    reader, _ = _reader({"data": {"a": "1"}, "lease_duration": "3600"}, settings=settings)

    assert reader.get("secret/valid").ttl_ms == 5000


def test_close_releases_adapter():
    reader, adapter = _reader({"data": {"a": "1"}})

    reader.close()

    adapter.close.assert_called_once_with()


def test_prefix_is_prepended_to_path():
    reader, adapter = _reader({"data": {"a": "1"}}, prefix="staging")

    reader.get("secret/app")

    adapter.get.assert_called_once_with("/v1/staging/secret/app")


def test_kv_version_two_reads_data_path_and_unwraps():
    settings = resolve_settings({"kv.version": "2"})
    payload = {
        "data": {"data": {"username": "app", "password": "pw"}, "metadata": {"version": 3}},
        "lease_duration": 0,
    }
    reader, adapter = _reader(payload, settings=settings)

    result = reader.get("secret/app", {"username"})

    adapter.get.assert_called_once_with("/v1/secret/data/app")
    assert result.values == {"username": "app"}


def test_repeated_reads_return_identical_values():
    reader, _ = _reader({"data": dict(FIVE)})

    assert reader.get("secret/valid").values == reader.get("secret/valid").values


def test_config_data_repr_hides_values():
    reader, _ = _reader({"data": {"password": "hunter2"}})

    result = reader.get("secret/db")

    assert "hunter2" not in repr(result)
    assert "password" in repr(result)


@pytest.mark.parametrize(
    "prefix, path, kv_version, expected",
    [
        ("", "secret/app", 1, "secret/app"),
        ("staging", "/secret/app/", 1, "staging/secret/app"),
        ("", "secret/app", 2, "secret/data/app"),
        ("", "secret", 2, "secret/data"),
    ],
)
def test_join_path(prefix, path, kv_version, expected):
    assert join_path(prefix, path, kv_version=kv_version) == expected
