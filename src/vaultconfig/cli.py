"""
Command-line interface for vaultconfig.

Lets operators check a provider settings file against a real Vault before
handing it to the host application:

    vaultconfig validate --settings provider.json
    vaultconfig get secret/db --settings provider.yaml --key username --key password
    vaultconfig schema
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from vaultconfig.core.logger import configure_root_logger, get_logger
from vaultconfig.models.provider_config import resolve_settings
from vaultconfig.models.schema import config_schema
from vaultconfig.provider import VaultConfigProvider
from vaultconfig.wiring.connection_wiring import build_connection

logger = get_logger(__name__)


def load_settings(settings_path: str) -> Dict[str, Any]:
    """
    Load a provider settings map from a JSON or YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the format is unsupported or the file is not a mapping
    """
    settings_file = Path(settings_path)
    if not settings_file.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with open(settings_file, "r") as f:
        if settings_file.suffix == ".json":
            settings = json.load(f)
        elif settings_file.suffix in (".yaml", ".yml"):
            try:
                import yaml
            except ImportError:
                raise ImportError(
                    "PyYAML required for YAML settings. "
                    "Install with: pip install pyyaml"
                )
            settings = yaml.safe_load(f)
        else:
            raise ValueError(
                f"Unsupported settings format: {settings_file.suffix}. "
                "Use .json or .yaml"
            )

    if not isinstance(settings, dict):
        raise ValueError(f"Settings file {settings_path} must contain a mapping")
    return settings


def get_secret(
    path: str,
    settings: Dict[str, Any],
    keys: Optional[List[str]] = None,
    *,
    show_values: bool = False,
) -> Dict[str, Any]:
    """Configure a provider, read ``path`` and return a printable summary."""
    provider = VaultConfigProvider()
    try:
        provider.configure(settings)
        data = provider.get(path, set(keys or ()))
    finally:
        provider.close()

    result: Dict[str, Any] = {"path": path, "ttl_ms": data.ttl_ms, "keys": sorted(data.values)}
    if show_values:
        result["values"] = dict(data.values)
    return result


def validate_settings(settings: Dict[str, Any]) -> bool:
    """Validate settings and connection parameters without contacting Vault."""
    resolved = resolve_settings(settings)
    connection = build_connection(resolved)
    logger.info(f"Settings are valid: address={connection.address} login.by={resolved.login_by.value}")
    return True


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vaultconfig",
        description="Resolve configuration values from HashiCorp Vault",
    )
    parser.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR or TRACE")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    get_parser = subparsers.add_parser("get", help="Read a secret path")
    get_parser.add_argument("path", help="Secret path, e.g. secret/db")
    get_parser.add_argument("--settings", required=True, help="Provider settings file (JSON or YAML)")
    get_parser.add_argument("--key", action="append", dest="keys", help="Only return this key (repeatable)")
    get_parser.add_argument("--show-values", action="store_true", help="Print secret values too")

    validate_parser = subparsers.add_parser("validate", help="Validate a settings file without reading secrets")
    validate_parser.add_argument("--settings", required=True, help="Provider settings file (JSON or YAML)")

    subparsers.add_parser("schema", help="Print the recognised settings")
    return parser


def cli(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_root_logger(args.log_level)

    if args.command == "get":
        try:
            result = get_secret(
                args.path,
                load_settings(args.settings),
                args.keys,
                show_values=args.show_values,
            )
            print(json.dumps(result, indent=2))
            sys.exit(0)
        except Exception as e:
            logger.error(f"Read failed: {e}")
            sys.exit(1)

    elif args.command == "validate":
        try:
            validate_settings(load_settings(args.settings))
            sys.exit(0)
        except Exception as e:
            logger.error(f"Validation failed: {e}")
            sys.exit(1)

    elif args.command == "schema":
        print(json.dumps(config_schema().to_dict(), indent=2, default=str))
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":
    cli()
