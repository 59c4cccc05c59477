from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import SecretStr

from vaultconfig.models.provider_config import ProviderSettings


Importance = Literal["high", "medium", "low"]

_MASK = "[hidden]"


@dataclass(frozen=True)
class SettingDescriptor:
    name: str
    type: str
    default: Any
    importance: Importance
    documentation: str
    secret: bool = False
    minimum: Optional[float] = None
    maximum: Optional[float] = None


@dataclass(frozen=True)
class SchemaDescriptor:
    settings: Tuple[SettingDescriptor, ...]

    def names(self) -> List[str]:
        return [s.name for s in self.settings]

    def get(self, name: str) -> SettingDescriptor:
        for setting in self.settings:
            if setting.name == name:
                return setting
        raise KeyError(name)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {s.name: {k: v for k, v in asdict(s).items() if k != "name"} for s in self.settings}


def _type_name(annotation: Any) -> str:
    if annotation is SecretStr:
        return "password"
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return "string"
    if annotation is bool:
        return "boolean"
    if annotation is int:
        return "long"
    if annotation is float:
        return "double"
    return "string"


def _bounds(metadata: List[Any]) -> Tuple[Optional[float], Optional[float]]:
    minimum = maximum = None
    for item in metadata:
        if getattr(item, "ge", None) is not None:
            minimum = item.ge
        if getattr(item, "gt", None) is not None:
            minimum = item.gt
        if getattr(item, "le", None) is not None:
            maximum = item.le
    return minimum, maximum


def config_schema() -> SchemaDescriptor:
    """Describe every recognised setting (name, type, default, importance, docs).

    Static: derived from the ProviderSettings field declarations, no I/O.
    """
    settings: List[SettingDescriptor] = []
    for field_name, info in ProviderSettings.model_fields.items():
        secret = info.annotation is SecretStr
        default = info.default
        if secret:
            default = _MASK if default.get_secret_value() else ""
        elif isinstance(default, Enum):
            default = default.value
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        minimum, maximum = _bounds(info.metadata)
        settings.append(
            SettingDescriptor(
                name=info.alias or field_name,
                type=_type_name(info.annotation),
                default=default,
                importance=extra.get("importance", "medium"),
                documentation=info.description or "",
                secret=secret,
                minimum=minimum,
                maximum=maximum,
            )
        )
    return SchemaDescriptor(settings=tuple(settings))
