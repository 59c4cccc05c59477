from __future__ import annotations

from typing import Dict, Iterable, List

from vaultconfig.auth.types import AuthHandler, LoginMethod
from vaultconfig.core.exceptions import AuthRegistryError, UnsupportedLoginMethodError


class AuthHandlerRegistry:
    """Fixed mapping of login method -> auth handler.

    Instances are built once through build_auth_registry(); there is no
    register-after-the-fact API.
    """

    def __init__(self, handlers: Dict[LoginMethod, AuthHandler]):
        self._handlers = dict(handlers)

    def get(self, login_method: LoginMethod) -> AuthHandler:
        try:
            return self._handlers[login_method]
        except KeyError as exc:
            raise UnsupportedLoginMethodError(
                f"'{getattr(login_method, 'value', login_method)}' does not have an AuthHandler defined"
            ) from exc

    def supported_methods(self) -> List[LoginMethod]:
        return list(self._handlers)


def build_auth_registry(handlers: Iterable[AuthHandler]) -> AuthHandlerRegistry:
    """Build the registry, failing fast if two handlers claim the same login method."""
    table: Dict[LoginMethod, AuthHandler] = {}
    for handler in handlers:
        for login_method in handler.supports():
            previous = table.get(login_method)
            if previous is not None:
                raise AuthRegistryError(
                    f"'{login_method.value}' is defined as supported by "
                    f"{type(handler).__name__!r} and {type(previous).__name__!r}. Only one can be supported."
                )
            table[login_method] = handler
    return AuthHandlerRegistry(table)
