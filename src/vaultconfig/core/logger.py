import logging
import sys
import contextvars
from typing import Optional

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Context variable to carry the secret path being read across the call chain
_SECRET_PATH: contextvars.ContextVar[str] = contextvars.ContextVar("secret_path", default="-")


class _SecretPathFilter(logging.Filter):
    """Logging filter that injects the secret_path from contextvars into the record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.secret_path = _SECRET_PATH.get()
        return True


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | path=%(secret_path)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _level_from_name(level: str) -> int:
    if level.upper() == "TRACE":
        return TRACE
    return getattr(logging, level.upper(), logging.INFO)


def configure_root_logger(level: str = "INFO") -> None:
    """
    Configure root logger and vaultconfig-specific logger.

    Root logger stays at INFO to suppress library noise (urllib3, hvac).
    Only vaultconfig namespace logs are set to the requested level, which
    may be ``TRACE`` to enable auth response dumps.

    Safe to call multiple times; it will not duplicate handlers (idempotent).
    """
    root = logging.getLogger()

    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and any(isinstance(f, _SecretPathFilter) for f in h.filters):
            logging.getLogger("vaultconfig").setLevel(_level_from_name(level))
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter())
    handler.addFilter(_SecretPathFilter())
    handler.setLevel(TRACE)
    root.addHandler(handler)
    root.setLevel(logging.INFO)

    logging.getLogger("vaultconfig").setLevel(_level_from_name(level))


def get_logger(name: str = "vaultconfig") -> logging.Logger:
    """
    Get a module-specific logger.

    Unlike configure_root_logger this never touches handlers: the provider is a
    library embedded in a host process, which owns logging setup.
    """
    return logging.getLogger(name)


def is_trace_enabled(logger: logging.Logger) -> bool:
    return logger.isEnabledFor(TRACE)


def push_secret_path(path: Optional[str]) -> Optional[contextvars.Token]:
    """Set the current secret path in context and return a token for later reset."""
    if not path:
        return None
    return _SECRET_PATH.set(path)


def reset_secret_path(token: Optional[contextvars.Token]) -> None:
    """Reset the secret path context using the provided token (if any)."""
    if token is None:
        return
    _SECRET_PATH.reset(token)
