import logging
import os
from dataclasses import dataclass

import dotenv

from pyfiber.core.errors import ConfigurationError

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    trace: bool = False
    log_level: str = "WARNING"
    max_nested_renders: int = 100


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{name}={raw!r} is not a boolean")


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name}={raw!r} is not an integer") from None
    if value < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {value}")
    return value


def load_settings(*, load_env_file: bool = True, env_file=None) -> Settings:
    """Read settings from the environment (and a ``.env`` file, if present)."""
    if load_env_file:
        dotenv.load_dotenv(env_file, override=False)

    log_level = os.getenv("PYFIBER_LOG_LEVEL", Settings.log_level).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"PYFIBER_LOG_LEVEL={log_level!r} is not a log level")

    return Settings(
        trace=_env_bool("PYFIBER_TRACE", Settings.trace),
        log_level=log_level,
        max_nested_renders=_env_int(
            "PYFIBER_MAX_NESTED_RENDERS", Settings.max_nested_renders
        ),
    )


def configure_logging(settings: Settings) -> logging.Logger:
    logger = logging.getLogger("pyfiber")
    logger.setLevel(settings.log_level)
    return logger
