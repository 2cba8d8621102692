"""Runtime settings for the scheduler tools."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

from amqscheduler import __version__
from amqscheduler.domain.scheduler import MANAGEMENT_DESTINATION, ConfigurationError
from amqscheduler.utils.log import DEFAULT_LOG_LEVEL, LOG_LEVELS

DEFAULT_INITIAL_RECEIVE_TIMEOUT = 5.0
DEFAULT_RECEIVE_TIMEOUT = 0.2

CONFIG_ENV = "AMQSCHED_CONFIG"

_ENV_KEYS = {
    "initial_receive_timeout": "AMQSCHED_INITIAL_TIMEOUT",
    "receive_timeout": "AMQSCHED_RECEIVE_TIMEOUT",
    "management_destination": "AMQSCHED_MANAGEMENT_DESTINATION",
    "log_level": "AMQSCHED_LOG_LEVEL",
}


@dataclass(frozen=True)
class RuntimeSettings:
    initial_receive_timeout: float = DEFAULT_INITIAL_RECEIVE_TIMEOUT
    receive_timeout: float = DEFAULT_RECEIVE_TIMEOUT
    management_destination: str = MANAGEMENT_DESTINATION
    log_level: str = DEFAULT_LOG_LEVEL
    cli_version: str = __version__

    def __post_init__(self) -> None:
        for name in ("initial_receive_timeout", "receive_timeout"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be a number of seconds")
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be a finite, non-negative number of seconds")
        if not self.management_destination:
            raise ConfigurationError("management_destination must not be empty")
        if self.log_level.lower() not in LOG_LEVELS:
            raise ConfigurationError(f"unsupported log level '{self.log_level}'")

    def with_overrides(self, **overrides: Any) -> "RuntimeSettings":
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


def _load_file(path: Path) -> dict[str, Any]:
    import yaml  # lazy import to keep import cost low

    if not path.exists():
        raise ConfigurationError(f"settings file missing: {path}")
    try:
        data = yaml.safe_load(path.read_text("utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"settings file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"settings file {path} must contain a mapping")
    unknown = sorted(set(data) - set(_ENV_KEYS))
    if unknown:
        raise ConfigurationError(f"settings file {path} has unknown keys: {', '.join(unknown)}")
    return data


def _coerce(key: str, value: Any) -> Any:
    if key in ("initial_receive_timeout", "receive_timeout"):
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{key} must be a number, got {value!r}") from None
    return str(value)


def load_settings(environ: Mapping[str, str] | None = None) -> RuntimeSettings:
    """Build settings from defaults, an optional YAML file and the environment."""

    env = os.environ if environ is None else environ
    values: dict[str, Any] = {}
    config_path = env.get(CONFIG_ENV)
    if config_path:
        values.update(_load_file(Path(config_path).expanduser()))
    for key, var in _ENV_KEYS.items():
        raw = env.get(var)
        if raw:
            values[key] = raw
    return RuntimeSettings(**{key: _coerce(key, value) for key, value in values.items()})


__all__ = [
    "CONFIG_ENV",
    "DEFAULT_INITIAL_RECEIVE_TIMEOUT",
    "DEFAULT_RECEIVE_TIMEOUT",
    "RuntimeSettings",
    "load_settings",
]
