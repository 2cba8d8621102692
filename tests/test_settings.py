from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from amqscheduler.domain.scheduler import ConfigurationError
from amqscheduler.settings import (
    DEFAULT_INITIAL_RECEIVE_TIMEOUT,
    DEFAULT_RECEIVE_TIMEOUT,
    RuntimeSettings,
    load_settings,
)


def test_defaults_without_environment() -> None:
    settings = load_settings({})

    assert settings.initial_receive_timeout == DEFAULT_INITIAL_RECEIVE_TIMEOUT == 5.0
    assert settings.receive_timeout == DEFAULT_RECEIVE_TIMEOUT == 0.2
    assert settings.management_destination == "/topic/ActiveMQ.Scheduler.Management"
    assert settings.log_level == "warning"


def test_environment_overrides_file(tmp_path: Path) -> None:
    config_path = tmp_path / "amqsched.yaml"
    config_path.write_text(
        yaml.safe_dump({"initial_receive_timeout": 10, "receive_timeout": 1, "log_level": "info"}),
        encoding="utf-8",
    )

    settings = load_settings({"AMQSCHED_CONFIG": str(config_path), "AMQSCHED_RECEIVE_TIMEOUT": "0.5"})

    assert settings.initial_receive_timeout == 10.0
    assert settings.receive_timeout == 0.5
    assert settings.log_level == "info"


@pytest.mark.parametrize(
    "environ",
    [
        {"AMQSCHED_INITIAL_TIMEOUT": "soon"},
        {"AMQSCHED_RECEIVE_TIMEOUT": "-0.1"},
        {"AMQSCHED_RECEIVE_TIMEOUT": "inf"},
        {"AMQSCHED_INITIAL_TIMEOUT": "nan"},
        {"AMQSCHED_LOG_LEVEL": "chatty"},
        {"AMQSCHED_CONFIG": "/nonexistent/amqsched.yaml"},
    ],
)
def test_invalid_settings_raise_configuration_error(environ: dict[str, str]) -> None:
    with pytest.raises(ConfigurationError):
        load_settings(environ)


def test_unknown_file_keys_are_rejected(tmp_path: Path) -> None:
    config_path = tmp_path / "amqsched.yaml"
    config_path.write_text("broker_url: tcp://broker\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="unknown keys"):
        load_settings({"AMQSCHED_CONFIG": str(config_path)})


def test_with_overrides_ignores_missing_values() -> None:
    base = RuntimeSettings()

    assert base.with_overrides(receive_timeout=None) is base
    assert base.with_overrides(receive_timeout=1.5).receive_timeout == 1.5
