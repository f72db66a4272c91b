"""
Settings module.
Builds the immutable runtime configuration from defaults, an optional
JSON settings file and command-line overrides.
"""

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path

from .constants import DEFAULT_SENSOR_LABEL, RECONNECT_INTERVAL_SECONDS
from .exceptions import ConfigurationError
from .utils import parse_broker_url, parse_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, constructed once at startup."""

    mqtt_broker: str = "tcp://localhost:1883"
    client_id: str = "go_temperature_sensor"
    device_name: str = "CPU Sensor"
    unique_id: str = "cpu_temperature_sensor"
    device_id: str = "cpu_temperature_sensor_device"
    interval: float = 10.0
    debug: bool = False
    mqtt_username: str = ""
    mqtt_password: str = ""
    sensor_label: str = DEFAULT_SENSOR_LABEL
    connect_timeout: float = 30.0
    publish_timeout: float = 10.0
    reconnect_interval: int = RECONNECT_INTERVAL_SECONDS

    @property
    def broker_address(self) -> tuple:
        return parse_broker_url(self.mqtt_broker)

    def validate(self) -> "Settings":
        """Check values that cannot be fixed at runtime and normalize durations."""
        for f in fields(self):
            value = getattr(self, f.name)
            # durations are parsed below and accept strings such as "30s"
            if f.type is float:
                continue
            if isinstance(value, bool) != (f.type is bool) or not isinstance(value, f.type):
                raise ConfigurationError(
                    f"{f.name} must be of type {f.type.__name__}, got {type(value).__name__}"
                )
        parse_broker_url(self.mqtt_broker)
        if not self.device_name.strip():
            raise ConfigurationError("device_name must not be empty")
        if self.reconnect_interval <= 0:
            raise ConfigurationError("reconnect_interval must be positive")
        return replace(
            self,
            interval=parse_duration(self.interval),
            connect_timeout=parse_duration(self.connect_timeout),
            publish_timeout=parse_duration(self.publish_timeout),
        )

    def safe_dict(self) -> dict:
        """Settings as a dict with the password masked, for logging."""
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result["mqtt_password"] = "****" if self.mqtt_password else ""
        return result


def load_settings_file(path) -> dict:
    """Load a JSON settings file, keeping only keys that Settings knows about."""
    settings_path = Path(path)
    try:
        with open(settings_path, "r") as f:
            loaded = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Error loading settings from {settings_path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Settings file {settings_path} must contain a JSON object")

    known = {f.name for f in fields(Settings)}
    for key in sorted(set(loaded) - known):
        logger.warning(f"Ignoring unknown setting {key!r} in {settings_path}")
    logger.info(f"Settings loaded from {settings_path}")
    return {key: value for key, value in loaded.items() if key in known}


def build_settings(config_path=None, overrides: dict = None) -> Settings:
    """Merge defaults, the settings file and overrides into validated Settings.

    ``None`` values in ``overrides`` mean "not given" and are skipped.
    """
    values = {}
    if config_path:
        values.update(load_settings_file(config_path))
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value
    try:
        settings = Settings(**values)
    except TypeError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
    return settings.validate()
