"""
Telemetry Collection module.
Reads the CPU temperature and the static CPU identity of the host.
"""

import logging
import re
import shutil
import subprocess
from pathlib import Path

from .constants import (
    CPUINFO_PATH,
    DEFAULT_SENSOR_LABEL,
    SENSORS_COMMAND,
    SENSORS_TIMEOUT_SECONDS,
)
from .exceptions import HostIdentityError, SensorsUnavailableError, TemperatureReadError
from .models import DeviceIdentity

logger = logging.getLogger(__name__)


def check_sensors_command(command: str = SENSORS_COMMAND) -> str:
    """Return the path of the lm-sensors command, failing if it is not installed."""
    path = shutil.which(command)
    if not path:
        raise SensorsUnavailableError(
            f"'{command}' command not found. Please install 'lm-sensors' package."
        )
    return path


def parse_temperature(output: str, label: str = DEFAULT_SENSOR_LABEL) -> float:
    """Extract the temperature for ``label`` from ``sensors`` output.

    Any miss fails the whole reading; there is no partial fallback.
    """
    pattern = re.compile(rf"^{re.escape(label)}:\s+\+([0-9.]+)°C", re.MULTILINE)
    match = pattern.search(output)
    if not match:
        raise TemperatureReadError(f"temperature not found in sensors output (label {label!r})")
    try:
        return float(match.group(1))
    except ValueError as e:
        raise TemperatureReadError(f"invalid temperature value {match.group(1)!r}") from e


class TemperatureSource:
    """Queries lm-sensors for the CPU package temperature in Celsius."""

    def __init__(self, label: str = DEFAULT_SENSOR_LABEL, command: str = SENSORS_COMMAND):
        self.label = label
        self.command = command

    def check(self) -> None:
        """Fail startup when the sensors command is missing."""
        check_sensors_command(self.command)

    def read(self) -> float:
        """Run the sensors command once and return the temperature."""
        try:
            output = subprocess.check_output(
                [self.command],
                text=True,
                timeout=SENSORS_TIMEOUT_SECONDS
            )
        except (OSError, subprocess.SubprocessError, UnicodeDecodeError) as e:
            raise TemperatureReadError(f"error running {self.command}: {e}") from e

        temperature = parse_temperature(output, self.label)
        logger.debug(f"Read temperature {temperature} °C for label {self.label!r}")
        return temperature


def parse_cpuinfo(text: str) -> tuple:
    """Return ``(model, manufacturer)`` from the contents of /proc/cpuinfo."""
    model = ""
    manufacturer = ""
    for line in text.splitlines():
        if line.startswith("model name"):
            parts = line.split(":", 1)
            if len(parts) > 1:
                model = parts[1].strip()
        if line.startswith("vendor_id"):
            parts = line.split(":", 1)
            if len(parts) > 1:
                manufacturer = parts[1].strip()

    if not model or not manufacturer:
        raise HostIdentityError("could not find CPU information in /proc/cpuinfo")
    return model, manufacturer


def get_cpu_info(path: str = CPUINFO_PATH) -> tuple:
    """Get the CPU model and manufacturer from /proc/cpuinfo."""
    try:
        text = Path(path).read_text()
    except OSError as e:
        raise HostIdentityError(f"error reading {path}: {e}") from e
    return parse_cpuinfo(text)


def resolve_device_identity(settings, cpuinfo_path: str = CPUINFO_PATH) -> DeviceIdentity:
    """Build the process-wide device identity from settings and host metadata."""
    model, manufacturer = get_cpu_info(cpuinfo_path)
    logger.info(f"CPU identified: {model} ({manufacturer})")
    return DeviceIdentity(
        display_name=settings.device_name,
        unique_id=settings.unique_id,
        device_id=settings.device_id,
        model=model,
        manufacturer=manufacturer,
    )
