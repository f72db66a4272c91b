"""Data models for the CPU temperature MQTT publisher."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DeviceIdentity:
    """Identity of the published sensor and the host it runs on."""

    display_name: str
    unique_id: str
    device_id: str
    model: str
    manufacturer: str

    @property
    def sensor_name(self) -> str:
        """Name shown for the sensor entity in Home Assistant."""
        return f"{self.display_name} Temperature"


@dataclass(frozen=True)
class TopicSet:
    """MQTT topics derived from the device display name.

    The state topic doubles as the JSON attributes topic.
    """

    state: str
    config: str

    @property
    def attributes(self) -> str:
        return self.state


@dataclass(frozen=True)
class StateReading:
    """A single temperature sample with the static CPU attributes."""

    temperature: float
    cpu_model: str
    cpu_manufacturer: str

    def as_dict(self) -> dict:
        return {
            "temperature": self.temperature,
            "cpu_model": self.cpu_model,
            "cpu_manufacturer": self.cpu_manufacturer,
        }
