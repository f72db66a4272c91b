"""Exceptions raised by the CPU temperature MQTT publisher."""


class CpuTempMqttError(Exception):
    """Base exception for the publisher."""


class ConfigurationError(CpuTempMqttError):
    """Settings are invalid or the settings file cannot be read."""


class SensorsUnavailableError(CpuTempMqttError):
    """The lm-sensors command is not installed."""


class HostIdentityError(CpuTempMqttError):
    """CPU model or manufacturer could not be determined."""


class TemperatureReadError(CpuTempMqttError):
    """A single temperature reading failed."""


class MQTTConnectionError(CpuTempMqttError):
    """The initial connection to the MQTT broker failed."""
