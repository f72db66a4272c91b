"""
CPU Temperature MQTT Publisher
Publishes the host CPU temperature to Home Assistant via MQTT Discovery.
"""

from .constants import (
    MQTT_DISCOVERY_PREFIX,
    DEFAULT_MQTT_PORT,
    RECONNECT_INTERVAL_SECONDS,
    DEFAULT_SENSOR_LABEL
)
from .exceptions import (
    CpuTempMqttError,
    ConfigurationError,
    SensorsUnavailableError,
    HostIdentityError,
    TemperatureReadError,
    MQTTConnectionError
)
from .models import DeviceIdentity, TopicSet, StateReading
from .utils import sanitize_identifier, derive_topics
from .mqtt_client import MQTTClient, ConnectedEvent, DisconnectedEvent
from .telemetry import TemperatureSource, get_cpu_info, resolve_device_identity
from .discovery import HomeAssistantDiscovery
from .lifecycle import ConnectionLifecycleController
from .sampler import SamplingLoop
from .settings import Settings, build_settings

__version__ = "1.0.0"

__all__ = [
    'MQTT_DISCOVERY_PREFIX',
    'DEFAULT_MQTT_PORT',
    'RECONNECT_INTERVAL_SECONDS',
    'DEFAULT_SENSOR_LABEL',
    'CpuTempMqttError',
    'ConfigurationError',
    'SensorsUnavailableError',
    'HostIdentityError',
    'TemperatureReadError',
    'MQTTConnectionError',
    'DeviceIdentity',
    'TopicSet',
    'StateReading',
    'sanitize_identifier',
    'derive_topics',
    'MQTTClient',
    'ConnectedEvent',
    'DisconnectedEvent',
    'TemperatureSource',
    'get_cpu_info',
    'resolve_device_identity',
    'HomeAssistantDiscovery',
    'ConnectionLifecycleController',
    'SamplingLoop',
    'Settings',
    'build_settings',
]
