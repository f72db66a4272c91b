"""
Constants used throughout the CPU temperature MQTT publisher.
"""

# MQTT Configuration
MQTT_DISCOVERY_PREFIX = "homeassistant"
DEFAULT_MQTT_PORT = 1883
MQTT_KEEPALIVE_SECONDS = 60
RECONNECT_INTERVAL_SECONDS = 10  # Fixed retry interval, no backoff growth
SUPPORTED_BROKER_SCHEMES = ("tcp", "mqtt")

# Home Assistant sensor description
DEVICE_CLASS = "temperature"
UNIT_OF_MEASUREMENT = "°C"
VALUE_TEMPLATE = "{{ value_json.temperature }}"

# Temperature source
SENSORS_COMMAND = "sensors"
SENSORS_TIMEOUT_SECONDS = 5
DEFAULT_SENSOR_LABEL = "Package id 0"
CPUINFO_PATH = "/proc/cpuinfo"
