"""
Utility functions for the CPU temperature MQTT publisher.
"""

import re
from urllib.parse import urlsplit

from .constants import DEFAULT_MQTT_PORT, MQTT_DISCOVERY_PREFIX, SUPPORTED_BROKER_SCHEMES
from .exceptions import ConfigurationError
from .models import TopicSet

_DURATION_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(ms|s|m|h)?\s*$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def sanitize_identifier(name: str) -> str:
    """Sanitize a display name into a topic slug (lowercase, spaces to underscores).

    Punctuation and non-ASCII characters are left untouched.
    """
    return name.lower().replace(" ", "_")


def derive_topics(display_name: str) -> TopicSet:
    """Derive the state and config topics for a device display name."""
    slug = sanitize_identifier(display_name)
    base = f"{MQTT_DISCOVERY_PREFIX}/sensor/{slug}"
    return TopicSet(state=f"{base}/state", config=f"{base}/config")


def parse_broker_url(url: str) -> tuple:
    """Split a broker URL such as ``tcp://host:1883`` into ``(host, port)``."""
    parts = urlsplit(url if "://" in url else f"tcp://{url}")
    if parts.scheme not in SUPPORTED_BROKER_SCHEMES:
        raise ConfigurationError(f"Unsupported MQTT broker scheme in {url!r}")
    try:
        port = parts.port or DEFAULT_MQTT_PORT
    except ValueError as e:
        raise ConfigurationError(f"Invalid port in MQTT broker URL {url!r}") from e
    if not parts.hostname:
        raise ConfigurationError(f"Missing host in MQTT broker URL {url!r}")
    return parts.hostname, port


def parse_duration(value) -> float:
    """Parse an interval given as seconds or with a ms/s/m/h suffix."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = float(value)
    else:
        match = _DURATION_RE.match(str(value))
        if not match:
            raise ConfigurationError(f"Invalid duration: {value!r}")
        seconds = float(match.group(1)) * _DURATION_UNITS[match.group(2) or "s"]
    if seconds <= 0:
        raise ConfigurationError(f"Duration must be positive: {value!r}")
    return seconds
