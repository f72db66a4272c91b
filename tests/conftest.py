from unittest.mock import MagicMock

import pytest

from cpu_temp_mqtt.models import DeviceIdentity
from cpu_temp_mqtt.mqtt_client import ConnectedEvent, DisconnectedEvent
from cpu_temp_mqtt.utils import derive_topics


class RecordingTransport:
    """Stands in for MQTTClient and records every publish."""

    def __init__(self, result=True):
        self.result = result
        self.published = []
        self.connect_timeout = 1.0
        self.publish_timeout = 1.0
        self.reconnect_interval = 10
        self.connect_listeners = []
        self.disconnect_listeners = []
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.connect_error = None
        self.announce_on_connect = True

    def add_connect_listener(self, listener):
        self.connect_listeners.append(listener)

    def add_disconnect_listener(self, listener):
        self.disconnect_listeners.append(listener)

    def connect(self):
        self.connect_calls += 1
        if self.connect_error:
            raise self.connect_error
        if self.announce_on_connect:
            self.fire_connected(reconnect=self.connect_calls > 1)

    def fire_connected(self, reconnect=True):
        for listener in self.connect_listeners:
            listener(ConnectedEvent("broker.lan", 1883, reconnect))

    def fire_disconnected(self, reason="7", expected=False):
        for listener in self.disconnect_listeners:
            listener(DisconnectedEvent(reason, expected))

    def disconnect(self):
        self.disconnect_calls += 1

    def publish(self, topic, payload, retain=False, qos=0):
        self.published.append({"topic": topic, "payload": payload, "retain": retain, "qos": qos})
        return self.result

    def topics(self):
        return [message["topic"] for message in self.published]


@pytest.fixture
def identity():
    return DeviceIdentity(
        display_name="My CPU Sensor",
        unique_id="cpu_temperature_sensor",
        device_id="cpu_temperature_sensor_device",
        model="Intel(R) Core(TM) i7",
        manufacturer="GenuineIntel",
    )


@pytest.fixture
def topics(identity):
    return derive_topics(identity.display_name)


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def paho_client():
    """A fake paho client that acknowledges the connection on loop_start."""
    client = MagicMock()
    client.loop_start.side_effect = lambda: client.on_connect(client, None, {}, 0, None)
    info = MagicMock(rc=0)
    info.is_published.return_value = True
    client.publish.return_value = info
    return client
