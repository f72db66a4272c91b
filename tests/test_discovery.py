import json

import pytest

from cpu_temp_mqtt.discovery import HomeAssistantDiscovery, encode_payload
from cpu_temp_mqtt.models import DeviceIdentity


def test_discovery_config_shape(transport, identity, topics):
    discovery = HomeAssistantDiscovery(transport, identity, topics)

    config = discovery.build_discovery_config()

    assert config == {
        "name": "My CPU Sensor Temperature",
        "state_topic": "homeassistant/sensor/my_cpu_sensor/state",
        "unique_id": "cpu_temperature_sensor",
        "device_class": "temperature",
        "unit_of_measurement": "°C",
        "value_template": "{{ value_json.temperature }}",
        "json_attributes_topic": "homeassistant/sensor/my_cpu_sensor/state",
        "device": {
            "identifiers": ["cpu_temperature_sensor_device"],
            "name": "My CPU Sensor",
            "model": "Intel(R) Core(TM) i7",
            "manufacturer": "GenuineIntel",
        },
    }


@pytest.mark.parametrize("device_id", ["rack-7", "", "id with spaces", "ünï"])
def test_device_identifiers_is_single_device_id(transport, topics, device_id):
    identity = DeviceIdentity("Box", "uid", device_id, "Model", "Vendor")
    discovery = HomeAssistantDiscovery(transport, identity, topics)

    assert discovery.get_device_info()["identifiers"] == [device_id]


def test_publish_discovery_config_not_retained_on_config_topic(transport, identity, topics):
    discovery = HomeAssistantDiscovery(transport, identity, topics)

    assert discovery.publish_discovery_config() is True

    [message] = transport.published
    assert message["topic"] == "homeassistant/sensor/my_cpu_sensor/config"
    assert message["retain"] is False
    assert message["qos"] == 0
    assert json.loads(message["payload"]) == discovery.build_discovery_config()


def test_state_payload_for_documented_scenario(transport, identity, topics):
    discovery = HomeAssistantDiscovery(transport, identity, topics)

    assert discovery.publish_state(45.2) is True

    [message] = transport.published
    assert message["topic"] == "homeassistant/sensor/my_cpu_sensor/state"
    assert message["payload"] == (
        '{"temperature":45.2,"cpu_model":"Intel(R) Core(TM) i7","cpu_manufacturer":"GenuineIntel"}'
    )
    assert message["retain"] is False
    assert message["qos"] == 0


@pytest.mark.parametrize("temperature", [45.2, 0.0, -3.5, 101.9, 38.0])
def test_state_payload_temperature_survives_decoding(transport, identity, topics, temperature):
    discovery = HomeAssistantDiscovery(transport, identity, topics)
    discovery.publish_state(temperature)

    decoded = json.loads(transport.published[0]["payload"])
    assert decoded["temperature"] == temperature


def test_unserializable_state_is_logged_and_skipped(transport, identity, topics, caplog):
    discovery = HomeAssistantDiscovery(transport, identity, topics)

    assert discovery.publish_state(float("nan")) is False

    assert transport.published == []
    assert "Error encoding JSON" in caplog.text


def test_failed_publish_is_reported_not_raised(transport, identity, topics):
    transport.result = False
    discovery = HomeAssistantDiscovery(transport, identity, topics)

    assert discovery.publish_discovery_config() is False
    assert discovery.publish_state(40.0) is False
    assert len(transport.published) == 2


def test_encode_payload_rejects_infinity():
    with pytest.raises(ValueError):
        encode_payload({"temperature": float("inf")})
