"""
Home Assistant MQTT Discovery module.
Handles the sensor discovery config and the periodic state messages.
"""

import json
import logging

from .constants import DEVICE_CLASS, UNIT_OF_MEASUREMENT, VALUE_TEMPLATE
from .models import DeviceIdentity, StateReading, TopicSet

logger = logging.getLogger(__name__)


class HomeAssistantDiscovery:
    """Publishes the temperature sensor to Home Assistant.

    Both messages go out with QoS 0 and without the retain flag. Discovery is
    announced again on every reconnect instead of relying on the broker.
    """

    def __init__(self, mqtt_client, identity: DeviceIdentity, topics: TopicSet):
        self.mqtt_client = mqtt_client
        self.identity = identity
        self.topics = topics

    def get_device_info(self) -> dict:
        """Get the device info block for MQTT Discovery."""
        return {
            "identifiers": [self.identity.device_id],
            "name": self.identity.display_name,
            "model": self.identity.model,
            "manufacturer": self.identity.manufacturer
        }

    def build_discovery_config(self) -> dict:
        """Build the discovery config for the temperature sensor."""
        return {
            "name": self.identity.sensor_name,
            "state_topic": self.topics.state,
            "unique_id": self.identity.unique_id,
            "device_class": DEVICE_CLASS,
            "unit_of_measurement": UNIT_OF_MEASUREMENT,
            "value_template": VALUE_TEMPLATE,
            "json_attributes_topic": self.topics.attributes,
            "device": self.get_device_info()
        }

    def build_state(self, temperature: float) -> StateReading:
        return StateReading(
            temperature=temperature,
            cpu_model=self.identity.model,
            cpu_manufacturer=self.identity.manufacturer
        )

    def publish_discovery_config(self) -> bool:
        """Publish the MQTT Discovery configuration.

        Returns True once the broker accepted the message. Serialization
        errors are logged and reported as False.
        """
        try:
            payload = encode_payload(self.build_discovery_config())
        except (TypeError, ValueError) as e:
            logger.error(f"Error encoding JSON: {e}")
            return False

        logger.debug(f"Publishing config payload: {payload}")
        if not self.mqtt_client.publish(self.topics.config, payload, retain=False, qos=0):
            logger.warning(f"Home Assistant autodiscovery config not delivered to {self.topics.config}")
            return False
        logger.info("Home Assistant autodiscovery config sent")
        return True

    def publish_state(self, temperature: float) -> bool:
        """Publish a temperature reading with the CPU attributes."""
        try:
            payload = encode_payload(self.build_state(temperature).as_dict())
        except (TypeError, ValueError) as e:
            logger.error(f"Error encoding JSON: {e}")
            return False

        logger.debug(f"Publishing temperature payload with attributes: {payload}")
        if not self.mqtt_client.publish(self.topics.state, payload, retain=False, qos=0):
            logger.warning(f"Temperature not delivered to {self.topics.state}")
            return False
        logger.info("Temperature and attributes sent to MQTT")
        return True


def encode_payload(data: dict) -> str:
    """Serialize a payload to compact JSON, rejecting NaN and infinity."""
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"), allow_nan=False)
