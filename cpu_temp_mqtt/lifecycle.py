"""
Connection lifecycle module.
Re-announces the Home Assistant discovery config on every (re)connect.
"""

import logging
import threading

from .exceptions import MQTTConnectionError
from .mqtt_client import ConnectedEvent, DisconnectedEvent

logger = logging.getLogger(__name__)


class ConnectionLifecycleController:
    """Owns the MQTT session and keeps Home Assistant discovery current.

    Home Assistant is not assumed to remember the sensor across broker
    restarts, so the config is published after every successful connect,
    the first one included.
    """

    def __init__(self, mqtt_client, discovery):
        self.mqtt_client = mqtt_client
        self.discovery = discovery
        self.announcements = 0
        self._announced = threading.Event()

        self.mqtt_client.add_connect_listener(self.on_connected)
        self.mqtt_client.add_disconnect_listener(self.on_connection_lost)

    def start(self, timeout: float = None) -> None:
        """Connect and wait until the first discovery config has been published.

        Any failure here is fatal for the process.
        """
        self.mqtt_client.connect()
        if timeout is None:
            timeout = self.mqtt_client.connect_timeout + self.mqtt_client.publish_timeout
        if not self._announced.wait(timeout):
            self.mqtt_client.disconnect()
            raise MQTTConnectionError("Connected, but the discovery config was never announced")

    def stop(self) -> None:
        self.mqtt_client.disconnect()

    def on_connected(self, event: ConnectedEvent) -> None:
        if event.reconnect:
            logger.info("Reconnected to MQTT broker, re-announcing discovery config")
        if self.discovery.publish_discovery_config():
            self.announcements += 1
        self._announced.set()

    def on_connection_lost(self, event: DisconnectedEvent) -> None:
        if event.expected:
            return
        logger.warning(
            f"Connection to MQTT broker lost ({event.reason}). "
            f"Attempting to reconnect every {self.mqtt_client.reconnect_interval}s..."
        )
