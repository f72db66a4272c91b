"""
MQTT Client module.
Handles the broker session, automatic reconnects and blocking publishes.
"""

import logging
import queue
import threading
from dataclasses import dataclass

import paho.mqtt.client as mqtt

from .constants import DEFAULT_MQTT_PORT, MQTT_KEEPALIVE_SECONDS, RECONNECT_INTERVAL_SECONDS
from .exceptions import MQTTConnectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectedEvent:
    """Emitted every time the broker acknowledges a connection."""

    host: str
    port: int
    reconnect: bool


@dataclass(frozen=True)
class DisconnectedEvent:
    """Emitted when the broker connection is lost or closed."""

    reason: str
    expected: bool


class MQTTClient:
    """Handles MQTT connection and publishing.

    Paho callbacks run on the network thread and only enqueue events.
    Listeners are called from a separate dispatcher thread, so they may
    block on publish acknowledgements.
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_MQTT_PORT,
        client_id: str = "",
        username: str = "",
        password: str = "",
        connect_timeout: float = 30.0,
        publish_timeout: float = 10.0,
        reconnect_interval: int = RECONNECT_INTERVAL_SECONDS,
        client_factory=None,
    ):
        self.host = host
        self.port = port
        self.client_id = client_id
        self.username = username
        self.password = password
        self.connect_timeout = connect_timeout
        self.publish_timeout = publish_timeout
        self.reconnect_interval = reconnect_interval
        self._client_factory = client_factory or self._default_client
        self.client = None
        self.connected = False

        self._connect_listeners = []
        self._disconnect_listeners = []
        self._events = queue.Queue()
        self._dispatcher = None
        self._first_connack = threading.Event()
        self._connack_reason = None
        self._connect_count = 0
        self._closing = False

    def _default_client(self):
        return mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=self.client_id)

    def add_connect_listener(self, listener) -> None:
        """Subscribe ``listener(ConnectedEvent)`` to every successful (re)connect."""
        self._connect_listeners.append(listener)

    def add_disconnect_listener(self, listener) -> None:
        """Subscribe ``listener(DisconnectedEvent)`` to connection loss."""
        self._disconnect_listeners.append(listener)

    def connect(self) -> None:
        """Connect to the broker and wait for the first acknowledgement.

        Raises MQTTConnectionError if the broker is unreachable, refuses the
        connection or does not answer within ``connect_timeout``.
        """
        if self.client:
            self.disconnect()

        self._closing = False
        self._first_connack.clear()
        self._connack_reason = None
        self.client = self._client_factory()

        if self.username:
            self.client.username_pw_set(self.username, self.password or None)

        # Fixed retry interval with unlimited attempts
        self.client.reconnect_delay_set(
            min_delay=self.reconnect_interval,
            max_delay=self.reconnect_interval
        )
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

        logger.info(f"Connecting to MQTT broker at {self.host}:{self.port}")
        try:
            self.client.connect(self.host, self.port, keepalive=MQTT_KEEPALIVE_SECONDS)
        except (OSError, ValueError) as e:
            self.client = None
            raise MQTTConnectionError(f"Failed to connect to MQTT broker at {self.host}:{self.port}: {e}") from e

        self._start_dispatcher()
        self.client.loop_start()

        if not self._first_connack.wait(self.connect_timeout):
            self.disconnect()
            raise MQTTConnectionError(
                f"Timed out after {self.connect_timeout}s waiting for MQTT broker at {self.host}:{self.port}"
            )
        if not self.connected:
            reason = self._connack_reason
            self.disconnect()
            raise MQTTConnectionError(f"MQTT broker refused connection: {reason}")

    def disconnect(self):
        """Disconnect from the MQTT broker and stop the dispatcher."""
        self._closing = True
        if self.client:
            self.client.loop_stop()
            self.client.disconnect()
            self.client = None
        self.connected = False
        self._stop_dispatcher()

    def publish(self, topic: str, payload: str, retain: bool = False, qos: int = 0) -> bool:
        """Publish a message and block until it is sent or ``publish_timeout`` elapses.

        Must not be called from the paho network thread.
        """
        if not self.client or not self.connected:
            logger.warning(f"Not connected, dropping message for {topic}")
            return False
        try:
            info = self.client.publish(topic, payload, qos=qos, retain=retain)
            if info.rc != mqtt.MQTT_ERR_SUCCESS:
                logger.error(f"Error publishing to {topic}: rc={info.rc}")
                return False
            info.wait_for_publish(timeout=self.publish_timeout)
            if not info.is_published():
                logger.warning(f"Publish to {topic} not confirmed within {self.publish_timeout}s")
                return False
            return True
        except (OSError, RuntimeError, ValueError) as e:
            logger.error(f"Error publishing to {topic}: {e}")
            return False

    def _drain_events(self) -> int:
        """Deliver every queued lifecycle event on the calling thread."""
        delivered = 0
        while True:
            try:
                event = self._events.get_nowait()
            except queue.Empty:
                return delivered
            if event is not None:
                self._deliver(event)
                delivered += 1

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        if reason_code == 0:
            self.connected = True
            self._connect_count += 1
            logger.info(f"Connected to MQTT broker at {self.host}:{self.port}")
            self._events.put(ConnectedEvent(self.host, self.port, self._connect_count > 1))
        else:
            self.connected = False
            self._connack_reason = reason_code
            logger.error(f"Failed to connect to MQTT broker: {reason_code}")
        self._first_connack.set()

    def _on_disconnect(self, client, userdata, flags, reason_code, properties):
        was_connected = self.connected
        self.connected = False
        if self._closing:
            logger.info("Disconnected from MQTT broker")
        elif was_connected:
            logger.debug(f"MQTT connection dropped: {reason_code}")
        else:
            return
        self._events.put(DisconnectedEvent(str(reason_code), self._closing))

    def _deliver(self, event):
        if isinstance(event, ConnectedEvent):
            listeners = self._connect_listeners
        else:
            listeners = self._disconnect_listeners
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Error in MQTT event listener for {type(event).__name__}")

    def _dispatch_loop(self):
        while True:
            event = self._events.get()
            if event is None:
                return
            self._deliver(event)

    def _start_dispatcher(self):
        if self._dispatcher and self._dispatcher.is_alive():
            return
        self._dispatcher = threading.Thread(
            target=self._dispatch_loop,
            name="mqtt-event-dispatcher",
            daemon=True
        )
        self._dispatcher.start()

    def _stop_dispatcher(self):
        if not self._dispatcher:
            return
        self._events.put(None)
        if self._dispatcher is not threading.current_thread():
            self._dispatcher.join(timeout=self.publish_timeout)
        self._dispatcher = None
