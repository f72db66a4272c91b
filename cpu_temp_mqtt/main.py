"""
CPU Temperature MQTT Publisher
Publishes the host CPU temperature to Home Assistant via MQTT Discovery.

Features:
- Home Assistant discovery config re-announced on every broker (re)connect
- Automatic reconnect with a fixed 10 second retry interval
- CPU model and vendor attached to every reading as sensor attributes
"""

import argparse
import logging
import signal
import sys
import threading

from .discovery import HomeAssistantDiscovery
from .exceptions import CpuTempMqttError
from .lifecycle import ConnectionLifecycleController
from .mqtt_client import MQTTClient
from .sampler import SamplingLoop
from .settings import Settings, build_settings
from .telemetry import TemperatureSource, resolve_device_identity
from .utils import derive_topics

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

EPILOG = """\
Example command:
  cpu-temp-mqtt --mqtt-broker=tcp://192.168.1.100:1883 --device-name="My CPU Sensor" --interval=30s

In this example, the program will publish CPU temperature to the MQTT broker at tcp://192.168.1.100:1883,
with the device named 'My CPU Sensor', and it will send updates every 30 seconds.
"""


def setup_logging(debug: bool = False) -> None:
    """Configure root logging, DEBUG when the verbose toggle is set."""
    logging.basicConfig(
        format=LOG_FORMAT,
        level=logging.DEBUG if debug else logging.INFO,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    defaults = Settings()
    parser = argparse.ArgumentParser(
        prog="cpu-temp-mqtt",
        description="Monitors CPU temperature and publishes it to an MQTT broker with Home Assistant autodiscovery.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", metavar="PATH", help="JSON settings file applied before command-line options")
    parser.add_argument("--mqtt-broker", dest="mqtt_broker",
                        help=f"MQTT broker URL (default: {defaults.mqtt_broker})")
    parser.add_argument("--client-id", dest="client_id",
                        help=f"MQTT client ID (default: {defaults.client_id})")
    parser.add_argument("--device-name", dest="device_name",
                        help=f"Name of the device (default: {defaults.device_name})")
    parser.add_argument("--unique-id", dest="unique_id",
                        help=f"Unique ID for the sensor (default: {defaults.unique_id})")
    parser.add_argument("--device-id", dest="device_id",
                        help=f"Device ID (default: {defaults.device_id})")
    parser.add_argument("--interval",
                        help="Interval between temperature readings, e.g. 30, 30s or 1m (default: 10s)")
    parser.add_argument("--mqtt-username", dest="mqtt_username", help="MQTT username")
    parser.add_argument("--mqtt-password", dest="mqtt_password", help="MQTT password")
    parser.add_argument("--sensor-label", dest="sensor_label",
                        help=f"Label of the temperature line in 'sensors' output (default: {defaults.sensor_label})")
    parser.add_argument("--debug", action="store_true", default=None,
                        help="Enable debug mode to see detailed logs")
    parser.add_argument("--once", action="store_true",
                        help="Publish a single reading and exit")
    return parser


class Publisher:
    """Wires the components together and runs the daemon."""

    def __init__(self, settings: Settings, source: TemperatureSource = None, mqtt_client: MQTTClient = None):
        self.settings = settings
        self.source = source or TemperatureSource(label=settings.sensor_label)
        self.topics = derive_topics(settings.device_name)
        self.identity = None
        self.mqtt_client = mqtt_client
        self.discovery = None
        self.controller = None
        self.sampler = None
        self._stop = threading.Event()

    def _build_mqtt_client(self) -> MQTTClient:
        host, port = self.settings.broker_address
        return MQTTClient(
            host,
            port,
            client_id=self.settings.client_id,
            username=self.settings.mqtt_username,
            password=self.settings.mqtt_password,
            connect_timeout=self.settings.connect_timeout,
            publish_timeout=self.settings.publish_timeout,
            reconnect_interval=self.settings.reconnect_interval,
        )

    def start(self) -> None:
        """Run every startup step; any failure here is fatal."""
        self.source.check()
        self.identity = resolve_device_identity(self.settings)
        logger.debug(f"Settings: {self.settings.safe_dict()}")
        logger.debug(f"State topic: {self.topics.state}, config topic: {self.topics.config}")

        if self.mqtt_client is None:
            self.mqtt_client = self._build_mqtt_client()
        self.discovery = HomeAssistantDiscovery(self.mqtt_client, self.identity, self.topics)
        self.controller = ConnectionLifecycleController(self.mqtt_client, self.discovery)
        self.controller.start()

        self.sampler = SamplingLoop(
            self.source,
            self.discovery,
            self.settings.interval,
            sleep=self._stop.wait
        )

    def run(self, max_ticks: int = None) -> None:
        try:
            self.sampler.run(max_ticks=max_ticks)
        finally:
            self.controller.stop()

    def stop(self, *_args) -> None:
        logger.info("Stopping CPU temperature publisher...")
        if self.sampler:
            self.sampler.stop()
        self._stop.set()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if key not in ("config", "once")}

    setup_logging(bool(args.debug))
    try:
        settings = build_settings(args.config, overrides)
    except CpuTempMqttError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1
    setup_logging(settings.debug)

    publisher = Publisher(settings)
    try:
        publisher.start()
    except CpuTempMqttError as e:
        logger.critical(f"Startup failed: {e}")
        return 1

    signal.signal(signal.SIGTERM, publisher.stop)
    try:
        publisher.run(max_ticks=1 if args.once else None)
    except KeyboardInterrupt:
        publisher.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
