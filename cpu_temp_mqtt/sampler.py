"""
Sampling loop module.
Reads the CPU temperature on a fixed interval and publishes each reading.
"""

import logging
import time

from .exceptions import TemperatureReadError

logger = logging.getLogger(__name__)


class SamplingLoop:
    """Drives the temperature source and the state publisher.

    The interval is measured from the end of one tick to the start of the
    next, so drift accumulates and is not corrected.
    """

    def __init__(self, source, discovery, interval: float, sleep=time.sleep):
        self.source = source
        self.discovery = discovery
        self.interval = interval
        self.sleep = sleep
        self.running = False
        self.ticks = 0

    def tick(self) -> bool:
        """Take one reading and publish it. Returns True if a state was published."""
        try:
            temperature = self.source.read()
        except TemperatureReadError as e:
            logger.error(f"Error getting temperature: {e}")
            return False
        return self.discovery.publish_state(temperature)

    def run(self, max_ticks: int = None) -> None:
        """Run until stopped, or for ``max_ticks`` ticks when given."""
        self.running = True
        logger.info(f"Publishing CPU temperature every {self.interval}s")
        while self.running:
            self.tick()
            self.ticks += 1
            if max_ticks is not None and self.ticks >= max_ticks:
                break
            self.sleep(self.interval)
        self.running = False

    def stop(self) -> None:
        self.running = False
