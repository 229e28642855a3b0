"""Batch publisher with idle backoff."""

import logging
import time
from enum import Enum
from typing import Callable, Sequence

from .client import BrokerClient
from .events import MQTTEvent

logger = logging.getLogger(__name__)


class PublishOutcome(Enum):
    """Which path a publish call took"""

    DELIVERED = "delivered"
    IDLE = "idle"


class Publisher:
    """Hands event batches to the broker client.

    A non-empty batch is submitted in one ``publish_batch`` call and any
    DeliveryError propagates to the caller untouched. An empty batch never
    reaches the broker; the calling thread sleeps for ``idle_delay_ms``
    instead so the scheduler does not spin while no topology is loaded.
    """

    def __init__(
        self,
        client: BrokerClient,
        idle_delay_ms: int,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.idle_delay_ms = idle_delay_ms
        self._sleep = sleep

    def publish(self, events: Sequence[MQTTEvent]) -> PublishOutcome:
        if events:
            self.client.publish_batch(events)
            return PublishOutcome.DELIVERED

        logger.info(".")
        self._sleep(self.idle_delay_ms / 1000.0)
        return PublishOutcome.IDLE
