"""The scheduled wobble task: one tick of the evaluate, assemble, publish pipeline."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..mqtt.events import assemble
from ..mqtt.publisher import PublishOutcome, Publisher
from ..patterns.wobble import current_millis, evaluate
from ..topology.service import ConfigurationProvider
from ..topology.walker import walk
from .config import UndefinedPolicy, WobbleConfig

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """What a single tick computed and did"""

    now_ms: float
    value: Optional[int]
    event_count: int
    outcome: PublishOutcome


class WobbleScheduledTask:
    """Calculates the current wobble value and publishes it to every LED"""

    def __init__(
        self,
        config: WobbleConfig,
        provider: ConfigurationProvider,
        publisher: Publisher,
        clock: Callable[[], float] = current_millis,
    ):
        self.config = config
        self.provider = provider
        self.publisher = publisher
        self._clock = clock

    def _resolve_value(self, now_ms: float) -> Optional[int]:
        value = evaluate(now_ms, self.config.waveform)
        if value is not None:
            return value

        if self.config.undefined_policy == UndefinedPolicy.CLAMP:
            logger.warning(
                f"Wobble value undefined at {now_ms}, clamping to {self.config.waveform.min_value}"
            )
            return self.config.waveform.min_value

        logger.warning(f"Wobble value undefined at {now_ms}, publishing sentinel")
        return None

    def calculate_value(self, now_ms: Optional[float] = None) -> TickResult:
        """Run one tick; DeliveryError from the broker propagates"""
        if now_ms is None:
            now_ms = self._clock()

        value = self._resolve_value(now_ms)
        events = assemble(
            value,
            walk(self.provider.actor_config),
            self.config.mqtt.led_topic,
        )
        outcome = self.publisher.publish(events)
        return TickResult(now_ms=now_ms, value=value, event_count=len(events), outcome=outcome)

    __call__ = calculate_value
