"""Fixed-rate, non-overlapping tick scheduling."""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..mqtt.publisher import PublishOutcome

logger = logging.getLogger(__name__)


@dataclass
class SchedulerMetrics:
    """Tick counters and timing"""

    tick_count: int = 0
    idle_ticks: int = 0
    failed_ticks: int = 0
    overruns: int = 0
    last_error: str = ""

    # Track last 60 ticks
    tick_times_ms: List[float] = field(default_factory=list)
    max_tick_times: int = 60

    def record_tick(self, duration_ms: float) -> None:
        self.tick_count += 1
        self.tick_times_ms.append(duration_ms)
        if len(self.tick_times_ms) > self.max_tick_times:
            self.tick_times_ms.pop(0)

    def record_error(self, error: Exception) -> None:
        self.failed_ticks += 1
        self.last_error = str(error)

    def get_metrics(self) -> Dict[str, Any]:
        avg = (
            sum(self.tick_times_ms) / len(self.tick_times_ms)
            if self.tick_times_ms
            else 0.0
        )
        return {
            "tick_count": self.tick_count,
            "idle_ticks": self.idle_ticks,
            "failed_ticks": self.failed_ticks,
            "overruns": self.overruns,
            "avg_tick_time_ms": avg,
            "last_error": self.last_error,
        }


class FixedRateScheduler:
    """Runs a task every ``rate_ms`` on the calling thread.

    Ticks never overlap: a tick that takes longer than the rate (the idle
    backoff always does) delays the next one, which then starts
    immediately. Exceptions from a tick are logged and counted, and the
    next tick is an independent attempt.
    """

    def __init__(
        self,
        task: Callable[[], Any],
        rate_ms: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.task = task
        self.rate_ms = rate_ms
        self.metrics = SchedulerMetrics()
        self._clock = clock
        self._stop = threading.Event()

    @property
    def running(self) -> bool:
        return not self._stop.is_set()

    def stop(self) -> None:
        """Request the loop to exit after the current tick"""
        self._stop.set()

    def run_once(self) -> None:
        start = self._clock()
        try:
            result = self.task()
            if getattr(result, "outcome", None) == PublishOutcome.IDLE:
                self.metrics.idle_ticks += 1
        except Exception as e:
            self.metrics.record_error(e)
            logger.error(f"Scheduled tick failed: {e}")
        finally:
            self.metrics.record_tick((self._clock() - start) * 1000)

    def run(self, max_ticks: Optional[int] = None) -> None:
        """Tick until stopped or ``max_ticks`` ticks have run"""
        self._stop.clear()
        period = self.rate_ms / 1000.0
        next_run = self._clock()
        ticks = 0
        logger.info(f"Scheduler started at a rate of {self.rate_ms}ms")

        while not self._stop.is_set():
            if max_ticks is not None and ticks >= max_ticks:
                break

            self.run_once()
            ticks += 1

            next_run += period
            delay = next_run - self._clock()
            if delay > 0:
                self._stop.wait(delay)
            else:
                # Behind schedule, start the next tick now
                self.metrics.overruns += 1
                next_run = self._clock()

        logger.info(f"Scheduler stopped after {self.metrics.tick_count} ticks")
