"""Core wobble components: configuration, task and scheduling.

The task and scheduler live in ``wobble.core.task`` and
``wobble.core.scheduler``; they are not re-exported here because they
depend on the mqtt and patterns packages, which themselves import the
configuration.
"""

from ..common.exceptions import ConfigurationError, ValidationError
from .config import (
    MQTTConfig,
    SchedulerConfig,
    SystemDefaults,
    TopologyConfig,
    UndefinedPolicy,
    WaveformConfig,
    WobbleConfig,
)

__all__ = [
    "MQTTConfig",
    "SchedulerConfig",
    "SystemDefaults",
    "TopologyConfig",
    "UndefinedPolicy",
    "WaveformConfig",
    "WobbleConfig",
    "ConfigurationError",
    "ValidationError",
]
