"""Actor topology models, traversal and providers"""

from .models import ActorConfig, ActorDevice, LED, Strip
from .service import (
    ConfigurationProvider,
    ConfigurationService,
    StaticConfigurationProvider,
    parse_actor_config,
)
from .walker import LEDAddress, walk

__all__ = [
    "ActorConfig",
    "ActorDevice",
    "LED",
    "Strip",
    "ConfigurationProvider",
    "ConfigurationService",
    "StaticConfigurationProvider",
    "parse_actor_config",
    "LEDAddress",
    "walk",
]
