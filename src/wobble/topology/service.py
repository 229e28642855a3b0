"""Configuration providers that supply the actor topology."""

import logging
from pathlib import Path
from typing import Optional, Protocol, Tuple, Union

import pydantic
import yaml

from ..common.exceptions import ConfigurationError, ValidationError
from .models import ActorConfig

logger = logging.getLogger(__name__)


class ConfigurationProvider(Protocol):
    """Anything that can hand out the current topology snapshot"""

    @property
    def actor_config(self) -> Optional[ActorConfig]:
        """Current topology, or None if none is loaded"""
        ...


class StaticConfigurationProvider:
    """Provider holding a fixed topology, mainly for tests and one-off runs"""

    def __init__(self, actor_config: Optional[ActorConfig] = None):
        self._actor_config = actor_config

    @property
    def actor_config(self) -> Optional[ActorConfig]:
        return self._actor_config

    def set(self, actor_config: Optional[ActorConfig]) -> None:
        self._actor_config = actor_config


class ConfigurationService:
    """Loads the actor topology from a YAML or JSON file.

    A missing file is not an error: the service simply reports no
    topology until the file appears. ``refresh()`` re-reads the file
    while the snapshot has no LEDs or when the file has changed on disk.
    A file that exists but cannot be parsed or validated raises.
    """

    def __init__(self, path: Optional[Union[str, Path]]):
        self.path = Path(path) if path is not None else None
        self._actor_config: Optional[ActorConfig] = None
        self._stamp: Optional[Tuple[int, int]] = None

    @property
    def actor_config(self) -> Optional[ActorConfig]:
        return self._actor_config

    def _file_stamp(self) -> Optional[Tuple[int, int]]:
        if self.path is None:
            return None
        try:
            st = self.path.stat()
        except FileNotFoundError:
            return None
        return st.st_mtime_ns, st.st_size

    def refresh(self) -> Optional[ActorConfig]:
        """Re-read the topology if it has no LEDs or the file changed"""
        if (
            self._actor_config is None
            or self._actor_config.led_count == 0
            or self._file_stamp() != self._stamp
        ):
            return self.reload()
        return self._actor_config

    def reload(self) -> Optional[ActorConfig]:
        """Re-read the topology file"""
        if self.path is None or not self.path.exists():
            logger.debug(f"No actor config at {self.path}")
            self._actor_config = None
            self._stamp = None
            return None

        self._stamp = self._file_stamp()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read actor config {self.path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid actor config {self.path}: {e}") from e

        self._actor_config = parse_actor_config(data)
        logger.info(
            f"Loaded actor config from {self.path}: "
            f"{len(self._actor_config.actor_devices)} devices, "
            f"{self._actor_config.led_count} LEDs"
        )
        return self._actor_config


def parse_actor_config(data) -> ActorConfig:
    """Validate raw topology data"""
    if data is None:
        return ActorConfig()
    if not isinstance(data, dict):
        raise ValidationError("Actor config must be a mapping")
    try:
        return ActorConfig.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid actor config: {e}") from e
