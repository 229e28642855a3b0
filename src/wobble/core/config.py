"""Configuration for the wobble publisher."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Dict, Optional, Union
import logging

import yaml

from ..common.exceptions import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class SystemDefaults:
    """Pattern, scheduling and broker constants"""

    # Wobble pattern
    DEFAULT_WOBBLE_PERIOD_MS: ClassVar[int] = 3
    DEFAULT_MIN_VALUE: ClassVar[int] = 0
    DEFAULT_MAX_VALUE: ClassVar[int] = 60

    # Scheduling
    DEFAULT_WOBBLE_SEND_RATE_MS: ClassVar[int] = 3
    DEFAULT_UNSUCCESSFUL_TASK_DELAY_MS: ClassVar[int] = 1000

    # MQTT
    DEFAULT_MQTT_HOST: ClassVar[str] = "localhost"
    DEFAULT_MQTT_PORT: ClassVar[int] = 1883
    DEFAULT_MQTT_KEEPALIVE: ClassVar[int] = 60
    DEFAULT_MQTT_CLIENT_ID: ClassVar[str] = "sentient-wobble"
    DEFAULT_MQTT_QOS: ClassVar[int] = 0
    DEFAULT_LED_TOPIC: ClassVar[str] = "led"

    # Wire value used for an intensity that could not be computed
    UNDEFINED_INTENSITY: ClassVar[int] = -1

    @classmethod
    def get_all_defaults(cls) -> Dict[str, Any]:
        """Get all default values as a dictionary"""
        return {
            name: value
            for name, value in vars(cls).items()
            if (
                not name.startswith("_")
                and isinstance(value, (int, float, str, bool))
                and name.startswith("DEFAULT_")
            )
        }


class UndefinedPolicy(str, Enum):
    """What to publish when the waveform yields no value"""

    EMIT = "emit"  # publish the wire sentinel
    CLAMP = "clamp"  # publish min_value instead


@dataclass
class WaveformConfig:
    """Wobble waveform shape"""

    period_ms: int = SystemDefaults.DEFAULT_WOBBLE_PERIOD_MS
    min_value: int = SystemDefaults.DEFAULT_MIN_VALUE
    max_value: int = SystemDefaults.DEFAULT_MAX_VALUE

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Validate waveform settings"""
        if self.period_ms <= 0:
            raise ValidationError("Wobble period must be greater than 0")
        if self.max_value <= self.min_value:
            raise ValidationError(
                f"Max value {self.max_value} must be greater than min value {self.min_value}"
            )

    @property
    def wave_length(self) -> int:
        """Length of one full rise and fall in milliseconds"""
        return (self.max_value - self.min_value) * self.period_ms

    @property
    def half_wave_length(self) -> float:
        return self.wave_length / 2


@dataclass
class SchedulerConfig:
    """Tick scheduling settings"""

    send_rate_ms: int = SystemDefaults.DEFAULT_WOBBLE_SEND_RATE_MS
    unsuccessful_task_delay_ms: int = SystemDefaults.DEFAULT_UNSUCCESSFUL_TASK_DELAY_MS

    def validate(self) -> None:
        """Validate scheduling settings"""
        if self.send_rate_ms <= 0:
            raise ValidationError("Send rate must be greater than 0")
        if self.unsuccessful_task_delay_ms < 0:
            raise ValidationError("Unsuccessful task delay must not be negative")


@dataclass
class MQTTConfig:
    """Broker connection and topic settings"""

    host: str = SystemDefaults.DEFAULT_MQTT_HOST
    port: int = SystemDefaults.DEFAULT_MQTT_PORT
    keepalive: int = SystemDefaults.DEFAULT_MQTT_KEEPALIVE
    client_id: str = SystemDefaults.DEFAULT_MQTT_CLIENT_ID
    qos: int = SystemDefaults.DEFAULT_MQTT_QOS
    retain: bool = False
    username: Optional[str] = None
    password: Optional[str] = None
    led_topic: str = SystemDefaults.DEFAULT_LED_TOPIC

    def validate(self) -> None:
        """Validate broker settings"""
        if not self.host:
            raise ValidationError("MQTT host must not be empty")
        if not 1 <= self.port <= 65535:
            raise ValidationError("MQTT port must be between 1 and 65535")
        if self.keepalive <= 0:
            raise ValidationError("MQTT keepalive must be greater than 0")
        if self.qos not in (0, 1, 2):
            raise ValidationError(f"Invalid MQTT QoS: {self.qos}")
        if not self.led_topic or self.led_topic.endswith("/"):
            raise ValidationError(
                f"LED topic must be non-empty without trailing slash: {self.led_topic!r}"
            )
        if self.password is not None and self.username is None:
            raise ValidationError("MQTT password given without username")


@dataclass
class TopologyConfig:
    """Where the actor topology is read from"""

    path: Optional[str] = None


@dataclass
class WobbleConfig:
    """Main wobble configuration"""

    waveform: WaveformConfig = field(default_factory=WaveformConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)
    topology: TopologyConfig = field(default_factory=TopologyConfig)
    undefined_policy: UndefinedPolicy = UndefinedPolicy.EMIT

    def __post_init__(self):
        """Validate entire configuration"""
        try:
            self.undefined_policy = UndefinedPolicy(self.undefined_policy)
            self.waveform.validate()
            self.scheduler.validate()
            self.mqtt.validate()
        except ValueError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise ValidationError(str(e)) from e
        except ValidationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

        if self.scheduler.send_rate_ms > self.waveform.wave_length:
            logger.warning(
                f"Send rate {self.scheduler.send_rate_ms}ms is longer than the "
                f"wave length {self.waveform.wave_length}ms, pattern will alias"
            )

    @classmethod
    def create_default(cls) -> "WobbleConfig":
        """Create default configuration"""
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WobbleConfig":
        """Build configuration from a nested dictionary"""
        try:
            return cls(
                waveform=WaveformConfig(**data.get("waveform", {})),
                scheduler=SchedulerConfig(**data.get("scheduler", {})),
                mqtt=MQTTConfig(**data.get("mqtt", {})),
                topology=TopologyConfig(**data.get("topology", {})),
                undefined_policy=data.get("undefined_policy", UndefinedPolicy.EMIT),
            )
        except TypeError as e:
            raise ValidationError(f"Unknown configuration key: {e}") from e

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "WobbleConfig":
        """Load configuration from a YAML file"""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        return cls.from_dict(data)

    def update(self, updates: Dict[str, Any]) -> None:
        """Update configuration with new values"""
        if "waveform" in updates:
            self.waveform = WaveformConfig(**updates["waveform"])
        if "scheduler" in updates:
            self.scheduler = SchedulerConfig(**updates["scheduler"])
        if "mqtt" in updates:
            self.mqtt = MQTTConfig(**updates["mqtt"])
        if "topology" in updates:
            self.topology = TopologyConfig(**updates["topology"])
        if "undefined_policy" in updates:
            self.undefined_policy = updates["undefined_policy"]

        # Revalidate after updates
        self.__post_init__()
