from typing import List, Sequence

import pytest
import yaml

from wobble.common.exceptions import BrokerUnavailableError
from wobble.core.config import WaveformConfig, WobbleConfig
from wobble.mqtt.events import MQTTEvent
from wobble.topology.models import ActorConfig


class RecordingBrokerClient:
    """Broker client that keeps every submitted batch"""

    def __init__(self):
        self.batches: List[Sequence[MQTTEvent]] = []

    def publish_batch(self, events: Sequence[MQTTEvent]) -> None:
        self.batches.append(list(events))


class UnavailableBrokerClient:
    """Broker client that always fails"""

    def __init__(self):
        self.attempts = 0

    def publish_batch(self, events: Sequence[MQTTEvent]) -> None:
        self.attempts += 1
        raise BrokerUnavailableError("broker down")


class FakeSleep:
    """Records requested sleeps instead of blocking"""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def waveform_config():
    """Default wobble waveform: 0..60 over 180ms"""
    return WaveformConfig(period_ms=3, min_value=0, max_value=60)


@pytest.fixture
def wobble_config():
    return WobbleConfig.create_default()


@pytest.fixture
def topology_data():
    """One device, two strips with two LEDs each"""
    return {
        "actorDevices": [
            {
                "macAddress": "AA:BB:CC:DD:EE:01",
                "strips": [
                    {"index": 0, "leds": [{"index": 0}, {"index": 1}]},
                    {"index": 1, "leds": [{"index": 0}, {"index": 1}]},
                ],
            }
        ]
    }


@pytest.fixture
def actor_config(topology_data):
    return ActorConfig.model_validate(topology_data)


@pytest.fixture
def broker():
    return RecordingBrokerClient()


@pytest.fixture
def failing_broker():
    return UnavailableBrokerClient()


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def topology_file(tmp_path, topology_data):
    """Temporary actor topology file"""
    path = tmp_path / "actor_config.yaml"
    with open(path, "w") as f:
        yaml.dump(topology_data, f)
    return path


@pytest.fixture
def config_file(tmp_path, topology_file):
    """Temporary wobble config file pointing at the topology file"""
    path = tmp_path / "wobble.yaml"
    with open(path, "w") as f:
        yaml.dump(
            {
                "waveform": {"period_ms": 3, "min_value": 0, "max_value": 60},
                "scheduler": {"send_rate_ms": 3, "unsuccessful_task_delay_ms": 0},
                "mqtt": {"host": "broker.local", "port": 1884, "led_topic": "lights/led"},
                "topology": {"path": str(topology_file)},
            },
            f,
        )
    return path
