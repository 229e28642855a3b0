"""Tests for the scheduled wobble task."""

import json
import math

import pytest

from wobble.common.exceptions import BrokerUnavailableError
from wobble.core.config import UndefinedPolicy, WobbleConfig
from wobble.core.task import WobbleScheduledTask
from wobble.mqtt.publisher import PublishOutcome, Publisher
from wobble.topology.models import ActorConfig
from wobble.topology.service import StaticConfigurationProvider


@pytest.fixture
def make_task(wobble_config, broker, fake_sleep):
    def _make(actor_config=None, config=None, client=None, clock=None):
        publisher = Publisher(
            client or broker,
            (config or wobble_config).scheduler.unsuccessful_task_delay_ms,
            sleep=fake_sleep,
        )
        kwargs = {"clock": clock} if clock else {}
        return WobbleScheduledTask(
            config or wobble_config,
            StaticConfigurationProvider(actor_config),
            publisher,
            **kwargs,
        )

    return _make


class TestWobbleScheduledTask:
    """Test one tick of the pipeline"""

    def test_publishes_value_to_every_led(self, make_task, actor_config, broker, fake_sleep):
        result = make_task(actor_config).calculate_value(135)

        assert result.value == 30
        assert result.event_count == 4
        assert result.outcome == PublishOutcome.DELIVERED
        assert len(broker.batches) == 1
        batch = broker.batches[0]
        assert [e.topic for e in batch] == ["led/0", "led/1", "led/0", "led/1"]
        assert {json.loads(e.payload)["amber"] for e in batch} == {"30"}
        assert fake_sleep.calls == []

    def test_uses_clock(self, make_task, actor_config):
        task = make_task(actor_config, clock=lambda: 90)
        result = task()
        assert result.now_ms == 90
        assert result.value == 60

    def test_empty_topology_idles(self, make_task, broker, fake_sleep):
        result = make_task(ActorConfig()).calculate_value(0)

        assert result.outcome == PublishOutcome.IDLE
        assert result.event_count == 0
        assert broker.batches == []
        assert fake_sleep.calls == [1.0]

    def test_absent_topology_idles(self, make_task, broker, fake_sleep):
        result = make_task(None).calculate_value(0)

        assert result.outcome == PublishOutcome.IDLE
        assert broker.batches == []
        assert len(fake_sleep.calls) == 1

    def test_undefined_value_emits_sentinel(self, make_task, actor_config, broker):
        result = make_task(actor_config).calculate_value(math.nan)

        assert result.value is None
        payloads = [json.loads(e.payload) for e in broker.batches[0]]
        assert {p["warmWhite"] for p in payloads} == {"-1"}

    def test_undefined_value_clamped(self, make_task, actor_config, broker):
        config = WobbleConfig(undefined_policy=UndefinedPolicy.CLAMP)
        result = make_task(actor_config, config=config).calculate_value(math.nan)

        assert result.value == config.waveform.min_value
        payloads = [json.loads(e.payload) for e in broker.batches[0]]
        assert {p["warmWhite"] for p in payloads} == {"0"}

    def test_delivery_error_propagates(self, make_task, actor_config, failing_broker):
        task = make_task(actor_config, client=failing_broker)
        with pytest.raises(BrokerUnavailableError):
            task.calculate_value(0)

        # Next tick is an independent attempt
        with pytest.raises(BrokerUnavailableError):
            task.calculate_value(3)
        assert failing_broker.attempts == 2

    def test_topic_root_from_config(self, make_task, actor_config, broker):
        config = WobbleConfig.from_dict({"mqtt": {"led_topic": "sentient/led"}})
        make_task(actor_config, config=config).calculate_value(0)
        assert broker.batches[0][0].topic == "sentient/led/0"
