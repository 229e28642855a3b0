"""MQTT events, broker clients and publishing"""

from .client import BrokerClient, DryRunBrokerClient, MQTTBrokerClient, create_client
from .events import MQTTEvent, SingleLEDPayload, assemble, led_topic
from .publisher import PublishOutcome, Publisher

__all__ = [
    "BrokerClient",
    "DryRunBrokerClient",
    "MQTTBrokerClient",
    "create_client",
    "MQTTEvent",
    "SingleLEDPayload",
    "assemble",
    "led_topic",
    "PublishOutcome",
    "Publisher",
]
