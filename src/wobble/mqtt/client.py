"""Broker clients that deliver batches of MQTT events."""

import logging
from typing import Any, Optional, Protocol, Sequence

import paho.mqtt.client as mqtt

from ..common.exceptions import BrokerUnavailableError, DeliveryError, SerializationError
from ..core.config import MQTTConfig
from .events import MQTTEvent

logger = logging.getLogger(__name__)


class BrokerClient(Protocol):
    """Publishes a batch of events; raises DeliveryError on failure"""

    def publish_batch(self, events: Sequence[MQTTEvent]) -> None: ...


class MQTTBrokerClient:
    """paho-mqtt backed client.

    Connection lifecycle is owned here; the network loop runs on paho's
    background thread. Publishing is fire-and-forget: messages are queued
    with the configured QoS and nothing waits for acknowledgement.
    """

    def __init__(self, config: MQTTConfig, client: Optional[Any] = None):
        self.config = config
        self.published_count = 0
        if client is None:
            client = mqtt.Client(
                callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
                client_id=config.client_id,
            )
        self._client = client
        self._client.on_connect = self._on_connect
        self._client.on_disconnect = self._on_disconnect
        if config.username is not None:
            self._client.username_pw_set(config.username, config.password)

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code == 0:
            logger.info(f"Connected to MQTT broker {self.config.host}:{self.config.port}")
        else:
            logger.error(f"MQTT connection refused: {reason_code}")

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        logger.warning(f"Disconnected from MQTT broker: {reason_code}")

    def connect(self) -> None:
        """Open the broker connection and start the network loop"""
        try:
            self._client.connect(self.config.host, self.config.port, self.config.keepalive)
        except OSError as e:
            raise BrokerUnavailableError(
                f"Cannot connect to MQTT broker {self.config.host}:{self.config.port}: {e}"
            ) from e
        self._client.loop_start()

    def disconnect(self) -> None:
        """Close the connection and stop the network loop"""
        try:
            self._client.disconnect()
        finally:
            self._client.loop_stop()
        logger.info("MQTT client disconnected")

    def publish_batch(self, events: Sequence[MQTTEvent]) -> None:
        """Publish every event independently.

        Stops at the first failure; events already handed to paho are not
        recalled.
        """
        for event in events:
            try:
                info = self._client.publish(
                    event.topic,
                    event.payload,
                    qos=self.config.qos,
                    retain=self.config.retain,
                )
            except ValueError as e:
                raise SerializationError(f"Cannot publish to {event.topic}: {e}") from e

            rc = info.rc
            if rc == mqtt.MQTT_ERR_NO_CONN:
                raise BrokerUnavailableError("MQTT client is not connected")
            if rc == mqtt.MQTT_ERR_PAYLOAD_SIZE:
                raise SerializationError(f"Payload too large for {event.topic}")
            if rc != mqtt.MQTT_ERR_SUCCESS:
                raise DeliveryError(
                    f"Publishing to {event.topic} failed: {mqtt.error_string(rc)}"
                )
            self.published_count += 1


class DryRunBrokerClient:
    """Client for running without a broker; logs instead of publishing"""

    def __init__(self):
        self.batch_count = 0
        self.published_count = 0
        self.last_batch: Sequence[MQTTEvent] = ()

    def connect(self) -> None:
        logger.info("Dry run: no MQTT broker connection")

    def disconnect(self) -> None:
        pass

    def publish_batch(self, events: Sequence[MQTTEvent]) -> None:
        self.batch_count += 1
        self.published_count += len(events)
        self.last_batch = events
        for event in events:
            logger.debug(f"{event.topic} {event.payload}")


def create_client(config: MQTTConfig, dry_run: bool = False):
    """Create a broker client for the configuration"""
    if dry_run:
        return DryRunBrokerClient()
    return MQTTBrokerClient(config)

