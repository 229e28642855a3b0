"""Outbound MQTT events and their assembly from LED addresses."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..patterns.wobble import to_wire_value
from ..topology.walker import LEDAddress


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SingleLEDPayload(BaseModel):
    """Value for one LED; all fields travel as strings"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    strip_id: str = Field(..., alias="stripId")
    led_id: str = Field(..., alias="ledId")
    warm_white: str = Field(..., alias="warmWhite")
    cold_white: str = Field(..., alias="coldWhite")
    amber: str

    @classmethod
    def uniform(cls, strip_id: int, led_id: int, value: int) -> "SingleLEDPayload":
        """Payload with every channel set to the same value"""
        v = str(value)
        return cls(
            strip_id=str(strip_id),
            led_id=str(led_id),
            warm_white=v,
            cold_white=v,
            amber=v,
        )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


@dataclass(frozen=True)
class MQTTEvent:
    """A single message ready to be handed to the broker"""

    topic: str
    payload: str
    timestamp: datetime = field(default_factory=_utcnow)


def led_topic(root: str, led_index: int) -> str:
    return f"{root}/{led_index}"


def assemble(
    intensity: Optional[int],
    addresses: Iterable[LEDAddress],
    topic_root: str,
    clock: Callable[[], datetime] = _utcnow,
) -> List[MQTTEvent]:
    """Build one event per LED address, all carrying the same intensity.

    ``None`` is encoded as the undefined sentinel and still published.
    """
    value = to_wire_value(intensity)
    events = []
    for address in addresses:
        payload = SingleLEDPayload.uniform(address.strip_index, address.led_index, value)
        events.append(
            MQTTEvent(
                topic=led_topic(topic_root, address.led_index),
                payload=payload.to_json(),
                timestamp=clock(),
            )
        )
    return events
