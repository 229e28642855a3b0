"""Traversal of the actor topology."""

from typing import Iterator, NamedTuple, Optional

from .models import ActorConfig


class LEDAddress(NamedTuple):
    """Position of one LED within the topology"""

    device_index: int
    strip_index: int
    led_index: int


def walk(topology: Optional[ActorConfig]) -> Iterator[LEDAddress]:
    """Yield every LED in device, strip, LED order as configured.

    ``device_index`` is the device's position in the topology, strip and
    LED indices are the configured ones. ``None`` yields nothing.
    """
    if topology is None:
        return

    for device_index, device in enumerate(topology.actor_devices):
        for strip in device.strips:
            for led in strip.leds:
                yield LEDAddress(device_index, strip.index, led.index)
