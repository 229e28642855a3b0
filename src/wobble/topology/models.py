"""Actor topology: devices, their strips and the LEDs on each strip."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LED(BaseModel):
    """A single addressable LED"""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0)


class Strip(BaseModel):
    """An LED strip attached to an actor device"""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0)
    leds: List[LED] = Field(default_factory=list)

    @field_validator("leds")
    @classmethod
    def unique_led_indices(cls, v: List[LED]) -> List[LED]:
        seen = set()
        for led in v:
            if led.index in seen:
                raise ValueError(f"Duplicate LED index {led.index}")
            seen.add(led.index)
        return v


class ActorDevice(BaseModel):
    """A device driving one or more strips"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mac_address: Optional[str] = Field(None, alias="macAddress")
    port: Optional[str] = None
    strips: List[Strip] = Field(default_factory=list)

    @field_validator("strips")
    @classmethod
    def unique_strip_indices(cls, v: List[Strip]) -> List[Strip]:
        seen = set()
        for strip in v:
            if strip.index in seen:
                raise ValueError(f"Duplicate strip index {strip.index}")
            seen.add(strip.index)
        return v


class ActorConfig(BaseModel):
    """Topology snapshot as supplied by the configuration service"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    actor_devices: List[ActorDevice] = Field(default_factory=list, alias="actorDevices")

    @property
    def led_count(self) -> int:
        return sum(len(strip.leds) for device in self.actor_devices for strip in device.strips)
