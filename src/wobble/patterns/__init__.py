"""Brightness patterns"""

from .wobble import current_millis, evaluate, sample_cycle, to_wire_value

__all__ = [
    "current_millis",
    "evaluate",
    "sample_cycle",
    "to_wire_value",
]
