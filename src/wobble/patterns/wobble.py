"""Wobble pattern: a triangular brightness wave derived from wall-clock time."""

import logging
import math
import time
from typing import Optional

import numpy as np

from ..core.config import SystemDefaults, WaveformConfig

logger = logging.getLogger(__name__)


def current_millis() -> int:
    """Wall-clock time in epoch milliseconds"""
    return time.time_ns() // 1_000_000


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rising_slope(t, config: WaveformConfig):
    """Unrounded rising-slope value at phase ``t``; accepts scalars or arrays"""
    span = config.max_value - config.min_value
    return t * (span / config.half_wave_length) + config.min_value


def falling_slope(t, config: WaveformConfig):
    """Unrounded falling-slope value at phase ``t``; accepts scalars or arrays"""
    span = config.max_value - config.min_value
    return t * (-span / config.half_wave_length) + (2 * config.max_value - config.min_value)


def evaluate(now_ms: float, config: WaveformConfig) -> Optional[int]:
    """Intensity of the wobble wave at ``now_ms``.

    The wave rises linearly from ``min_value`` to ``max_value`` over the
    first half of ``config.wave_length`` and falls back over the second
    half. The midpoint belongs to the rising slope. Returns ``None`` when
    the phase lands on neither slope, which only happens for non-finite
    input.
    """
    wave_length = config.wave_length
    half = config.half_wave_length
    t = now_ms % wave_length

    if 0 <= t <= half:
        return _round_half_up(rising_slope(t, config))
    if half < t <= wave_length:
        return _round_half_up(falling_slope(t, config))

    logger.warning(f"Wobble phase {t} outside wave length {wave_length}")
    return None


def sample_cycle(config: WaveformConfig, samples: Optional[int] = None) -> np.ndarray:
    """Sample one full wave cycle.

    Returns an ``(samples, 2)`` int array of ``(phase_ms, value)`` rows.
    Defaults to one sample per millisecond of the wave length.
    """
    wave_length = config.wave_length
    if samples is None:
        samples = wave_length
    if samples <= 0:
        raise ValueError("Sample count must be greater than 0")

    t = np.linspace(0, wave_length, samples, endpoint=False)

    values = np.where(
        t <= config.half_wave_length, rising_slope(t, config), falling_slope(t, config)
    )
    values = np.floor(values + 0.5).astype(np.int64)

    return np.column_stack((np.floor(t).astype(np.int64), values))


def to_wire_value(value: Optional[int]) -> int:
    """Encode an intensity for the payload, using the sentinel for ``None``"""
    return SystemDefaults.UNDEFINED_INTENSITY if value is None else value
