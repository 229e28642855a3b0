"""Wobble pattern publisher for Sentient Light Hub LED actors."""

__version__ = "0.1.0"
