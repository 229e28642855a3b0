"""Common components shared across modules."""

from .exceptions import *

__all__ = [
    "WobbleError",
    "ValidationError",
    "ConfigurationError",
    "DeliveryError",
    "BrokerUnavailableError",
    "SerializationError",
]
