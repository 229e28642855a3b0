"""Common exceptions for the wobble publisher."""


class WobbleError(Exception):
    """Base exception for all wobble errors."""

    pass


class ValidationError(WobbleError):
    """Configuration or topology validation error."""

    pass


class ConfigurationError(WobbleError):
    """Configuration could not be read or parsed."""

    pass


class DeliveryError(WobbleError):
    """Broker client failed to submit a batch."""

    pass


class BrokerUnavailableError(DeliveryError):
    """Broker is not connected or refused the connection."""

    pass


class SerializationError(DeliveryError):
    """Payload could not be encoded or was rejected by the broker."""

    pass
