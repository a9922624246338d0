"""
Centralised exception definitions for the telemetry forwarder.
All custom exceptions should inherit from TelemetryForwarderError.
"""

class TelemetryForwarderError(Exception):
    """Base class for every custom exception thrown by this project."""

class ConfigurationError(TelemetryForwarderError):
    """Raised when configuration files, certificates or environment variables are invalid."""

class TransportError(TelemetryForwarderError):
    """Generic failure inside a broker transport session."""

class BrokerConnectionError(TransportError):
    """Dialing the broker URI failed."""

class ChannelError(TransportError):
    """Opening a channel on an established connection failed."""

class DeclareError(TransportError):
    """Declaring the destination queue failed."""

class SessionClosedError(TransportError):
    """The channel or connection was already closed when a send was attempted."""

class SerializationError(TelemetryForwarderError):
    """A message could not be encoded. Never retried."""

class RetriesExhausted(TelemetryForwarderError):
    """Every reconnect attempt failed; the message was dropped."""

    def __init__(self, destination: str, attempts: int):
        super().__init__(f"unable to reconnect to {destination} after {attempts} attempts")
        self.destination = destination
        self.attempts = attempts

class NoDestinationsError(TelemetryForwarderError):
    """No broker destination could be registered at startup."""

class SensorError(TelemetryForwarderError):
    """Base class for measurement source failures."""

class SensorNotFoundError(SensorError):
    """No temperature probe was found on the 1-Wire bus."""

class SensorReadError(SensorError):
    """The probe could not be read or returned an unexpected payload."""
