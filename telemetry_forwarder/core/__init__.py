# telemetry_forwarder/core/__init__.py
"""Core infrastructure components for the telemetry forwarder."""

# Import order: most fundamental to most specific

from .exceptions import (
    TelemetryForwarderError,
    ConfigurationError,
    TransportError,
    BrokerConnectionError,
    ChannelError,
    DeclareError,
    SessionClosedError,
    SerializationError,
    RetriesExhausted,
    NoDestinationsError,
    SensorError,
    SensorNotFoundError,
    SensorReadError,
)

from .patterns.state_machine import StateMachine, SessionState
from .patterns.retry import RetryPolicy


__all__ = [
    "StateMachine",
    "SessionState",
    "RetryPolicy",
    "TelemetryForwarderError",
    "ConfigurationError",
    "TransportError",
    "BrokerConnectionError",
    "ChannelError",
    "DeclareError",
    "SessionClosedError",
    "SerializationError",
    "RetriesExhausted",
    "NoDestinationsError",
    "SensorError",
    "SensorNotFoundError",
    "SensorReadError",
]
