"""Data models and domain objects."""

from .telemetry_models import (
    TemperatureMessage,
    EndpointConfig,
)

__all__ = [
    'TemperatureMessage',
    'EndpointConfig',
]
