"""Health state, Prometheus metrics and the HTTP listener."""

from .health import HealthState
from .metrics import TelemetryMetrics
from .server import ObservabilityServer

__all__ = [
    'HealthState',
    'TelemetryMetrics',
    'ObservabilityServer',
]
