"""Telemetry Forwarder - Main Package"""

__version__ = '1.0.0'
__description__ = 'Periodic sensor telemetry forwarder with dual-target RabbitMQ publishing'

# Core patterns - most fundamental
from .core import StateMachine, SessionState, RetryPolicy

# Models - domain objects
from .models import TemperatureMessage, EndpointConfig

# Transport
from .transport import TransportSession, Publisher, load_tls_context

# Sensors
from .sensors import DS18B20Sensor, find_sensor_path

# Triggers
from .triggers import IntervalTrigger

# Monitoring
from .monitoring import HealthState, TelemetryMetrics, ObservabilityServer

# Orchestration
from .orchestration import FanOutCoordinator

__all__ = [
    # Core
    'StateMachine',
    'SessionState',
    'RetryPolicy',

    # Models
    'TemperatureMessage',
    'EndpointConfig',

    # Transport
    'TransportSession',
    'Publisher',
    'load_tls_context',

    # Sensors
    'DS18B20Sensor',
    'find_sensor_path',

    # Triggers
    'IntervalTrigger',

    # Monitoring
    'HealthState',
    'TelemetryMetrics',
    'ObservabilityServer',

    # Orchestration
    'FanOutCoordinator',
]
