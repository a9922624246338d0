# telemetry_forwarder/orchestration/__init__.py
"""Fan-out coordination and lifecycle state."""

from .coordinator import FanOutCoordinator
from .state_machine import CoordinatorStateMachine, CoordinatorState

__all__ = [
    'FanOutCoordinator',
    'CoordinatorStateMachine',
    'CoordinatorState',
]
