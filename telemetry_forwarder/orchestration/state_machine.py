from enum import Enum, auto
from typing import Dict, Set
import logging

class CoordinatorState(Enum):
    INITIALIZING = auto()
    DESTINATION_SETUP = auto()
    OPERATIONAL = auto()
    SHUTTING_DOWN = auto()
    SHUTDOWN = auto()
    FAILED = auto()

class CoordinatorStateMachine:
    """Manages the coordinator lifecycle transitions"""

    def __init__(self):
        self.current_state = CoordinatorState.INITIALIZING
        self.logger = logging.getLogger(self.__class__.__name__)
        self.valid_transitions: Dict[CoordinatorState, Set[CoordinatorState]] = {
            CoordinatorState.INITIALIZING: {CoordinatorState.DESTINATION_SETUP, CoordinatorState.SHUTTING_DOWN},
            CoordinatorState.DESTINATION_SETUP: {CoordinatorState.OPERATIONAL, CoordinatorState.FAILED},
            CoordinatorState.OPERATIONAL: {CoordinatorState.SHUTTING_DOWN},
            CoordinatorState.SHUTTING_DOWN: {CoordinatorState.SHUTDOWN},
            CoordinatorState.FAILED: {CoordinatorState.SHUTTING_DOWN},
            CoordinatorState.SHUTDOWN: set()
        }

    def can_transition_to(self, new_state: CoordinatorState) -> bool:
        return new_state in self.valid_transitions.get(self.current_state, set())

    def transition_to(self, new_state: CoordinatorState) -> bool:
        if self.can_transition_to(new_state):
            self.logger.info(f"State transition: {self.current_state.name} -> {new_state.name}")
            self.current_state = new_state
            return True
        else:
            self.logger.error(f"Invalid state transition: {self.current_state.name} -> {new_state.name}")
            return False
