from enum import Enum, auto
from typing import Dict, List

class SessionState(Enum):
    DISCONNECTED  = auto()
    CONNECTING    = auto()
    CONNECTED     = auto()
    FAILED        = auto()

class StateMachine:
    def __init__(self, initial: SessionState = SessionState.DISCONNECTED):
        self._state = initial
        self._trans: Dict[SessionState, List[SessionState]] = {
            SessionState.DISCONNECTED: [SessionState.CONNECTING, SessionState.DISCONNECTED],
            SessionState.CONNECTING:   [SessionState.CONNECTED, SessionState.FAILED],
            SessionState.CONNECTED:    [SessionState.CONNECTING, SessionState.DISCONNECTED],
            SessionState.FAILED:       [SessionState.CONNECTING, SessionState.DISCONNECTED],
        }

    @property
    def state(self) -> SessionState: return self._state

    def can(self, nxt: SessionState) -> bool: return nxt in self._trans[self._state]

    def transition(self, nxt: SessionState) -> bool:
        if self.can(nxt):
            self._state = nxt
            return True
        return False
