"""Connection state machine for reconnection control."""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

from lsplink.lsp.protocol.state import InvalidStateTransition

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """
    Connection lifecycle states.

    State transitions:
        DISCONNECTED -> CONNECTING -> OPEN -> BACKOFF -> CONNECTING -> ...
                             \\_____________/     \\
                                                  -> GAVE_UP

    A failed open counts as a close, so CONNECTING may go straight to
    BACKOFF. GAVE_UP is left only by an explicit connect().
    """

    DISCONNECTED = auto()
    CONNECTING = auto()
    OPEN = auto()
    BACKOFF = auto()
    GAVE_UP = auto()

    def __str__(self) -> str:
        return self.name


ConnectionTransitionCallback = Callable[[ConnectionState, ConnectionState], None]


class ConnectionStateMachine:
    """Enforces valid connection transitions and notifies listeners."""

    VALID_TRANSITIONS: dict[ConnectionState, list[ConnectionState]] = {
        ConnectionState.DISCONNECTED: [ConnectionState.CONNECTING],
        ConnectionState.CONNECTING: [
            ConnectionState.OPEN,
            ConnectionState.BACKOFF,
            ConnectionState.GAVE_UP,
            ConnectionState.DISCONNECTED,  # Explicit disconnect
        ],
        ConnectionState.OPEN: [
            ConnectionState.BACKOFF,
            ConnectionState.GAVE_UP,
            ConnectionState.DISCONNECTED,
        ],
        ConnectionState.BACKOFF: [
            ConnectionState.CONNECTING,
            ConnectionState.DISCONNECTED,
        ],
        ConnectionState.GAVE_UP: [
            ConnectionState.CONNECTING,
            ConnectionState.DISCONNECTED,
        ],
    }

    def __init__(self, initial_state: ConnectionState = ConnectionState.DISCONNECTED):
        self._state = initial_state
        self._listeners: list[ConnectionTransitionCallback] = []

    @property
    def state(self) -> ConnectionState:
        return self._state

    def can_transition_to(self, new_state: ConnectionState) -> bool:
        return new_state in self.VALID_TRANSITIONS.get(self._state, [])

    def transition(self, new_state: ConnectionState) -> None:
        """
        Transition to a new state.

        Raises:
            InvalidStateTransition: If the transition is not valid.
        """
        if not self.can_transition_to(new_state):
            raise InvalidStateTransition(self._state, new_state)

        old_state = self._state
        self._state = new_state

        for listener in list(self._listeners):
            try:
                listener(old_state, new_state)
            except Exception:
                logger.exception("Connection state listener failed")

    def on_transition(self, callback: ConnectionTransitionCallback) -> None:
        self._listeners.append(callback)

    def __repr__(self) -> str:
        return f"ConnectionStateMachine(state={self._state!r})"
