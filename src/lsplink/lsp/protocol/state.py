"""Session state machine for the initialize handshake."""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """
    Session lifecycle states.

    State transitions:
        UNINITIALIZED -> INITIALIZING -> READY
              ^               |            |
              +---------------+------------+

    INITIALIZING falls back to UNINITIALIZED when the handshake fails or
    the connection drops; READY falls back when the connection drops.
    """

    UNINITIALIZED = auto()
    INITIALIZING = auto()
    READY = auto()

    def __str__(self) -> str:
        return self.name


class InvalidStateTransition(Exception):
    """Raised when an invalid state transition is attempted."""

    def __init__(self, from_state: Enum, to_state: Enum):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid state transition: {from_state.name} -> {to_state.name}"
        )


StateTransitionCallback = Callable[[SessionState, SessionState], None]


class SessionStateMachine:
    """
    Tracks the handshake lifecycle.

    Enforces valid transitions and notifies listeners when they occur.
    """

    VALID_TRANSITIONS: dict[SessionState, list[SessionState]] = {
        SessionState.UNINITIALIZED: [SessionState.INITIALIZING],
        SessionState.INITIALIZING: [
            SessionState.READY,
            SessionState.UNINITIALIZED,
        ],
        SessionState.READY: [SessionState.UNINITIALIZED],
    }

    def __init__(self, initial_state: SessionState = SessionState.UNINITIALIZED):
        self._state = initial_state
        self._listeners: list[StateTransitionCallback] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        """Check if the handshake completed on the current connection."""
        return self._state == SessionState.READY

    def can_transition_to(self, new_state: SessionState) -> bool:
        return new_state in self.VALID_TRANSITIONS.get(self._state, [])

    def transition(self, new_state: SessionState) -> None:
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
                logger.exception("Session state listener failed")

    def reset(self) -> None:
        """Return to UNINITIALIZED from wherever we are."""
        if self._state != SessionState.UNINITIALIZED:
            self.transition(SessionState.UNINITIALIZED)

    def on_transition(self, callback: StateTransitionCallback) -> None:
        self._listeners.append(callback)

    def __repr__(self) -> str:
        return f"SessionStateMachine(state={self._state!r})"
