"""Abstract base transport and error types."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable

from lsplink.lsp.transport.types import (
    TransportConfig,
    TransportEvent,
    TransportEventType,
    TransportState,
)

logger = logging.getLogger(__name__)

TransportEventHandler = Callable[[TransportEvent], None]


class TransportError(Exception):
    """Base exception for transport errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class ConnectionError(TransportError):
    """Failed to establish connection to server."""

    pass


class TransportNotReady(TransportError):
    """A frame was sent while the connection is not open."""

    def __init__(self, message: str = "Connection not ready", cause: Exception | None = None):
        super().__init__(message, cause)


class Transport(ABC):
    """
    Abstract base class for duplex frame transports.

    A transport owns at most one live connection and surfaces its
    lifecycle as events. It knows nothing about JSON-RPC and never
    retries on its own.
    """

    def __init__(self, config: TransportConfig | None = None):
        self.config = config or TransportConfig()
        self._state = TransportState.CLOSED
        self._event_handlers: list[TransportEventHandler] = []

    @property
    def state(self) -> TransportState:
        """Current connection state."""
        return self._state

    def is_open(self) -> bool:
        """Check if frames can be sent."""
        return self._state == TransportState.OPEN

    def on_event(self, handler: TransportEventHandler) -> None:
        """
        Register an event handler for transport events.

        Handlers are called synchronously, in registration order.

        Args:
            handler: Callback invoked when transport events occur.
        """
        self._event_handlers.append(handler)

    def remove_handler(self, handler: TransportEventHandler) -> None:
        """Remove a previously registered event handler."""
        try:
            self._event_handlers.remove(handler)
        except ValueError:
            pass

    def _emit(
        self,
        event_type: TransportEventType,
        data: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        """Emit an event to all registered handlers."""
        event = TransportEvent(
            type=event_type,
            timestamp=time.time(),
            data=data,
            error=error,
        )
        for handler in list(self._event_handlers):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Transport event handler failed for {event_type.name}")

    @abstractmethod
    async def open(self, address: str) -> None:
        """
        Open a connection to the given address.

        Emits OPEN on success. Any live connection is closed first.

        Raises:
            ConnectionError: If the connection cannot be established.
        """
        pass

    @abstractmethod
    async def send(self, frame: str) -> None:
        """
        Send one raw frame.

        Raises:
            TransportNotReady: If the connection is not open.
            TransportError: If the write fails.
        """
        pass

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None:
        """
        Close the live connection, if any.

        Safe to call multiple times.
        """
        pass

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
