"""Reconnection controller: connection attempts with capped backoff."""

from __future__ import annotations

import asyncio
import logging

from lsplink.lsp.connection.backoff import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_DELAY,
    compute_backoff,
)
from lsplink.lsp.connection.state import (
    ConnectionState,
    ConnectionStateMachine,
    ConnectionTransitionCallback,
)
from lsplink.lsp.transport.base import Transport, TransportError
from lsplink.lsp.transport.types import TransportEvent, TransportEventType

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "ws://localhost:8080/lsp"
DEFAULT_MAX_ATTEMPTS = 5


class ReconnectionController:
    """
    Owns the connection lifecycle on top of a Transport.

    Every lost connection (close, error, or failed open) schedules a
    retry after a capped exponential delay, until `max_attempts`
    consecutive failures have been retried; then the controller gives up
    and stays down until connect() is called again. The attempt counter
    resets only when a connection actually opens.
    """

    def __init__(
        self,
        transport: Transport,
        address: str = DEFAULT_ADDRESS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        jitter: float = 0.0,
    ):
        """
        Args:
            transport: Transport to drive. The controller subscribes to its events.
            address: Default address for connect().
            max_attempts: Automatic retries allowed before giving up.
            base_delay: Backoff base in seconds.
            max_delay: Backoff ceiling in seconds.
            jitter: Optional +/- fraction applied to each delay.
        """
        if max_attempts < 0:
            raise ValueError("max_attempts must be non-negative")
        if base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if max_delay < base_delay:
            raise ValueError("max_delay must be at least base_delay")
        if not 0.0 <= jitter < 1.0:
            raise ValueError("jitter must be in [0, 1)")

        self.transport = transport
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter

        self._address = address
        self._machine = ConnectionStateMachine()
        self._attempts = 0
        self._current_delay: float | None = None
        self._retry_task: asyncio.Task | None = None

        transport.on_event(self._on_transport_event)

    @property
    def state(self) -> ConnectionState:
        return self._machine.state

    @property
    def is_open(self) -> bool:
        return self._machine.state == ConnectionState.OPEN

    @property
    def attempts(self) -> int:
        """Consecutive failed connections since the last successful open."""
        return self._attempts

    @property
    def current_delay(self) -> float | None:
        """Delay of the most recently scheduled retry, in seconds."""
        return self._current_delay

    @property
    def address(self) -> str:
        return self._address

    def on_state_change(self, callback: ConnectionTransitionCallback) -> None:
        """Register callback for (old, new) connection state changes."""
        self._machine.on_transition(callback)

    async def connect(self, address: str | None = None) -> None:
        """
        Start connecting.

        Only acts from DISCONNECTED or GAVE_UP; otherwise a connection is
        already live or on its way.
        """
        if address:
            self._address = address

        if self.state not in (ConnectionState.DISCONNECTED, ConnectionState.GAVE_UP):
            logger.debug(f"connect() ignored in state {self.state}")
            return

        await self._attempt()

    async def disconnect(self) -> None:
        """Close the connection and stop all automatic reconnection."""
        await self._cancel_retry()

        if self.state == ConnectionState.DISCONNECTED:
            return

        # Transition first so the resulting CLOSE event is ignored
        self._machine.transition(ConnectionState.DISCONNECTED)
        await self.transport.close()

    async def _attempt(self) -> None:
        self._machine.transition(ConnectionState.CONNECTING)
        logger.info(f"Connecting to LSP server at {self._address}...")

        try:
            await self.transport.open(self._address)
        except TransportError as e:
            logger.error(f"Connection failed: {e}")
            if self.state == ConnectionState.CONNECTING:
                self._connection_lost()
            return

        if self.state == ConnectionState.DISCONNECTED:
            # disconnect() raced the open
            await self.transport.close()

    async def _retry_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._retry_task = None
        if self.state != ConnectionState.BACKOFF:
            return
        await self._attempt()

    async def _cancel_retry(self) -> None:
        task = self._retry_task
        self._retry_task = None
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def _on_transport_event(self, event: TransportEvent) -> None:
        if event.type == TransportEventType.OPEN:
            if self.state == ConnectionState.CONNECTING:
                self._attempts = 0
                self._current_delay = None
                logger.info("WebSocket connection established")
                self._machine.transition(ConnectionState.OPEN)

        elif event.type == TransportEventType.ERROR:
            # Failed opens are handled by _attempt()
            if self.state == ConnectionState.OPEN:
                logger.error(f"WebSocket error: {event.error or 'Unknown error'}")
                self._connection_lost()

        elif event.type == TransportEventType.CLOSE:
            if self.state in (ConnectionState.OPEN, ConnectionState.CONNECTING):
                logger.warning(
                    f"Connection closed: {event.close_code} - {event.close_reason}"
                )
                self._connection_lost()

    def _connection_lost(self) -> None:
        if self._attempts >= self.max_attempts:
            logger.error(
                f"Giving up after {self._attempts} reconnection attempts"
            )
            self._current_delay = None
            self._machine.transition(ConnectionState.GAVE_UP)
            return

        self._attempts += 1
        delay = compute_backoff(
            self._attempts,
            base=self.base_delay,
            ceiling=self.max_delay,
            jitter=self.jitter,
        )
        self._current_delay = delay
        logger.info(
            f"Reconnecting in {delay * 1000:.0f}ms... "
            f"({self._attempts}/{self.max_attempts})"
        )
        self._machine.transition(ConnectionState.BACKOFF)
        self._retry_task = asyncio.create_task(
            self._retry_after(delay),
            name="lsp-reconnect",
        )
