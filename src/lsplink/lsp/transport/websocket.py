"""WebSocket transport implementation."""

from __future__ import annotations

import asyncio
import logging

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, ConnectionClosedOK

from lsplink.lsp.transport.base import (
    ConnectionError,
    Transport,
    TransportError,
    TransportNotReady,
)
from lsplink.lsp.transport.types import (
    TransportConfig,
    TransportEventType,
    TransportState,
)

logger = logging.getLogger(__name__)

# Close code reported when the peer vanished without a close frame
ABNORMAL_CLOSURE = 1006


class WebSocketTransport(Transport):
    """
    Text-frame WebSocket transport.

    Each inbound text frame is surfaced as one MESSAGE event, in arrival
    order, from a single reader task per connection.
    """

    def __init__(self, config: TransportConfig | None = None):
        super().__init__(config)
        self._ws: ClientConnection | None = None
        self._reader_task: asyncio.Task | None = None
        self._address: str | None = None

    @property
    def address(self) -> str | None:
        """Address of the current or last connection."""
        return self._address

    async def open(self, address: str) -> None:
        """Open a WebSocket connection and start reading frames."""
        if self._ws is not None:
            await self.close()

        self._address = address
        self._state = TransportState.CONNECTING
        self._emit(TransportEventType.CONNECTING, data={"address": address})

        try:
            ws = await connect(
                address,
                open_timeout=self.config.open_timeout,
                close_timeout=self.config.close_timeout,
                max_size=self.config.max_frame_size,
                ping_interval=self.config.ping_interval,
            )
        except Exception as e:
            self._state = TransportState.CLOSED
            self._emit(TransportEventType.ERROR, data={"address": address}, error=e)
            raise ConnectionError(f"Failed to connect to {address}: {e}", cause=e)

        self._ws = ws
        self._state = TransportState.OPEN
        self._reader_task = asyncio.create_task(
            self._read_loop(ws),
            name="lsp-transport-reader",
        )
        self._emit(TransportEventType.OPEN, data={"address": address})

    async def send(self, frame: str) -> None:
        """Send one text frame."""
        ws = self._ws
        if ws is None or self._state != TransportState.OPEN:
            raise TransportNotReady()

        try:
            await ws.send(frame)
        except ConnectionClosed as e:
            raise TransportNotReady("Connection closed while sending", cause=e)
        except Exception as e:
            raise TransportError(f"WebSocket send failed: {e}", cause=e)

        self._emit(TransportEventType.MESSAGE_SENT, data={"size": len(frame)})

    async def close(self, code: int = 1000, reason: str = "") -> None:
        """Close the connection and wait for the reader to finish."""
        ws = self._ws
        if ws is None:
            self._state = TransportState.CLOSED
            return

        await ws.close(code, reason)

        task = self._reader_task
        if task is not None and task is not asyncio.current_task():
            await task

    async def _read_loop(self, ws: ClientConnection) -> None:
        """Surface inbound frames until the connection ends."""
        error: Exception | None = None
        try:
            async for frame in ws:
                self._emit(TransportEventType.MESSAGE, data={"frame": frame})
        except ConnectionClosedOK:
            pass
        except Exception as e:
            error = e
        self._connection_closed(ws, error)

    def _connection_closed(self, ws: ClientConnection, error: Exception | None) -> None:
        if ws is not self._ws:
            return

        self._ws = None
        self._reader_task = None
        self._state = TransportState.CLOSED

        if error is not None:
            logger.debug(f"WebSocket closed abnormally: {error}")
            self._emit(TransportEventType.ERROR, error=error)

        self._emit(
            TransportEventType.CLOSE,
            data={
                "code": ws.close_code if ws.close_code is not None else ABNORMAL_CLOSURE,
                "reason": ws.close_reason or "",
            },
        )
