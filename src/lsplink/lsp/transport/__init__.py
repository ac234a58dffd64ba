"""
LSP Transport Layer.

Thin event-driven WebSocket transport. Carries raw frames only.
"""

from lsplink.lsp.transport.types import (
    TransportConfig,
    TransportEvent,
    TransportEventType,
    TransportState,
)
from lsplink.lsp.transport.base import (
    Transport,
    TransportError,
    ConnectionError,
    TransportNotReady,
)
from lsplink.lsp.transport.websocket import WebSocketTransport

__all__ = [
    "Transport",
    "TransportConfig",
    "TransportEvent",
    "TransportEventType",
    "TransportState",
    "TransportError",
    "ConnectionError",
    "TransportNotReady",
    "WebSocketTransport",
]
