"""
Connection lifecycle.

Reconnection state machine and capped exponential backoff on top of a
Transport.
"""

from lsplink.lsp.connection.state import (
    ConnectionState,
    ConnectionStateMachine,
)
from lsplink.lsp.connection.backoff import compute_backoff
from lsplink.lsp.connection.controller import (
    ReconnectionController,
    DEFAULT_ADDRESS,
    DEFAULT_MAX_ATTEMPTS,
)

__all__ = [
    "ConnectionState",
    "ConnectionStateMachine",
    "compute_backoff",
    "ReconnectionController",
    "DEFAULT_ADDRESS",
    "DEFAULT_MAX_ATTEMPTS",
]
