"""
LSP Protocol Core.

JSON-RPC 2.0 envelopes, the wire codec, request/response correlation,
and the handshake state machine.
"""

from lsplink.lsp.protocol.messages import (
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCNotification,
    JSONRPCError,
    parse_message,
)
from lsplink.lsp.protocol.errors import (
    LSPError,
    RemoteError,
    RequestTimeout,
    RequestCancelled,
    MalformedMessage,
    HandshakeFailure,
    PARSE_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INVALID_PARAMS,
    INTERNAL_ERROR,
    REQUEST_TIMEOUT,
    REQUEST_CANCELLED,
    HANDSHAKE_FAILED,
)
from lsplink.lsp.protocol.codec import MessageCodec
from lsplink.lsp.protocol.correlation import (
    CorrelationTable,
    PendingEntry,
    DEFAULT_REQUEST_TIMEOUT,
)
from lsplink.lsp.protocol.state import (
    SessionState,
    SessionStateMachine,
    InvalidStateTransition,
)

__all__ = [
    # Messages
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCNotification",
    "JSONRPCError",
    "parse_message",
    # Errors
    "LSPError",
    "RemoteError",
    "RequestTimeout",
    "RequestCancelled",
    "MalformedMessage",
    "HandshakeFailure",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "REQUEST_TIMEOUT",
    "REQUEST_CANCELLED",
    "HANDSHAKE_FAILED",
    # Codec
    "MessageCodec",
    # Correlation
    "CorrelationTable",
    "PendingEntry",
    "DEFAULT_REQUEST_TIMEOUT",
    # State
    "SessionState",
    "SessionStateMachine",
    "InvalidStateTransition",
]
