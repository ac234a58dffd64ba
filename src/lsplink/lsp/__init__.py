"""
LSP (Language Server Protocol) client implementation for lsplink.

This module implements the client side of an LSP session over a single
WebSocket connection:
- Event-driven transport carrying raw text frames
- JSON-RPC 2.0 codec and request/response correlation with deadlines
- Automatic reconnection with capped exponential backoff
- initialize/initialized handshake gated feature requests
- Notification dispatch for diagnostics and window messages

Submodules:
- transport: WebSocket transport layer
- protocol: JSON-RPC 2.0 envelopes, codec, correlation, session state
- connection: Reconnection controller and backoff
- capabilities: Capability declaration and negotiation
- features: Completion, hover, diagnostics and window message shapes
- session: The session engine
- integration: Editor document sync
"""

# Transport layer
from lsplink.lsp.transport import (
    WebSocketTransport,
    TransportConfig,
    Transport,
    TransportError,
    ConnectionError,
    TransportNotReady,
)

# Protocol layer
from lsplink.lsp.protocol import (
    LSPError,
    RemoteError,
    RequestTimeout,
    RequestCancelled,
    MalformedMessage,
    HandshakeFailure,
    MessageCodec,
    CorrelationTable,
    SessionState,
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCNotification,
)

# Connection
from lsplink.lsp.connection import (
    ConnectionState,
    ReconnectionController,
    compute_backoff,
)

# Capabilities
from lsplink.lsp.capabilities import (
    ClientCapabilities,
    ServerCapabilities,
    CapabilityNegotiator,
    NegotiationResult,
)

# Features
from lsplink.lsp.features import (
    CompletionItemKind,
    CompletionList,
    CompletionSuggestion,
    HoverResult,
    Marker,
    MarkerSeverity,
    LogLevel,
    Position,
    EditorRange,
    DocumentSnapshot,
    ContentChange,
)

# Session
from lsplink.lsp.bridge import BridgeAdapter, NullBridge
from lsplink.lsp.config import LSPClientConfig, load_lsp_config
from lsplink.lsp.session import LSPSession, SessionContext

# Integration
from lsplink.lsp.integration import EditorIntegration, TRIGGER_CHARACTERS

__all__ = [
    # Transport
    "WebSocketTransport",
    "TransportConfig",
    "Transport",
    "TransportError",
    "ConnectionError",
    "TransportNotReady",
    # Protocol
    "LSPError",
    "RemoteError",
    "RequestTimeout",
    "RequestCancelled",
    "MalformedMessage",
    "HandshakeFailure",
    "MessageCodec",
    "CorrelationTable",
    "SessionState",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCNotification",
    # Connection
    "ConnectionState",
    "ReconnectionController",
    "compute_backoff",
    # Capabilities
    "ClientCapabilities",
    "ServerCapabilities",
    "CapabilityNegotiator",
    "NegotiationResult",
    # Features
    "CompletionItemKind",
    "CompletionList",
    "CompletionSuggestion",
    "HoverResult",
    "Marker",
    "MarkerSeverity",
    "LogLevel",
    "Position",
    "EditorRange",
    "DocumentSnapshot",
    "ContentChange",
    # Session
    "BridgeAdapter",
    "NullBridge",
    "LSPClientConfig",
    "load_lsp_config",
    "LSPSession",
    "SessionContext",
    # Integration
    "EditorIntegration",
    "TRIGGER_CHARACTERS",
]
