"""
LSP Capability Negotiation.

Client declarations, the server's negotiated snapshot, and the
initialize/initialized handshake.
"""

from lsplink.lsp.capabilities.client import (
    ClientCapabilities,
    CompletionCapability,
    HoverCapability,
    SignatureHelpCapability,
    PublishDiagnosticsCapability,
    WorkspaceCapability,
    DEFAULT_CLIENT_CAPABILITIES,
)
from lsplink.lsp.capabilities.server import ServerCapabilities
from lsplink.lsp.capabilities.negotiation import (
    CapabilityNegotiator,
    NegotiationResult,
    ClientInfo,
    ServerInfo,
    build_initialize_params,
)

__all__ = [
    # Client
    "ClientCapabilities",
    "CompletionCapability",
    "HoverCapability",
    "SignatureHelpCapability",
    "PublishDiagnosticsCapability",
    "WorkspaceCapability",
    "DEFAULT_CLIENT_CAPABILITIES",
    # Server
    "ServerCapabilities",
    # Negotiation
    "CapabilityNegotiator",
    "NegotiationResult",
    "ClientInfo",
    "ServerInfo",
    "build_initialize_params",
]
