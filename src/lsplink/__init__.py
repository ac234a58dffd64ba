"""lsplink - reconnecting LSP client session over WebSocket."""

__version__ = "0.1.0"
