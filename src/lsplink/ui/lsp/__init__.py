"""
LSP UI Components.

Textual-based UI components for an LSP session:
- Connection status badge
- Session log panel
- Bridge routing session output into the app
"""

from lsplink.ui.lsp.status import (
    ConnectionBadge,
    LogPanel,
    LogEntry,
)
from lsplink.ui.lsp.bridge import TextualBridge

__all__ = [
    # Status
    "ConnectionBadge",
    "LogPanel",
    "LogEntry",
    # Bridge
    "TextualBridge",
]
