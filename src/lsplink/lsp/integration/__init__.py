"""
Editor Integration.

Connects an LSPSession to the editor model: document sync and
position translation for completion and hover providers.
"""

from lsplink.lsp.integration.editor import (
    EditorIntegration,
    TRIGGER_CHARACTERS,
)

__all__ = [
    "EditorIntegration",
    "TRIGGER_CHARACTERS",
]
