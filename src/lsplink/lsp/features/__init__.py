"""
LSP feature shapes.

Request params and result mapping for completion and hover, and the
handlers for server notifications (diagnostics, log and show message).
"""

from lsplink.lsp.features.types import (
    CompletionItemKind,
    MarkerSeverity,
    LogLevel,
    Position,
    EditorRange,
    Marker,
    CompletionSuggestion,
    CompletionList,
    HoverResult,
    DocumentSnapshot,
    ContentChange,
)
from lsplink.lsp.features.completion import (
    COMPLETION_METHOD,
    build_completion_params,
    map_completion_item,
    map_completion_result,
)
from lsplink.lsp.features.hover import (
    HOVER_METHOD,
    build_hover_params,
    normalize_hover_contents,
    map_hover_result,
)
from lsplink.lsp.features.diagnostics import (
    PUBLISH_DIAGNOSTICS_METHOD,
    DiagnosticsHandler,
    map_diagnostic,
)
from lsplink.lsp.features.window import (
    LOG_MESSAGE_METHOD,
    SHOW_MESSAGE_METHOD,
    WindowMessageHandler,
)

__all__ = [
    # Types
    "CompletionItemKind",
    "MarkerSeverity",
    "LogLevel",
    "Position",
    "EditorRange",
    "Marker",
    "CompletionSuggestion",
    "CompletionList",
    "HoverResult",
    "DocumentSnapshot",
    "ContentChange",
    # Completion
    "COMPLETION_METHOD",
    "build_completion_params",
    "map_completion_item",
    "map_completion_result",
    # Hover
    "HOVER_METHOD",
    "build_hover_params",
    "normalize_hover_contents",
    "map_hover_result",
    # Diagnostics
    "PUBLISH_DIAGNOSTICS_METHOD",
    "DiagnosticsHandler",
    "map_diagnostic",
    # Window
    "LOG_MESSAGE_METHOD",
    "SHOW_MESSAGE_METHOD",
    "WindowMessageHandler",
]
