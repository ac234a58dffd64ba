"""textDocument/completion request and result mapping."""

from __future__ import annotations

import logging
from typing import Any

from lsplink.lsp.features.types import (
    CompletionItemKind,
    CompletionList,
    CompletionSuggestion,
    EditorRange,
    Position,
)

logger = logging.getLogger(__name__)

COMPLETION_METHOD = "textDocument/completion"

# CompletionTriggerKind.Invoked
TRIGGER_KIND_INVOKED = 1

# InsertTextFormat.Snippet
INSERT_TEXT_FORMAT_SNIPPET = 2


def build_completion_params(uri: str, position: Position) -> dict[str, Any]:
    return {
        "textDocument": {"uri": uri},
        "position": position.to_dict(),
        "context": {"triggerKind": TRIGGER_KIND_INVOKED},
    }


def map_completion_item(item: dict[str, Any], position: Position) -> CompletionSuggestion:
    """
    Map one LSP CompletionItem.

    The item's own range (or textEdit range) wins; otherwise the
    suggestion is anchored at the cursor.
    """
    label = str(item.get("label", ""))

    lsp_range = item.get("range")
    if not isinstance(lsp_range, dict):
        text_edit = item.get("textEdit")
        lsp_range = text_edit.get("range") if isinstance(text_edit, dict) else None

    try:
        editor_range = EditorRange.from_lsp(lsp_range) if lsp_range else EditorRange.at(position)
    except (KeyError, TypeError, ValueError):
        editor_range = EditorRange.at(position)

    return CompletionSuggestion(
        label=label,
        kind=CompletionItemKind.from_lsp(item.get("kind")),
        documentation=item.get("documentation"),
        insert_text=item.get("insertText") or label,
        insert_as_snippet=item.get("insertTextFormat") == INSERT_TEXT_FORMAT_SNIPPET,
        range=editor_range,
    )


def map_completion_result(result: Any, position: Position) -> CompletionList:
    """
    Map a completion response (CompletionItem[] or CompletionList).

    Anything else yields no suggestions.
    """
    if isinstance(result, list):
        items = result
    elif isinstance(result, dict):
        items = result.get("items") or []
    else:
        items = []

    suggestions = [
        map_completion_item(item, position)
        for item in items
        if isinstance(item, dict)
    ]
    return CompletionList(suggestions=suggestions)
