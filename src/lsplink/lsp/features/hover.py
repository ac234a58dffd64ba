"""textDocument/hover request and result normalization."""

from __future__ import annotations

from typing import Any

from lsplink.lsp.features.types import EditorRange, HoverResult, Position

HOVER_METHOD = "textDocument/hover"

PARAGRAPH_SEPARATOR = "\n\n"


def build_hover_params(uri: str, position: Position) -> dict[str, Any]:
    return {
        "textDocument": {"uri": uri},
        "position": position.to_dict(),
    }


def _fragment_text(content: Any) -> str:
    # MarkedString, MarkupContent, or {language, value}
    if isinstance(content, str):
        return content
    if isinstance(content, dict):
        value = content.get("value")
        return value if isinstance(value, str) else ""
    return ""


def normalize_hover_contents(contents: Any) -> str:
    """Join a single value or a sequence of markup fragments into one block."""
    fragments = contents if isinstance(contents, list) else [contents]
    return PARAGRAPH_SEPARATOR.join(_fragment_text(c) for c in fragments)


def map_hover_result(result: Any) -> HoverResult | None:
    """Map a hover response; a missing or empty result becomes None."""
    if not isinstance(result, dict):
        return None

    value = normalize_hover_contents(result.get("contents"))
    if not value.strip():
        return None

    editor_range = None
    if isinstance(result.get("range"), dict):
        try:
            editor_range = EditorRange.from_lsp(result["range"])
        except (KeyError, TypeError, ValueError):
            editor_range = None

    return HoverResult(
        value=value,
        range=editor_range,
    )
