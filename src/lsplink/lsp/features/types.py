"""Caller-facing shapes produced from LSP results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CompletionItemKind(Enum):
    """Completion kinds understood by the display layer."""

    TEXT = "text"
    METHOD = "method"
    FUNCTION = "function"
    CONSTRUCTOR = "constructor"
    FIELD = "field"
    VARIABLE = "variable"
    CLASS = "class"
    INTERFACE = "interface"
    MODULE = "module"
    PROPERTY = "property"
    UNIT = "unit"
    VALUE = "value"
    ENUM = "enum"
    KEYWORD = "keyword"
    SNIPPET = "snippet"
    COLOR = "color"
    FILE = "file"
    REFERENCE = "reference"

    @classmethod
    def from_lsp(cls, kind: Any) -> "CompletionItemKind":
        """Map an LSP CompletionItemKind number; unknown values become TEXT."""
        if not isinstance(kind, int):
            return cls.TEXT
        return _LSP_COMPLETION_KINDS.get(kind, cls.TEXT)


# LSP numbers 1..18 in declaration order
_LSP_COMPLETION_KINDS: dict[int, CompletionItemKind] = {
    number: kind for number, kind in enumerate(CompletionItemKind, start=1)
}


class MarkerSeverity(Enum):
    """Diagnostic marker severity for the display layer."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    HINT = "hint"

    @classmethod
    def from_lsp(cls, severity: Any) -> "MarkerSeverity":
        """Map LSP DiagnosticSeverity 1..4; anything else becomes HINT."""
        if not isinstance(severity, int):
            return cls.HINT
        return _LSP_SEVERITIES.get(severity, cls.HINT)


_LSP_SEVERITIES: dict[int, MarkerSeverity] = {
    1: MarkerSeverity.ERROR,
    2: MarkerSeverity.WARNING,
    3: MarkerSeverity.INFO,
    4: MarkerSeverity.HINT,
}


class LogLevel(Enum):
    """Levels of the user-facing session log."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"

    @classmethod
    def from_message_type(cls, message_type: Any) -> "LogLevel":
        """
        Map an LSP MessageType to a log level.

        Error (1) and Warning (2) collapse to ERROR; Info (3), Log (4)
        and anything unknown collapse to INFO.
        """
        if message_type in (1, 2):
            return cls.ERROR
        return cls.INFO


@dataclass(frozen=True)
class Position:
    """Zero-based LSP position."""

    line: int
    character: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Position":
        return cls(line=int(data["line"]), character=int(data["character"]))

    @classmethod
    def from_editor(cls, line_number: int, column: int) -> "Position":
        """Convert a one-based editor position."""
        return cls(line=line_number - 1, character=column - 1)

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class EditorRange:
    """One-based editor range (lines and columns start at 1)."""

    start_line_number: int
    start_column: int
    end_line_number: int
    end_column: int

    @classmethod
    def from_lsp(cls, data: dict[str, Any]) -> "EditorRange":
        """Convert a zero-based LSP range by shifting every coordinate by one."""
        start = data["start"]
        end = data["end"]
        return cls(
            start_line_number=int(start["line"]) + 1,
            start_column=int(start["character"]) + 1,
            end_line_number=int(end["line"]) + 1,
            end_column=int(end["character"]) + 1,
        )

    @classmethod
    def at(cls, position: Position) -> "EditorRange":
        """Zero-width range at an LSP position."""
        return cls(
            start_line_number=position.line + 1,
            start_column=position.character + 1,
            end_line_number=position.line + 1,
            end_column=position.character + 1,
        )

    def to_lsp(self) -> dict[str, Any]:
        """Convert back to a zero-based LSP range."""
        return {
            "start": {
                "line": self.start_line_number - 1,
                "character": self.start_column - 1,
            },
            "end": {
                "line": self.end_line_number - 1,
                "character": self.end_column - 1,
            },
        }

    def to_dict(self) -> dict[str, int]:
        return {
            "startLineNumber": self.start_line_number,
            "startColumn": self.start_column,
            "endLineNumber": self.end_line_number,
            "endColumn": self.end_column,
        }


@dataclass
class Marker:
    """A diagnostic as the display layer expects it."""

    range: EditorRange
    message: str
    severity: MarkerSeverity
    source: str | None = None
    code: str | int | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = self.range.to_dict()
        result["message"] = self.message
        result["severity"] = self.severity.value
        if self.source is not None:
            result["source"] = self.source
        if self.code is not None:
            result["code"] = self.code
        return result


@dataclass
class CompletionSuggestion:
    """One completion entry for the display layer."""

    label: str
    kind: CompletionItemKind
    insert_text: str
    range: EditorRange
    documentation: Any = None
    insert_as_snippet: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "kind": self.kind.value,
            "documentation": self.documentation,
            "insertText": self.insert_text,
            "insertAsSnippet": self.insert_as_snippet,
            "range": self.range.to_dict(),
        }


@dataclass
class CompletionList:
    """Result of a completion request."""

    suggestions: list[CompletionSuggestion] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "CompletionList":
        return cls()

    def __len__(self) -> int:
        return len(self.suggestions)

    def to_dict(self) -> dict[str, Any]:
        return {"suggestions": [s.to_dict() for s in self.suggestions]}


@dataclass
class HoverResult:
    """Hover contents normalized to a single markdown block."""

    value: str
    range: EditorRange | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "range": self.range.to_dict() if self.range else None,
            "contents": [{"value": self.value}],
        }


@dataclass(frozen=True)
class DocumentSnapshot:
    """Current document as held by the editor."""

    uri: str
    text: str


@dataclass(frozen=True)
class ContentChange:
    """One edit reported by the editor, in editor coordinates."""

    range: EditorRange
    text: str

    def to_lsp(self) -> dict[str, Any]:
        return {"range": self.range.to_lsp(), "text": self.text}
