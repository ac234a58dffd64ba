"""Tests for completion params and result mapping."""

from lsplink.lsp.features import (
    CompletionItemKind,
    EditorRange,
    Position,
    build_completion_params,
    map_completion_item,
    map_completion_result,
)

CURSOR = Position(line=4, character=7)


class TestCompletionParams:
    """Tests for build_completion_params."""

    def test_params_shape(self):
        params = build_completion_params("file:///main.lua", CURSOR)
        assert params == {
            "textDocument": {"uri": "file:///main.lua"},
            "position": {"line": 4, "character": 7},
            "context": {"triggerKind": 1},
        }


class TestCompletionItemKind:
    """Tests for CompletionItemKind.from_lsp."""

    def test_known_kinds(self):
        assert CompletionItemKind.from_lsp(1) == CompletionItemKind.TEXT
        assert CompletionItemKind.from_lsp(3) == CompletionItemKind.FUNCTION
        assert CompletionItemKind.from_lsp(14) == CompletionItemKind.KEYWORD
        assert CompletionItemKind.from_lsp(18) == CompletionItemKind.REFERENCE

    def test_eighteen_kinds(self):
        assert len(CompletionItemKind) == 18

    def test_unknown_kind_is_text(self):
        assert CompletionItemKind.from_lsp(99) == CompletionItemKind.TEXT
        assert CompletionItemKind.from_lsp(0) == CompletionItemKind.TEXT
        assert CompletionItemKind.from_lsp(None) == CompletionItemKind.TEXT
        assert CompletionItemKind.from_lsp("3") == CompletionItemKind.TEXT


class TestMapCompletionItem:
    """Tests for map_completion_item."""

    def test_minimal_item(self):
        suggestion = map_completion_item({"label": "print"}, CURSOR)
        assert suggestion.label == "print"
        assert suggestion.insert_text == "print"
        assert suggestion.kind == CompletionItemKind.TEXT
        assert not suggestion.insert_as_snippet
        assert suggestion.range == EditorRange(5, 8, 5, 8)

    def test_full_item(self):
        suggestion = map_completion_item(
            {
                "label": "format",
                "kind": 3,
                "insertText": "format(${1:fmt})",
                "insertTextFormat": 2,
                "documentation": "string.format",
            },
            CURSOR,
        )
        assert suggestion.kind == CompletionItemKind.FUNCTION
        assert suggestion.insert_text == "format(${1:fmt})"
        assert suggestion.insert_as_snippet
        assert suggestion.documentation == "string.format"

    def test_plain_text_format(self):
        suggestion = map_completion_item({"label": "x", "insertTextFormat": 1}, CURSOR)
        assert not suggestion.insert_as_snippet

    def test_item_range_converted(self):
        suggestion = map_completion_item(
            {
                "label": "foo",
                "textEdit": {
                    "newText": "foo",
                    "range": {
                        "start": {"line": 4, "character": 5},
                        "end": {"line": 4, "character": 7},
                    },
                },
            },
            CURSOR,
        )
        assert suggestion.range == EditorRange(5, 6, 5, 8)

    def test_to_dict(self):
        data = map_completion_item({"label": "end", "kind": 14}, CURSOR).to_dict()
        assert data["kind"] == "keyword"
        assert data["insertText"] == "end"
        assert data["range"] == {
            "startLineNumber": 5,
            "startColumn": 8,
            "endLineNumber": 5,
            "endColumn": 8,
        }


class TestMapCompletionResult:
    """Tests for map_completion_result."""

    def test_item_list(self):
        result = map_completion_result([{"label": "a"}, {"label": "b"}], CURSOR)
        assert [s.label for s in result.suggestions] == ["a", "b"]

    def test_completion_list(self):
        result = map_completion_result(
            {"isIncomplete": False, "items": [{"label": "a"}]},
            CURSOR,
        )
        assert len(result) == 1

    def test_null_result(self):
        assert len(map_completion_result(None, CURSOR)) == 0

    def test_unexpected_shape(self):
        assert len(map_completion_result("nope", CURSOR)) == 0
        assert len(map_completion_result({"items": None}, CURSOR)) == 0

    def test_non_object_items_skipped(self):
        result = map_completion_result([{"label": "a"}, "junk", 3], CURSOR)
        assert [s.label for s in result.suggestions] == ["a"]
