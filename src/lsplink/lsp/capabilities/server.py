"""Server capability snapshot from the initialize response."""

from dataclasses import dataclass, field
from typing import Any


def _enabled(value: Any) -> bool:
    """LSP providers are either a boolean or an options object."""
    return value is True or isinstance(value, dict)


@dataclass(frozen=True)
class ServerCapabilities:
    """
    Negotiated, immutable snapshot of what the server supports.

    Produced once per successful handshake and only read afterwards.
    """

    completion_provider: dict[str, Any] | None = None
    hover_provider: bool | dict[str, Any] | None = None
    signature_help_provider: dict[str, Any] | None = None
    definition_provider: bool | dict[str, Any] | None = None
    references_provider: bool | dict[str, Any] | None = None
    document_formatting_provider: bool | dict[str, Any] | None = None
    document_range_formatting_provider: bool | dict[str, Any] | None = None
    text_document_sync: int | dict[str, Any] | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)
    """The capabilities object exactly as the server sent it."""

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ServerCapabilities":
        """
        Parse from initialize response.

        Args:
            data: The 'capabilities' object from the server response.
        """
        data = data if isinstance(data, dict) else {}
        completion = data.get("completionProvider")
        signature_help = data.get("signatureHelpProvider")
        return cls(
            completion_provider=completion if isinstance(completion, dict) else (
                {} if completion is True else None
            ),
            hover_provider=data.get("hoverProvider"),
            signature_help_provider=signature_help if isinstance(signature_help, dict) else None,
            definition_provider=data.get("definitionProvider"),
            references_provider=data.get("referencesProvider"),
            document_formatting_provider=data.get("documentFormattingProvider"),
            document_range_formatting_provider=data.get("documentRangeFormattingProvider"),
            text_document_sync=data.get("textDocumentSync"),
            raw=dict(data),
        )

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)

    def supports_completion(self) -> bool:
        return self.completion_provider is not None

    def supports_hover(self) -> bool:
        return _enabled(self.hover_provider)

    def supports_signature_help(self) -> bool:
        return self.signature_help_provider is not None

    def supports_definition(self) -> bool:
        return _enabled(self.definition_provider)

    def supports_references(self) -> bool:
        return _enabled(self.references_provider)

    def supports_formatting(self) -> bool:
        return _enabled(self.document_formatting_provider)

    @property
    def completion_trigger_characters(self) -> list[str]:
        if not self.completion_provider:
            return []
        return list(self.completion_provider.get("triggerCharacters") or [])

    def get_available_features(self) -> list[str]:
        """Names of the supported features, for logging."""
        features = []
        if self.supports_completion():
            features.append("completion")
        if self.supports_hover():
            features.append("hover")
        if self.supports_signature_help():
            features.append("signatureHelp")
        if self.supports_definition():
            features.append("definition")
        if self.supports_references():
            features.append("references")
        if self.supports_formatting():
            features.append("formatting")
        return features
