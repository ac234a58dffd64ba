"""Client capability definitions for LSP initialization."""

from dataclasses import dataclass, field
from typing import Any

MARKUP_FORMATS = ["markdown", "plaintext"]


@dataclass
class CompletionCapability:
    """textDocument.completion support."""

    snippet_support: bool = True
    commit_characters_support: bool = True
    documentation_format: list[str] = field(default_factory=lambda: list(MARKUP_FORMATS))
    deprecated_support: bool = True
    preselect_support: bool = True
    context_support: bool = True
    """Whether the client sends a CompletionContext with each request."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "completionItem": {
                "snippetSupport": self.snippet_support,
                "commitCharactersSupport": self.commit_characters_support,
                "documentationFormat": list(self.documentation_format),
                "deprecatedSupport": self.deprecated_support,
                "preselectSupport": self.preselect_support,
            },
            "contextSupport": self.context_support,
        }


@dataclass
class HoverCapability:
    """textDocument.hover support."""

    content_format: list[str] = field(default_factory=lambda: list(MARKUP_FORMATS))

    def to_dict(self) -> dict[str, Any]:
        return {"contentFormat": list(self.content_format)}


@dataclass
class SignatureHelpCapability:
    """textDocument.signatureHelp support."""

    documentation_format: list[str] = field(default_factory=lambda: list(MARKUP_FORMATS))
    label_offset_support: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "signatureInformation": {
                "documentationFormat": list(self.documentation_format),
                "parameterInformation": {
                    "labelOffsetSupport": self.label_offset_support,
                },
            },
        }


@dataclass
class PublishDiagnosticsCapability:
    """textDocument.publishDiagnostics support."""

    related_information: bool = True
    version_support: bool = True
    tag_value_set: list[int] = field(default_factory=lambda: [1, 2])
    """Diagnostic tags understood (1 = Unnecessary, 2 = Deprecated)."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "relatedInformation": self.related_information,
            "versionSupport": self.version_support,
            "tagSupport": {"valueSet": list(self.tag_value_set)},
        }


@dataclass
class WorkspaceCapability:
    """Workspace-level client support."""

    workspace_folders: bool = True
    configuration: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "workspaceFolders": self.workspace_folders,
            "configuration": self.configuration,
        }


@dataclass
class ClientCapabilities:
    """
    Everything the client declares in the initialize request.

    A feature left as None is omitted from the wire format.
    """

    completion: CompletionCapability | None = None
    hover: HoverCapability | None = None
    signature_help: SignatureHelpCapability | None = None
    publish_diagnostics: PublishDiagnosticsCapability | None = None

    definition_link_support: bool | None = None
    """Whether definition results may be LocationLinks."""

    references_include_declaration: bool | None = None

    document_formatting: bool = False
    document_range_formatting: bool = False

    workspace: WorkspaceCapability | None = None

    experimental: dict[str, Any] | None = None
    """Experimental capabilities (vendor-specific)."""

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to wire format for the initialize request.

        Returns:
            Dict suitable for JSON serialization.
        """
        text_document: dict[str, Any] = {}

        if self.completion is not None:
            text_document["completion"] = self.completion.to_dict()

        if self.hover is not None:
            text_document["hover"] = self.hover.to_dict()

        if self.signature_help is not None:
            text_document["signatureHelp"] = self.signature_help.to_dict()

        if self.publish_diagnostics is not None:
            text_document["publishDiagnostics"] = self.publish_diagnostics.to_dict()

        if self.definition_link_support is not None:
            text_document["definition"] = {"linkSupport": self.definition_link_support}

        if self.references_include_declaration is not None:
            text_document["references"] = {
                "context": {"includeDeclaration": self.references_include_declaration}
            }

        if self.document_formatting:
            text_document["formatting"] = {"dynamicRegistration": False}

        if self.document_range_formatting:
            text_document["rangeFormatting"] = {"dynamicRegistration": False}

        caps: dict[str, Any] = {}
        if text_document:
            caps["textDocument"] = text_document

        if self.workspace is not None:
            caps["workspace"] = self.workspace.to_dict()

        if self.experimental is not None:
            caps["experimental"] = self.experimental

        return caps


DEFAULT_CLIENT_CAPABILITIES = ClientCapabilities(
    completion=CompletionCapability(),
    hover=HoverCapability(),
    signature_help=SignatureHelpCapability(),
    publish_diagnostics=PublishDiagnosticsCapability(),
    definition_link_support=True,
    references_include_declaration=True,
    document_formatting=True,
    document_range_formatting=True,
    workspace=WorkspaceCapability(),
)
