"""textDocument/publishDiagnostics handling."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from lsplink.lsp.features.types import EditorRange, LogLevel, Marker, MarkerSeverity

if TYPE_CHECKING:
    from lsplink.lsp.bridge import BridgeAdapter

logger = logging.getLogger(__name__)

PUBLISH_DIAGNOSTICS_METHOD = "textDocument/publishDiagnostics"


def map_diagnostic(diagnostic: dict[str, Any]) -> Marker:
    """
    Map one LSP Diagnostic to a display marker.

    Lines and characters are zero-based in LSP and one-based for the
    display layer, so every coordinate moves up by one.
    """
    code = diagnostic.get("code")
    return Marker(
        range=EditorRange.from_lsp(diagnostic["range"]),
        message=str(diagnostic.get("message", "")),
        severity=MarkerSeverity.from_lsp(diagnostic.get("severity")),
        source=diagnostic.get("source"),
        code=code if isinstance(code, (str, int)) else None,
    )


class DiagnosticsHandler:
    """Forwards published diagnostics to the bridge as markers."""

    def __init__(self, bridge: "BridgeAdapter", enabled: bool = True):
        self.bridge = bridge
        self.enabled = enabled

    async def handle(self, params: dict[str, Any] | None) -> None:
        if not self.enabled:
            return

        if not params:
            logger.warning("Received publishDiagnostics without params")
            return

        markers: list[Marker] = []
        for diagnostic in params.get("diagnostics") or []:
            try:
                markers.append(map_diagnostic(diagnostic))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping invalid diagnostic: {e}")

        self.bridge.on_diagnostics(markers, params.get("uri"))

        if markers:
            self.bridge.on_log(f"Received {len(markers)} diagnostic(s)", LogLevel.INFO)
