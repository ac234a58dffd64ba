"""Interface to the editor and UI collaborators of a session."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from lsplink.lsp.features.types import (
    ContentChange,
    DocumentSnapshot,
    LogLevel,
    Marker,
)

logger = logging.getLogger(__name__)

ContentChangeCallback = Callable[[list[ContentChange]], None]


class BridgeAdapter(Protocol):
    """
    Protocol for the collaborators a session talks to.

    Implemented by the editor integration layer: it receives markers,
    log lines, alerts and connection status, and supplies the current
    document and its edits.
    """

    def on_diagnostics(self, markers: list[Marker], uri: str | None) -> None:
        """Replace the displayed markers for a document."""
        ...

    def on_log(self, text: str, level: LogLevel) -> None:
        """Append a human-readable line to the session log."""
        ...

    def on_alert(self, text: str, urgent: bool) -> None:
        """Show a transient alert; urgent alerts should stand out."""
        ...

    def on_status(self, connected: bool, text: str) -> None:
        """Update the connection status indicator."""
        ...

    def get_document_snapshot(self) -> DocumentSnapshot | None:
        """Return the open document, or None if there is none."""
        ...

    def on_content_change(self, callback: ContentChangeCallback) -> None:
        """Register a callback receiving each batch of editor changes."""
        ...


class NullBridge:
    """Bridge that displays nothing; session log lines go to `logging`."""

    def on_diagnostics(self, markers: list[Marker], uri: str | None) -> None:
        pass

    def on_log(self, text: str, level: LogLevel) -> None:
        logger.debug(f"[{level.value}] {text}")

    def on_alert(self, text: str, urgent: bool) -> None:
        pass

    def on_status(self, connected: bool, text: str) -> None:
        pass

    def get_document_snapshot(self) -> DocumentSnapshot | None:
        return None

    def on_content_change(self, callback: ContentChangeCallback) -> None:
        pass
