"""Bridge adapter routing session output into a Textual app."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lsplink.lsp.bridge import ContentChangeCallback
from lsplink.lsp.features.types import (
    ContentChange,
    DocumentSnapshot,
    LogLevel,
    Marker,
)

if TYPE_CHECKING:
    from textual.app import App

    from lsplink.lsp.config import LSPClientConfig
    from lsplink.ui.lsp.status import ConnectionBadge, LogPanel

logger = logging.getLogger(__name__)

DEFAULT_ALERT_TIMEOUT = 3.0


class TextualBridge:
    """
    BridgeAdapter for a Textual application.

    Alerts become toast notifications, log lines go to a LogPanel, and
    connection status to a ConnectionBadge. The bridge also holds the
    current document on behalf of whatever widget edits it: call
    set_document() when a document is loaded and apply_changes() after
    each edit.
    """

    def __init__(
        self,
        app: "App",
        badge: "ConnectionBadge | None" = None,
        log_panel: "LogPanel | None" = None,
        alert_timeout: float = DEFAULT_ALERT_TIMEOUT,
        marker_owner: str = "lsplink",
    ):
        """
        Args:
            app: App whose notify() shows alerts.
            badge: Optional connection status badge.
            log_panel: Optional session log panel.
            alert_timeout: Seconds an alert stays visible.
            marker_owner: Owner tag markers are stored under.
        """
        self.app = app
        self.badge = badge
        self.log_panel = log_panel
        self.alert_timeout = alert_timeout
        self.marker_owner = marker_owner

        self.markers: dict[str | None, list[Marker]] = {}
        self._document: DocumentSnapshot | None = None
        self._change_callbacks: list[ContentChangeCallback] = []

    @classmethod
    def from_config(
        cls,
        app: "App",
        config: "LSPClientConfig",
        badge: "ConnectionBadge | None" = None,
        log_panel: "LogPanel | None" = None,
    ) -> "TextualBridge":
        return cls(
            app,
            badge=badge,
            log_panel=log_panel,
            alert_timeout=config.alert_timeout,
            marker_owner=config.marker_owner,
        )

    def on_diagnostics(self, markers: list[Marker], uri: str | None) -> None:
        self.markers[uri] = list(markers)

    def on_log(self, text: str, level: LogLevel) -> None:
        if self.log_panel is not None:
            self.log_panel.add_entry(text, level)

    def on_alert(self, text: str, urgent: bool) -> None:
        self.app.notify(
            text,
            severity="error" if urgent else "information",
            timeout=self.alert_timeout,
        )

    def on_status(self, connected: bool, text: str) -> None:
        if self.badge is not None:
            self.badge.set_status(connected, text)

    def get_document_snapshot(self) -> DocumentSnapshot | None:
        return self._document

    def on_content_change(self, callback: ContentChangeCallback) -> None:
        self._change_callbacks.append(callback)

    def set_document(self, uri: str, text: str) -> None:
        """Replace the current document."""
        self._document = DocumentSnapshot(uri=uri, text=text)

    def apply_changes(self, changes: list[ContentChange], text: str) -> None:
        """
        Record an edit made in the editor.

        Args:
            changes: The edits, in one-based editor coordinates.
            text: Full document text after the edits.
        """
        if self._document is None:
            logger.debug("Ignoring edit with no open document")
            return

        self._document = DocumentSnapshot(uri=self._document.uri, text=text)
        for callback in list(self._change_callbacks):
            try:
                callback(changes)
            except Exception:
                logger.exception("Content change callback failed")
