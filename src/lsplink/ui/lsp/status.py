"""Connection status and session log widgets."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field

from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import Static

from lsplink.lsp.features.types import LogLevel

DEFAULT_LOG_HISTORY = 50


class ConnectionBadge(Static):
    """Badge showing whether the language server is usable."""

    DEFAULT_CSS = """
    ConnectionBadge {
        height: 1;
        padding: 0 1;
        color: $text;
        background: $error 30%;
    }

    ConnectionBadge.-ready {
        background: $success 30%;
    }
    """

    def __init__(
        self,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__("", markup=False, name=name, id=id, classes=classes)
        self.connected = False
        self.status_text = "Disconnected"

    @property
    def label(self) -> str:
        return "LSP Ready" if self.connected else "LSP Error"

    def render_status(self) -> str:
        return f"{self.label} · {self.status_text}"

    def on_mount(self) -> None:
        """Render the current status when mounted."""
        self._refresh_badge()

    def set_status(self, connected: bool, text: str) -> None:
        """
        Update the badge.

        Args:
            connected: Whether the connection is open.
            text: Human-readable status line.
        """
        self.connected = connected
        self.status_text = text
        self._refresh_badge()

    def _refresh_badge(self) -> None:
        if not self.is_mounted:
            return
        self.set_class(self.connected, "-ready")
        self.update(self.render_status())


@dataclass
class LogEntry:
    """One line of the session log."""

    text: str
    level: LogLevel
    timestamp: float = field(default_factory=time.time)

    def format(self) -> str:
        stamp = time.strftime("%H:%M:%S", time.localtime(self.timestamp))
        return f"[{stamp}] {self.text}"


class LogPanel(Widget):
    """Scrolling panel with the most recent session log entries."""

    DEFAULT_CSS = """
    LogPanel {
        height: 100%;
        border: solid $primary;
    }

    LogPanel #lsp-log-header {
        dock: top;
        height: 1;
        background: $primary;
        padding: 0 1;
    }

    LogPanel #lsp-log-content {
        height: 1fr;
        overflow-y: auto;
        padding: 0 1;
    }
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_LOG_HISTORY,
        *,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        """
        Initialize log panel.

        Args:
            max_entries: Entries kept; older ones are dropped.
            name: Widget name.
            id: Widget ID.
            classes: CSS classes.
        """
        super().__init__(name=name, id=id, classes=classes)
        self.entries: deque[LogEntry] = deque(maxlen=max_entries)

    def compose(self) -> ComposeResult:
        """Compose the widget."""
        yield Static("LSP Log", id="lsp-log-header")
        yield Static(self.render_entries(), id="lsp-log-content", markup=False)

    def render_entries(self) -> str:
        # Newest first
        return "\n".join(entry.format() for entry in reversed(self.entries))

    def add_entry(self, text: str, level: LogLevel = LogLevel.INFO) -> LogEntry:
        """Append an entry and redraw."""
        entry = LogEntry(text=text, level=level)
        self.entries.append(entry)
        self._refresh_content()
        return entry

    def clear(self) -> None:
        self.entries.clear()
        self._refresh_content()

    def _refresh_content(self) -> None:
        if not self.is_mounted:
            return
        self.query_one("#lsp-log-content", Static).update(self.render_entries())
