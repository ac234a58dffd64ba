"""Per-session mutable state shared by the engine."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterator

from lsplink.lsp.capabilities.negotiation import ServerInfo
from lsplink.lsp.capabilities.server import ServerCapabilities


@dataclass
class SessionContext:
    """
    State that outlives a single connection.

    The request id counter is created once and never rewound, so ids
    stay strictly increasing across reconnects and a late response from
    an old connection can never match a new request. Everything learned
    from a particular server connection is dropped by
    reset_for_connection().
    """

    server_capabilities: ServerCapabilities | None = None
    server_info: ServerInfo | None = None
    connected: bool = False
    _ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)

    def next_id(self) -> int:
        return next(self._ids)

    def reset_for_connection(self) -> None:
        self.server_capabilities = None
        self.server_info = None
