"""LSP session engine and its per-session context."""

from lsplink.lsp.session.context import SessionContext
from lsplink.lsp.session.engine import (
    LSPSession,
    RequestHandler,
    NotificationHandler,
    ReadyCallback,
    CANCEL_REQUEST_METHOD,
    DID_OPEN_METHOD,
    DID_CHANGE_METHOD,
)

__all__ = [
    "SessionContext",
    "LSPSession",
    "RequestHandler",
    "NotificationHandler",
    "ReadyCallback",
    "CANCEL_REQUEST_METHOD",
    "DID_OPEN_METHOD",
    "DID_CHANGE_METHOD",
]
