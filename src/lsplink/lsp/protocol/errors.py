"""Protocol error types and error codes."""

from dataclasses import dataclass
from typing import Any

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Client-side codes for failures that never reach the wire
REQUEST_TIMEOUT = -32001
HANDSHAKE_FAILED = -32002
MALFORMED_MESSAGE = PARSE_ERROR

# LSP reserved range
REQUEST_CANCELLED = -32800

ERROR_MESSAGES = {
    PARSE_ERROR: "Parse error",
    INVALID_REQUEST: "Invalid Request",
    METHOD_NOT_FOUND: "Method not found",
    INVALID_PARAMS: "Invalid params",
    INTERNAL_ERROR: "Internal error",
    REQUEST_TIMEOUT: "Request timeout",
    HANDSHAKE_FAILED: "Initialization failed",
    REQUEST_CANCELLED: "Request cancelled",
}


@dataclass
class LSPError(Exception):
    """
    LSP protocol error.

    Base of the per-request failure taxonomy. Every failure that
    completes a pending request is an LSPError (or a TransportError
    raised before anything was registered).
    """

    code: int
    message: str
    data: Any = None

    def __post_init__(self):
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-RPC error object."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error["data"] = self.data
        return error

    @classmethod
    def from_dict(cls, error: dict[str, Any]) -> "LSPError":
        """Create from JSON-RPC error object."""
        return cls(
            code=error.get("code", INTERNAL_ERROR),
            message=error.get("message") or "LSP error",
            data=error.get("data"),
        )

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code}, message={self.message!r})"


class RemoteError(LSPError):
    """The server answered with an error object."""

    @classmethod
    def from_response(cls, error: dict[str, Any]) -> "RemoteError":
        return cls.from_dict(error)


class RequestTimeout(LSPError):
    """No response arrived within the deadline."""

    @classmethod
    def after(cls, timeout_seconds: float, method: str | None = None) -> "RequestTimeout":
        suffix = f" ({method})" if method else ""
        return cls(
            code=REQUEST_TIMEOUT,
            message=f"Request timeout after {timeout_seconds}s{suffix}",
            data={"timeout": timeout_seconds},
        )


class RequestCancelled(LSPError):
    """The request was cancelled before a response arrived."""

    @classmethod
    def because(cls, reason: str | None = None) -> "RequestCancelled":
        return cls(
            code=REQUEST_CANCELLED,
            message=reason or ERROR_MESSAGES[REQUEST_CANCELLED],
        )


class MalformedMessage(LSPError):
    """An inbound frame could not be decoded into a protocol message."""

    @classmethod
    def because(cls, details: str) -> "MalformedMessage":
        return cls(
            code=MALFORMED_MESSAGE,
            message=f"Malformed message: {details}",
            data={"details": details},
        )


class HandshakeFailure(LSPError):
    """The initialize request failed."""

    @classmethod
    def caused_by(cls, cause: Exception) -> "HandshakeFailure":
        return cls(
            code=HANDSHAKE_FAILED,
            message=f"Initialization failed: {cause}",
        )
