"""JSON-RPC 2.0 message types for the LSP wire protocol."""

from dataclasses import dataclass, field
from typing import Any

JSONRPC_VERSION = "2.0"


@dataclass
class JSONRPCRequest:
    """
    JSON-RPC 2.0 request message.

    Requests expect a response from the recipient. Client-originated
    requests carry integer ids; server-originated ones may use strings.
    """

    method: str
    id: int | str
    params: dict[str, Any] | list[Any] | None = None
    jsonrpc: str = field(default=JSONRPC_VERSION, init=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
        }
        if self.params is not None:
            msg["params"] = self.params
        return msg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCRequest":
        """Create from JSON dict."""
        return cls(
            method=data["method"],
            id=data["id"],
            params=data.get("params"),
        )

    def __str__(self) -> str:
        return f"Request({self.method}, id={self.id})"


@dataclass
class JSONRPCError:
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            error["data"] = self.data
        return error

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCError":
        """Create from JSON dict."""
        return cls(
            code=data.get("code", -32603),
            message=data.get("message") or "LSP error",
            data=data.get("data"),
        )


@dataclass
class JSONRPCResponse:
    """
    JSON-RPC 2.0 response message.

    Either result or error must be present, but not both.
    """

    id: int | str | None
    result: Any = None
    error: JSONRPCError | None = None
    jsonrpc: str = field(default=JSONRPC_VERSION, init=False)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
        }
        if self.error is not None:
            msg["error"] = self.error.to_dict()
        else:
            msg["result"] = self.result
        return msg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCResponse":
        """Create from JSON dict."""
        error = None
        raw_error = data.get("error")
        if isinstance(raw_error, dict):
            error = JSONRPCError.from_dict(raw_error)
        elif raw_error is not None:
            # Non-object error payloads still fail the request
            error = JSONRPCError(code=-32603, message=str(raw_error) or "LSP error")
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=error,
        )

    @classmethod
    def success(cls, id: int | str | None, result: Any = None) -> "JSONRPCResponse":
        return cls(id=id, result=result)

    @classmethod
    def error_response(
        cls,
        id: int | str | None,
        code: int,
        message: str,
        data: Any = None,
    ) -> "JSONRPCResponse":
        return cls(id=id, error=JSONRPCError(code=code, message=message, data=data))

    def __str__(self) -> str:
        if self.is_error:
            return f"Response(id={self.id}, error={self.error.code})"
        return f"Response(id={self.id}, success)"


@dataclass
class JSONRPCNotification:
    """
    JSON-RPC 2.0 notification message.

    Notifications do not expect a response (no id field).
    """

    method: str
    params: dict[str, Any] | list[Any] | None = None
    jsonrpc: str = field(default=JSONRPC_VERSION, init=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        msg: dict[str, Any] = {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
        }
        if self.params is not None:
            msg["params"] = self.params
        return msg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JSONRPCNotification":
        """Create from JSON dict."""
        return cls(
            method=data["method"],
            params=data.get("params"),
        )

    def __str__(self) -> str:
        return f"Notification({self.method})"


Message = JSONRPCRequest | JSONRPCResponse | JSONRPCNotification


def parse_message(data: dict[str, Any]) -> Message:
    """
    Parse a JSON dict into the appropriate message type.

    Raises:
        ValueError: If the message is malformed.
    """
    if data.get("jsonrpc") != JSONRPC_VERSION:
        raise ValueError("Invalid JSON-RPC version")

    has_id = "id" in data
    method = data.get("method")
    has_result = "result" in data
    has_error = "error" in data

    if method is not None and not isinstance(method, str):
        raise ValueError("Method must be a string")

    # LSP ids are integer | string; null only on error responses
    identifier = data.get("id")
    if identifier is not None and (
        isinstance(identifier, bool) or not isinstance(identifier, (int, str))
    ):
        raise ValueError("id must be an integer or string")

    if method is not None and has_id:
        return JSONRPCRequest.from_dict(data)
    elif method is not None:
        return JSONRPCNotification.from_dict(data)
    elif (has_result or has_error) and has_id:
        return JSONRPCResponse.from_dict(data)
    else:
        raise ValueError("Cannot determine message type")
