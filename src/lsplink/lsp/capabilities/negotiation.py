"""LSP initialize/initialized handshake."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from lsplink import __version__
from lsplink.lsp.capabilities.client import (
    ClientCapabilities,
    DEFAULT_CLIENT_CAPABILITIES,
)
from lsplink.lsp.capabilities.server import ServerCapabilities

logger = logging.getLogger(__name__)

TRACE_VALUES = ("off", "messages", "verbose")


class RequestSender(Protocol):
    """The part of a session the handshake needs."""

    async def request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any: ...

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None: ...


@dataclass
class ClientInfo:
    """Information about this client sent during initialization."""

    name: str = "lsplink"
    version: str = __version__

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "version": self.version}


@dataclass
class ServerInfo:
    """Information about the connected server."""

    name: str
    version: str

    @classmethod
    def from_dict(cls, data: dict | None) -> "ServerInfo":
        data = data or {}
        return cls(
            name=data.get("name", "unknown"),
            version=data.get("version", "unknown"),
        )


@dataclass
class NegotiationResult:
    """Everything exchanged during a successful handshake."""

    server_info: ServerInfo
    server_capabilities: ServerCapabilities
    client_capabilities: ClientCapabilities

    def __str__(self) -> str:
        features = self.server_capabilities.get_available_features()
        return (
            f"NegotiationResult(server={self.server_info.name}/{self.server_info.version}, "
            f"features={features})"
        )


def build_initialize_params(
    client_capabilities: ClientCapabilities,
    client_info: ClientInfo,
    trace: str = "verbose",
) -> dict[str, Any]:
    """Params of the initialize request."""
    if trace not in TRACE_VALUES:
        raise ValueError(f"trace must be one of {TRACE_VALUES}")

    return {
        "processId": None,
        "clientInfo": client_info.to_dict(),
        "rootUri": None,
        "capabilities": client_capabilities.to_dict(),
        "trace": trace,
        "workspaceFolders": None,
    }


class CapabilityNegotiator:
    """
    Performs the initialize/initialized exchange.

    The caller decides what "ready" means; the negotiator only talks to
    the server and parses what comes back.
    """

    def __init__(
        self,
        sender: RequestSender,
        client_capabilities: ClientCapabilities | None = None,
        client_info: ClientInfo | None = None,
        trace: str = "verbose",
    ):
        self.sender = sender
        self.client_capabilities = client_capabilities or DEFAULT_CLIENT_CAPABILITIES
        self.client_info = client_info or ClientInfo()
        self.trace = trace

    async def negotiate(self, timeout: float | None = None) -> NegotiationResult:
        """
        Send initialize, parse the reply, then send initialized.

        Raises:
            LSPError: If the initialize request fails.
            TransportError: If the connection is not usable.
        """
        logger.debug(f"Starting initialize handshake as {self.client_info.name}")

        params = build_initialize_params(
            self.client_capabilities,
            self.client_info,
            self.trace,
        )
        response = await self.sender.request("initialize", params, timeout=timeout)
        response = response if isinstance(response, dict) else {}

        server_info = ServerInfo.from_dict(response.get("serverInfo"))
        server_capabilities = ServerCapabilities.from_dict(response.get("capabilities"))
        logger.info(
            f"Server initialized: {server_info.name} v{server_info.version}, "
            f"features={server_capabilities.get_available_features()}"
        )

        await self.sender.notify("initialized", {})
        logger.debug("Sent initialized notification")

        return NegotiationResult(
            server_info=server_info,
            server_capabilities=server_capabilities,
            client_capabilities=self.client_capabilities,
        )
