"""Pytest configuration and fixtures."""

import asyncio
from typing import Any, Callable

import pytest
import pytest_asyncio

from lsplink.lib import oj
from lsplink.lsp.config import LSPClientConfig
from lsplink.lsp.features.types import ContentChange, DocumentSnapshot, LogLevel, Marker
from lsplink.lsp.session import LSPSession
from lsplink.lsp.transport.base import ConnectionError, Transport, TransportNotReady
from lsplink.lsp.transport.types import TransportEventType, TransportState

# Enable async tests without marking each one
pytest_plugins = ["pytest_asyncio"]


class FakeTransport(Transport):
    """
    In-memory transport driven by the test.

    `open_results` scripts successive open() outcomes: True opens, an
    exception instance fails. Once exhausted, every open succeeds.
    """

    def __init__(self, open_results: list[Any] | None = None):
        super().__init__()
        self.open_results = list(open_results or [])
        self.open_calls: list[str] = []
        self.sent: list[str] = []
        self.answered: set[Any] = set()
        self.send_error: Exception | None = None

    async def open(self, address: str) -> None:
        self.open_calls.append(address)
        self._state = TransportState.CONNECTING
        self._emit(TransportEventType.CONNECTING, data={"address": address})

        outcome = self.open_results.pop(0) if self.open_results else True
        if isinstance(outcome, Exception):
            self._state = TransportState.CLOSED
            self._emit(TransportEventType.ERROR, data={"address": address}, error=outcome)
            raise ConnectionError(f"Failed to connect to {address}: {outcome}", cause=outcome)

        self._state = TransportState.OPEN
        self._emit(TransportEventType.OPEN, data={"address": address})

    async def send(self, frame: str) -> None:
        if not self.is_open():
            raise TransportNotReady()
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(frame)
        self._emit(TransportEventType.MESSAGE_SENT, data={"size": len(frame)})

    async def close(self, code: int = 1000, reason: str = "") -> None:
        if self._state == TransportState.CLOSED:
            return
        self._state = TransportState.CLOSED
        self._emit(TransportEventType.CLOSE, data={"code": code, "reason": reason})

    def simulate_message(self, message: dict[str, Any] | str) -> None:
        """Deliver one inbound frame."""
        if isinstance(message, dict) and ("result" in message or "error" in message):
            self.answered.add(message.get("id"))
        frame = message if isinstance(message, str) else oj.dumps_str(message)
        self._emit(TransportEventType.MESSAGE, data={"frame": frame})

    def simulate_close(self, code: int = 1006, reason: str = "") -> None:
        """Drop the connection from the server side."""
        self._state = TransportState.CLOSED
        self._emit(TransportEventType.CLOSE, data={"code": code, "reason": reason})

    def sent_messages(self) -> list[dict[str, Any]]:
        return [oj.loads(frame) for frame in self.sent]

    def sent_methods(self) -> list[str | None]:
        return [message.get("method") for message in self.sent_messages()]

    def pending_request(self, method: str) -> dict[str, Any] | None:
        """Most recent request for method that has not been answered yet."""
        for message in reversed(self.sent_messages()):
            if message.get("method") != method or "id" not in message:
                continue
            if message["id"] not in self.answered:
                return message
        return None

    def respond(self, request: dict[str, Any], result: Any = None) -> None:
        self.simulate_message({"jsonrpc": "2.0", "id": request["id"], "result": result})


class RecordingBridge:
    """BridgeAdapter that records every call."""

    def __init__(self, document: DocumentSnapshot | None = None):
        self.document = document
        self.diagnostics: list[tuple[list[Marker], str | None]] = []
        self.logs: list[tuple[str, LogLevel]] = []
        self.alerts: list[tuple[str, bool]] = []
        self.statuses: list[tuple[bool, str]] = []
        self.change_callbacks: list[Callable[[list[ContentChange]], None]] = []

    def on_diagnostics(self, markers: list[Marker], uri: str | None) -> None:
        self.diagnostics.append((markers, uri))

    def on_log(self, text: str, level: LogLevel) -> None:
        self.logs.append((text, level))

    def on_alert(self, text: str, urgent: bool) -> None:
        self.alerts.append((text, urgent))

    def on_status(self, connected: bool, text: str) -> None:
        self.statuses.append((connected, text))

    def get_document_snapshot(self) -> DocumentSnapshot | None:
        return self.document

    def on_content_change(self, callback: Callable[[list[ContentChange]], None]) -> None:
        self.change_callbacks.append(callback)

    def emit_changes(self, changes: list[ContentChange]) -> None:
        for callback in self.change_callbacks:
            callback(changes)

    def log_texts(self) -> list[str]:
        return [text for text, _ in self.logs]


async def wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    """Poll until predicate() is true or fail after timeout seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met in time")
        await asyncio.sleep(0.001)


DEFAULT_SERVER_CAPABILITIES = {
    "completionProvider": {"triggerCharacters": [".", ":"]},
    "hoverProvider": True,
    "textDocumentSync": 2,
}


async def complete_handshake(
    session: LSPSession,
    transport: FakeTransport,
    capabilities: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Answer the pending initialize request and wait for READY."""
    await wait_until(lambda: transport.pending_request("initialize") is not None)
    initialize = transport.pending_request("initialize")
    transport.respond(
        initialize,
        {
            "capabilities": (
                DEFAULT_SERVER_CAPABILITIES if capabilities is None else capabilities
            ),
            "serverInfo": {"name": "fake-ls", "version": "1.0"},
        },
    )
    await wait_until(lambda: session.is_ready)
    return initialize


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def bridge():
    return RecordingBridge(DocumentSnapshot(uri="file:///main.lua", text="print('hi')\n"))


@pytest.fixture
def fast_config():
    """Config with millisecond backoff and a short request timeout."""
    return LSPClientConfig(
        request_timeout=0.5,
        reconnect_base_delay=0.001,
        reconnect_max_delay=0.01,
    )


@pytest_asyncio.fixture
async def session(fast_config, bridge, fake_transport):
    lsp_session = LSPSession(fast_config, bridge=bridge, transport=fake_transport)
    yield lsp_session
    await lsp_session.close()


@pytest_asyncio.fixture
async def ready_session(session, fake_transport):
    """A started session that has completed its handshake."""
    await session.start()
    await complete_handshake(session, fake_transport)
    return session


@pytest.fixture
def handshake():
    return complete_handshake


@pytest.fixture
def until():
    return wait_until
