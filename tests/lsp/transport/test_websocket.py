"""Tests for the WebSocket transport against a local server."""

import pytest
import pytest_asyncio
from websockets.asyncio.server import serve

from lsplink.lsp.transport import (
    ConnectionError,
    TransportConfig,
    TransportEventType,
    TransportNotReady,
    TransportState,
    WebSocketTransport,
)


class EchoServer:
    """Local server that records frames and can push or hang up."""

    def __init__(self):
        self.received: list[str] = []
        self.connections = []

    async def handler(self, ws):
        self.connections.append(ws)
        async for frame in ws:
            self.received.append(frame)
            await ws.send(f"echo:{frame}")


@pytest_asyncio.fixture
async def server():
    echo = EchoServer()
    async with serve(echo.handler, "127.0.0.1", 0) as ws_server:
        port = ws_server.sockets[0].getsockname()[1]
        echo.address = f"ws://127.0.0.1:{port}"
        yield echo


@pytest_asyncio.fixture
async def transport():
    ws_transport = WebSocketTransport()
    yield ws_transport
    await ws_transport.close()


class TestWebSocketTransport:
    """Tests for WebSocketTransport."""

    @pytest.mark.asyncio
    async def test_send_and_receive(self, server, transport, until):
        events = []
        transport.on_event(events.append)

        await transport.open(server.address)
        assert transport.is_open()

        await transport.send("one")
        await transport.send("two")
        await until(lambda: len([e for e in events if e.type == TransportEventType.MESSAGE]) == 2)

        frames = [e.frame for e in events if e.type == TransportEventType.MESSAGE]
        assert frames == ["echo:one", "echo:two"]
        assert server.received == ["one", "two"]
        assert events[0].type == TransportEventType.CONNECTING
        assert events[1].type == TransportEventType.OPEN

    @pytest.mark.asyncio
    async def test_send_before_open(self, transport):
        with pytest.raises(TransportNotReady):
            await transport.send("x")

    @pytest.mark.asyncio
    async def test_open_failure(self, transport):
        events = []
        transport.on_event(events.append)

        with pytest.raises(ConnectionError):
            await transport.open("ws://127.0.0.1:1")

        assert transport.state == TransportState.CLOSED
        assert events[-1].type == TransportEventType.ERROR

    @pytest.mark.asyncio
    async def test_server_close_emits_close(self, server, transport, until):
        events = []
        transport.on_event(events.append)
        await transport.open(server.address)
        await until(lambda: len(server.connections) == 1)

        await server.connections[0].close(4000, "bye")
        await until(lambda: any(e.type == TransportEventType.CLOSE for e in events))

        close = next(e for e in events if e.type == TransportEventType.CLOSE)
        assert close.close_code == 4000
        assert close.close_reason == "bye"
        assert not transport.is_open()

    @pytest.mark.asyncio
    async def test_local_close(self, server, transport):
        events = []
        transport.on_event(events.append)
        await transport.open(server.address)

        await transport.close()

        assert transport.state == TransportState.CLOSED
        assert [e.type for e in events].count(TransportEventType.CLOSE) == 1
        with pytest.raises(TransportNotReady):
            await transport.send("late")

    @pytest.mark.asyncio
    async def test_reopen(self, server, transport, until):
        await transport.open(server.address)
        await transport.close()
        await transport.open(server.address)

        await transport.send("again")
        await until(lambda: server.received == ["again"])


class TestTransportConfig:
    """Tests for TransportConfig validation."""

    def test_defaults(self):
        config = TransportConfig()
        assert config.open_timeout == 10.0
        assert config.max_frame_size == 16 * 1024 * 1024

    def test_keepalive_can_be_disabled(self):
        assert TransportConfig(ping_interval=None).ping_interval is None

    @pytest.mark.parametrize(
        "kwargs,match",
        [
            ({"open_timeout": 0}, "open_timeout"),
            ({"close_timeout": -1}, "close_timeout"),
            ({"max_frame_size": 0}, "max_frame_size"),
            ({"ping_interval": 0}, "ping_interval"),
        ],
    )
    def test_invalid_values(self, kwargs, match):
        with pytest.raises(ValueError, match=match):
            TransportConfig(**kwargs)
