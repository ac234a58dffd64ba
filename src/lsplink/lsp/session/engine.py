"""LSP session engine: handshake, requests, and notification dispatch."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

from lsplink.lsp.bridge import BridgeAdapter, NullBridge
from lsplink.lsp.capabilities.client import ClientCapabilities, DEFAULT_CLIENT_CAPABILITIES
from lsplink.lsp.capabilities.negotiation import (
    CapabilityNegotiator,
    ClientInfo,
    NegotiationResult,
)
from lsplink.lsp.capabilities.server import ServerCapabilities
from lsplink.lsp.config import LSPClientConfig
from lsplink.lsp.connection.controller import ReconnectionController
from lsplink.lsp.connection.state import ConnectionState
from lsplink.lsp.features.completion import (
    COMPLETION_METHOD,
    build_completion_params,
    map_completion_result,
)
from lsplink.lsp.features.diagnostics import PUBLISH_DIAGNOSTICS_METHOD, DiagnosticsHandler
from lsplink.lsp.features.hover import HOVER_METHOD, build_hover_params, map_hover_result
from lsplink.lsp.features.types import (
    CompletionList,
    ContentChange,
    HoverResult,
    LogLevel,
    Position,
)
from lsplink.lsp.features.window import (
    LOG_MESSAGE_METHOD,
    SHOW_MESSAGE_METHOD,
    WindowMessageHandler,
)
from lsplink.lsp.protocol.codec import MessageCodec
from lsplink.lsp.protocol.correlation import CorrelationTable
from lsplink.lsp.protocol.errors import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    HandshakeFailure,
    LSPError,
    MalformedMessage,
    RemoteError,
    RequestCancelled,
)
from lsplink.lsp.protocol.messages import (
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    Message,
)
from lsplink.lsp.protocol.state import SessionState, SessionStateMachine
from lsplink.lsp.session.context import SessionContext
from lsplink.lsp.transport.base import Transport, TransportError, TransportNotReady
from lsplink.lsp.transport.types import TransportConfig, TransportEvent, TransportEventType
from lsplink.lsp.transport.websocket import WebSocketTransport

logger = logging.getLogger(__name__)

# Type aliases for handlers
RequestHandler = Callable[[Any], Awaitable[Any]]
NotificationHandler = Callable[[Any], Awaitable[None]]
ReadyCallback = Callable[[], Awaitable[None] | None]

CANCEL_REQUEST_METHOD = "$/cancelRequest"
DID_OPEN_METHOD = "textDocument/didOpen"
DID_CHANGE_METHOD = "textDocument/didChange"

READY_ALERT = "LSP server ready!"


async def _answer_configuration(params: Any) -> list[None]:
    # No settings to offer; one null per requested item
    items = params.get("items") if isinstance(params, dict) else None
    return [None for _ in items or []]


async def _acknowledge(params: Any) -> None:
    return None


class LSPSession:
    """
    Client side of one language server session.

    Owns the transport (through a ReconnectionController), the codec,
    and the table of pending requests. Each time a connection opens the
    session runs the initialize handshake; feature requests are only
    sent once it reaches READY. Inbound frames are queued and handled
    one at a time by a single receive task, so notifications are
    dispatched in arrival order.
    """

    def __init__(
        self,
        config: LSPClientConfig | None = None,
        bridge: BridgeAdapter | None = None,
        transport: Transport | None = None,
        client_capabilities: ClientCapabilities | None = None,
        client_info: ClientInfo | None = None,
    ):
        """
        Initialize LSP session.

        Args:
            config: Client configuration (defaults apply when omitted).
            bridge: Editor/UI collaborators; NullBridge when omitted.
            transport: Frame transport; a WebSocketTransport when omitted.
            client_capabilities: Capabilities declared in initialize.
            client_info: Name and version declared in initialize.
        """
        self.config = config or LSPClientConfig()
        self.bridge: BridgeAdapter = bridge or NullBridge()
        self.transport = transport or WebSocketTransport(
            TransportConfig(open_timeout=self.config.connect_timeout)
        )
        self.client_capabilities = client_capabilities or DEFAULT_CLIENT_CAPABILITIES
        self.client_info = client_info or ClientInfo()

        self.codec = MessageCodec()
        self.pending = CorrelationTable(self.config.request_timeout)
        self.context = SessionContext()

        self.controller = ReconnectionController(
            self.transport,
            address=self.config.address,
            max_attempts=self.config.max_reconnect_attempts,
            base_delay=self.config.reconnect_base_delay,
            max_delay=self.config.reconnect_max_delay,
            jitter=self.config.reconnect_jitter,
        )

        self._machine = SessionStateMachine()
        self._inbox: asyncio.Queue[str | bytes] = asyncio.Queue()
        self._receive_task: asyncio.Task | None = None
        self._handshake_task: asyncio.Task | None = None
        self._ready_callbacks: list[ReadyCallback] = []
        self._closing = False

        self.diagnostics = DiagnosticsHandler(self.bridge, enabled=self.config.enable_diagnostics)
        self.window = WindowMessageHandler(self.bridge)

        self._notification_handlers: dict[str, NotificationHandler] = {
            PUBLISH_DIAGNOSTICS_METHOD: self.diagnostics.handle,
            LOG_MESSAGE_METHOD: self.window.handle_log,
            SHOW_MESSAGE_METHOD: self.window.handle_show,
        }
        self._request_handlers: dict[str, RequestHandler] = {
            "workspace/configuration": _answer_configuration,
            "client/registerCapability": _acknowledge,
            "client/unregisterCapability": _acknowledge,
            "window/workDoneProgress/create": _acknowledge,
        }

        # Controller subscribed first, so it sees OPEN/CLOSE before we do
        self.transport.on_event(self._on_transport_event)
        self.controller.on_state_change(self._on_connection_state)

    @property
    def state(self) -> SessionState:
        """Current handshake state."""
        return self._machine.state

    @property
    def is_ready(self) -> bool:
        """Check if the handshake completed on the current connection."""
        return self._machine.is_ready

    @property
    def is_connected(self) -> bool:
        return self.context.connected

    @property
    def server_capabilities(self) -> ServerCapabilities | None:
        """Capabilities negotiated on the current connection, if any."""
        return self.context.server_capabilities

    def on_state_change(
        self,
        callback: Callable[[SessionState, SessionState], None],
    ) -> None:
        """Register callback for handshake state changes."""
        self._machine.on_transition(callback)

    def on_ready(self, callback: ReadyCallback) -> None:
        """
        Register a callback run after every successful handshake.

        The callback may be a plain function or a coroutine function.
        """
        self._ready_callbacks.append(callback)

    def on_notification(self, method: str, handler: NotificationHandler) -> None:
        """
        Register (or replace) the handler for a server notification.

        Handlers run on the receive task, one at a time, so they must not
        await a request response themselves.

        Args:
            method: The notification method name.
            handler: Async function receiving params.
        """
        self._notification_handlers[method] = handler

    def on_request(self, method: str, handler: RequestHandler) -> None:
        """
        Register (or replace) the handler for a server-initiated request.

        Args:
            method: The method name to handle.
            handler: Async function receiving params, returning result.
        """
        self._request_handlers[method] = handler

    async def start(self, address: str | None = None) -> None:
        """Start the receive task and begin connecting."""
        self._closing = False
        if self._receive_task is None or self._receive_task.done():
            self._receive_task = asyncio.create_task(
                self._receive_loop(),
                name="lsp-receive-loop",
            )
        await self.controller.connect(address)

    async def close(self) -> None:
        """Disconnect, stop all tasks, and fail every pending request."""
        if self._closing:
            return
        self._closing = True

        await self._cancel_task(self._handshake_task)
        self._handshake_task = None

        await self.controller.disconnect()

        await self._cancel_task(self._receive_task)
        self._receive_task = None

        count = self.pending.reject_all(RequestCancelled.because("Session closed"))
        if count:
            logger.info(f"Cancelled {count} pending request(s) on close")

    async def drain(self) -> None:
        """Wait until every frame received so far has been handled."""
        await self._inbox.join()

    async def request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        """
        Send a request and wait for the response.

        Args:
            method: The RPC method name.
            params: Optional method parameters.
            timeout: Request timeout (defaults to config.request_timeout).

        Returns:
            The result from the response.

        Raises:
            TransportNotReady: If the connection is not open (nothing is sent).
            MalformedMessage: If params cannot be encoded (nothing is sent).
            TransportError: If the frame could not be written.
            RemoteError: If the server answered with an error.
            RequestTimeout: If no response arrived in time.
            RequestCancelled: If the request was cancelled or the session closed.
        """
        if not self.transport.is_open():
            raise TransportNotReady()

        identifier = self.context.next_id()
        # Encoded before registering so an unencodable payload leaves no entry
        frame = self.codec.encode(JSONRPCRequest(method=method, id=identifier, params=params))

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.pending.register(identifier, future, timeout=timeout, method=method)
        try:
            await self.transport.send(frame)
        except TransportError:
            # Nobody else holds the future, so drop the entry instead of failing it
            self.pending.discard(identifier)
            raise
        logger.debug(f"Sent request {method} (id={identifier})")

        try:
            return await future
        except asyncio.CancelledError:
            self.pending.discard(identifier)
            raise

    async def notify(self, method: str, params: dict[str, Any] | None = None) -> None:
        """
        Send a notification (fire-and-forget).

        Raises:
            TransportNotReady: If the connection is not open.
        """
        if not self.transport.is_open():
            raise TransportNotReady()

        await self.transport.send(
            self.codec.encode(JSONRPCNotification(method=method, params=params))
        )
        logger.debug(f"Sent notification {method}")

    async def cancel_request(self, identifier: int, reason: str | None = None) -> bool:
        """
        Cancel an in-flight request.

        Tells the server (best effort) and completes the local future
        with RequestCancelled.

        Returns:
            True if the request was still pending.
        """
        if identifier not in self.pending:
            return False

        try:
            await self.notify(CANCEL_REQUEST_METHOD, {"id": identifier})
        except (LSPError, TransportError) as e:
            logger.debug(f"Could not send cancellation for {identifier}: {e}")

        return self.pending.cancel(identifier, reason)

    async def initialize(self) -> NegotiationResult:
        """
        Run the initialize/initialized handshake on the open connection.

        Raises:
            HandshakeFailure: If the initialize request fails.
        """
        if self._machine.state != SessionState.INITIALIZING:
            self._machine.reset()
            self._machine.transition(SessionState.INITIALIZING)

        negotiator = CapabilityNegotiator(
            self,
            client_capabilities=self.client_capabilities,
            client_info=self.client_info,
            trace=self.config.trace,
        )
        try:
            result = await negotiator.negotiate()
        except (LSPError, TransportError) as e:
            failure = HandshakeFailure.caused_by(e)
            logger.error(f"Failed to initialize: {e}")
            self.bridge.on_log(f"Failed to initialize: {e}", LogLevel.ERROR)
            self._machine.reset()
            raise failure from e

        self.context.server_capabilities = result.server_capabilities
        self.context.server_info = result.server_info
        self._machine.transition(SessionState.READY)

        self.bridge.on_log("LSP server initialized", LogLevel.SUCCESS)
        self.bridge.on_alert(READY_ALERT, False)
        return result

    async def open_document(self, uri: str, language_id: str, version: int, text: str) -> None:
        """Send textDocument/didOpen. Does nothing while disconnected."""
        if not self.transport.is_open():
            return

        params = {
            "textDocument": {
                "uri": uri,
                "languageId": language_id,
                "version": version,
                "text": text,
            }
        }
        try:
            await self.notify(DID_OPEN_METHOD, params)
        except (LSPError, TransportError) as e:
            logger.warning(f"didOpen for {uri} not sent: {e}")

    async def change_document(
        self,
        uri: str,
        version: int,
        changes: list[ContentChange] | list[dict[str, Any]],
    ) -> None:
        """Send textDocument/didChange. Does nothing while disconnected."""
        if not self.transport.is_open():
            return

        params = {
            "textDocument": {"uri": uri, "version": version},
            "contentChanges": [
                c.to_lsp() if isinstance(c, ContentChange) else c for c in changes
            ],
        }
        try:
            await self.notify(DID_CHANGE_METHOD, params)
        except (LSPError, TransportError) as e:
            logger.warning(f"didChange for {uri} not sent: {e}")

    async def completion(self, uri: str, position: Position) -> CompletionList:
        """
        Request completions at a position.

        Returns an empty list (without sending anything) when the session
        is not ready or the server has no completion provider. Request
        failures are logged and also produce an empty list.
        """
        capabilities = self.context.server_capabilities
        if not self.is_ready or capabilities is None or not capabilities.supports_completion():
            return CompletionList.empty()

        try:
            result = await self.request(COMPLETION_METHOD, build_completion_params(uri, position))
        except (LSPError, TransportError) as e:
            logger.error(f"Completion error: {e}")
            self.bridge.on_log(f"Completion error: {e}", LogLevel.ERROR)
            return CompletionList.empty()

        return map_completion_result(result, position)

    async def hover(self, uri: str, position: Position) -> HoverResult | None:
        """
        Request hover information at a position.

        Same gating and failure handling as completion(); the empty
        result is None.
        """
        capabilities = self.context.server_capabilities
        if not self.is_ready or capabilities is None or not capabilities.supports_hover():
            return None

        try:
            result = await self.request(HOVER_METHOD, build_hover_params(uri, position))
        except (LSPError, TransportError) as e:
            logger.error(f"Hover error: {e}")
            self.bridge.on_log(f"Hover error: {e}", LogLevel.ERROR)
            return None

        return map_hover_result(result)

    def _on_transport_event(self, event: TransportEvent) -> None:
        if event.type == TransportEventType.MESSAGE and event.frame is not None:
            self._inbox.put_nowait(event.frame)

    def _on_connection_state(self, old: ConnectionState, new: ConnectionState) -> None:
        if new == ConnectionState.OPEN:
            self.context.connected = True
            self.context.reset_for_connection()
            self.bridge.on_status(True, "Connected")
            self.bridge.on_log("WebSocket connection established", LogLevel.SUCCESS)
            self._start_handshake()
            return

        if old == ConnectionState.OPEN:
            self._connection_lost()

        if new == ConnectionState.CONNECTING:
            self.bridge.on_status(False, "Connecting...")
            self.bridge.on_log("Connecting to LSP server...", LogLevel.INFO)
        elif new == ConnectionState.BACKOFF:
            delay_ms = (self.controller.current_delay or 0) * 1000
            text = (
                f"Reconnecting in {delay_ms:.0f}ms... "
                f"({self.controller.attempts}/{self.controller.max_attempts})"
            )
            self.bridge.on_status(False, text)
            self.bridge.on_log(text, LogLevel.INFO)
        elif new == ConnectionState.GAVE_UP:
            self.bridge.on_status(False, "Connection failed")
            self.bridge.on_log("Max reconnection attempts reached", LogLevel.ERROR)
        elif new == ConnectionState.DISCONNECTED:
            self.bridge.on_status(False, "Disconnected")

    def _connection_lost(self) -> None:
        self.context.connected = False
        self.context.reset_for_connection()

        if self._handshake_task is not None and not self._handshake_task.done():
            self._handshake_task.cancel()
        self._handshake_task = None
        self._machine.reset()

        if self.config.fail_pending_on_disconnect:
            count = self.pending.reject_all(RequestCancelled.because("Connection lost"))
            if count:
                logger.info(f"Failed {count} pending request(s) after disconnect")

    def _start_handshake(self) -> None:
        self._machine.reset()
        self._machine.transition(SessionState.INITIALIZING)
        self._handshake_task = asyncio.create_task(
            self._run_handshake(),
            name="lsp-handshake",
        )

    async def _run_handshake(self) -> None:
        try:
            await self.initialize()
        except HandshakeFailure:
            # Already logged; the session stays UNINITIALIZED until the next connection
            return

        for callback in list(self._ready_callbacks):
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Ready callback failed")

    async def _cancel_task(self, task: asyncio.Task | None) -> None:
        if task is None or task.done() or task is asyncio.current_task():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _receive_loop(self) -> None:
        """Background task processing incoming frames in arrival order."""
        while True:
            frame = await self._inbox.get()
            try:
                await self._handle_frame(frame)
            except Exception:
                logger.exception("Error handling message")
            finally:
                self._inbox.task_done()

    async def _handle_frame(self, frame: str | bytes) -> None:
        try:
            message = self.codec.decode(frame)
        except MalformedMessage as e:
            logger.warning(f"Dropping inbound frame: {e}")
            return

        await self._handle_message(message)

    async def _handle_message(self, message: Message) -> None:
        """Route incoming message to appropriate handler."""
        if isinstance(message, JSONRPCResponse):
            self._handle_response(message)
        elif isinstance(message, JSONRPCRequest):
            await self._handle_server_request(message)
        elif isinstance(message, JSONRPCNotification):
            await self._handle_notification(message)

    def _handle_response(self, response: JSONRPCResponse) -> None:
        """Complete the pending request with the response."""
        if response.id is None:
            logger.warning("Received response without id")
            return

        if response.is_error:
            self.pending.reject(response.id, RemoteError.from_response(response.error.to_dict()))
        else:
            self.pending.resolve(response.id, response.result)

    async def _handle_server_request(self, request: JSONRPCRequest) -> None:
        """Handle request from server, send response."""
        handler = self._request_handlers.get(request.method)

        if handler is None:
            logger.debug(f"No handler for server request {request.method}")
            response = JSONRPCResponse.error_response(
                id=request.id,
                code=METHOD_NOT_FOUND,
                message=f"Method not found: {request.method}",
            )
        else:
            try:
                result = await handler(request.params)
                response = JSONRPCResponse.success(id=request.id, result=result)
            except LSPError as e:
                response = JSONRPCResponse.error_response(
                    id=request.id,
                    code=e.code,
                    message=e.message,
                    data=e.data,
                )
            except Exception as e:
                logger.exception(f"Handler error for {request.method}")
                response = JSONRPCResponse.error_response(
                    id=request.id,
                    code=INTERNAL_ERROR,
                    message=str(e),
                )

        try:
            frame = self.codec.encode(response)
        except MalformedMessage as e:
            logger.error(f"Unencodable result for {request.method}: {e}")
            frame = self.codec.encode(
                JSONRPCResponse.error_response(id=request.id, code=INTERNAL_ERROR, message=str(e))
            )

        try:
            await self.transport.send(frame)
        except TransportError as e:
            logger.warning(f"Could not answer {request.method}: {e}")

    async def _handle_notification(self, notification: JSONRPCNotification) -> None:
        """Dispatch a server notification to its handler."""
        handler = self._notification_handlers.get(notification.method)

        if handler is None:
            logger.info(f"Unhandled notification: {notification.method}")
            self.bridge.on_log(f"Unhandled notification: {notification.method}", LogLevel.INFO)
            return

        try:
            await handler(notification.params)
        except Exception as e:
            logger.exception(f"Notification handler error for {notification.method}: {e}")

    async def __aenter__(self) -> "LSPSession":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()
