"""window/logMessage and window/showMessage handling."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from lsplink.lsp.features.types import LogLevel

if TYPE_CHECKING:
    from lsplink.lsp.bridge import BridgeAdapter

logger = logging.getLogger(__name__)

LOG_MESSAGE_METHOD = "window/logMessage"
SHOW_MESSAGE_METHOD = "window/showMessage"

# MessageType.Error
MESSAGE_TYPE_ERROR = 1


class WindowMessageHandler:
    """Routes server log lines to the log sink and messages to alerts."""

    def __init__(self, bridge: "BridgeAdapter"):
        self.bridge = bridge

    async def handle_log(self, params: dict[str, Any] | None) -> None:
        if not params:
            logger.warning("Received logMessage without params")
            return

        level = LogLevel.from_message_type(params.get("type"))
        self.bridge.on_log(str(params.get("message", "")), level)

    async def handle_show(self, params: dict[str, Any] | None) -> None:
        if not params:
            logger.warning("Received showMessage without params")
            return

        urgent = params.get("type") == MESSAGE_TYPE_ERROR
        self.bridge.on_alert(str(params.get("message", "")), urgent)
