"""Wire codec: protocol envelopes to text frames and back."""

from __future__ import annotations

from typing import Any

from lsplink.lib import oj
from lsplink.lsp.protocol.errors import MalformedMessage
from lsplink.lsp.protocol.messages import (
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    Message,
    parse_message,
)


class MessageCodec:
    """
    Serializes outbound envelopes and deserializes inbound frames.

    Stateless; one instance can be shared by every connection.
    """

    def encode(self, message: Message | dict[str, Any]) -> str:
        """
        Encode an envelope (or a ready-made dict) as a JSON text frame.

        Raises:
            MalformedMessage: If the payload cannot be serialized.
        """
        if isinstance(message, (JSONRPCRequest, JSONRPCResponse, JSONRPCNotification)):
            message = message.to_dict()
        try:
            return oj.dumps_str(message)
        except oj.JSONEncodeError as e:
            raise MalformedMessage.because(f"cannot encode ({e})") from e

    def decode(self, frame: str | bytes) -> Message:
        """
        Decode one frame.

        Raises:
            MalformedMessage: If the frame is not a valid JSON-RPC 2.0 message.
        """
        try:
            data = oj.loads(frame)
        except oj.JSONDecodeError as e:
            raise MalformedMessage.because(f"invalid JSON ({e})")

        if not isinstance(data, dict):
            raise MalformedMessage.because(f"expected object, got {type(data).__name__}")

        try:
            return parse_message(data)
        except (KeyError, ValueError) as e:
            raise MalformedMessage.because(str(e))
