"""Transport layer types and configuration."""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


class TransportState(Enum):
    """Lifecycle of the single underlying connection."""

    CONNECTING = auto()
    OPEN = auto()
    CLOSED = auto()

    def __str__(self) -> str:
        return self.name


class TransportEventType(Enum):
    """Types of transport events."""

    CONNECTING = auto()
    OPEN = auto()
    MESSAGE = auto()
    MESSAGE_SENT = auto()
    CLOSE = auto()
    ERROR = auto()


@dataclass
class TransportEvent:
    """Event emitted by a transport to its observers."""

    type: TransportEventType
    timestamp: float
    data: dict[str, Any] | None = None
    error: Exception | None = None

    @property
    def frame(self) -> str | bytes | None:
        """Raw frame carried by a MESSAGE event."""
        if self.data is None:
            return None
        return self.data.get("frame")

    @property
    def close_code(self) -> int | None:
        if self.data is None:
            return None
        return self.data.get("code")

    @property
    def close_reason(self) -> str:
        if self.data is None:
            return ""
        return self.data.get("reason", "")

    def __str__(self) -> str:
        base = f"[{self.type.name}]"
        if self.data and self.type != TransportEventType.MESSAGE:
            base += f" {self.data}"
        if self.error:
            base += f" error={self.error}"
        return base


@dataclass
class TransportConfig:
    """Configuration for the WebSocket transport."""

    open_timeout: float = 10.0
    """Seconds allowed for the opening handshake."""

    close_timeout: float = 5.0
    """Seconds allowed for the closing handshake."""

    max_frame_size: int | None = 16 * 1024 * 1024
    """Largest inbound frame accepted, in bytes (None disables the limit)."""

    ping_interval: float | None = 20.0
    """Keepalive ping interval in seconds (None disables keepalive)."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.open_timeout <= 0:
            raise ValueError("open_timeout must be positive")
        if self.close_timeout <= 0:
            raise ValueError("close_timeout must be positive")
        if self.max_frame_size is not None and self.max_frame_size < 1:
            raise ValueError("max_frame_size must be at least 1")
        if self.ping_interval is not None and self.ping_interval <= 0:
            raise ValueError("ping_interval must be positive")
