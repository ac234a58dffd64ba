"""LSP client configuration loading."""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from lsplink.lib import oj

logger = logging.getLogger(__name__)

# Config file locations
LSP_CONFIG_FILENAME = "lsp.json"
GLOBAL_LSP_CONFIG = Path.home() / ".lsplink" / LSP_CONFIG_FILENAME
LOCAL_LSP_CONFIG_DIR = ".lsplink"

TRACE_VALUES = ("off", "messages", "verbose")


@dataclass
class LSPClientConfig:
    """Configuration for an LSP client session."""

    # Connection settings
    address: str = "ws://localhost:8080/lsp"
    """WebSocket address of the language server (wss:// for remote servers)."""

    request_timeout: float = 30.0
    """Seconds before an unanswered request fails."""

    connect_timeout: float = 10.0
    """Seconds allowed for the WebSocket opening handshake."""

    max_reconnect_attempts: int = 5
    """Automatic reconnects before giving up."""

    reconnect_base_delay: float = 1.0
    """Backoff base in seconds."""

    reconnect_max_delay: float = 30.0
    """Backoff ceiling in seconds."""

    reconnect_jitter: float = 0.0
    """Fractional jitter applied to each backoff delay."""

    fail_pending_on_disconnect: bool = False
    """Reject in-flight requests as soon as the connection drops."""

    # Protocol settings
    language_id: str = "lua"
    """languageId sent with textDocument/didOpen."""

    trace: str = "verbose"
    """Trace level requested in initialize."""

    # Feature settings
    enable_completion: bool = True
    enable_hover: bool = True
    enable_diagnostics: bool = True

    # Display settings
    alert_timeout: float = 3.0
    """Seconds an alert stays on screen."""

    log_history: int = 50
    """Log entries kept by the log panel."""

    marker_owner: str = "lsplink"
    """Owner tag for markers set on the editor model."""

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.address:
            raise ValueError("address is required")
        if not self.address.startswith(("ws://", "wss://")):
            raise ValueError("address must be a ws:// or wss:// URL")
        # Allow ws:// only for localhost development
        if self.address.startswith("ws://") and not self._is_localhost():
            raise ValueError("Remote connections must use wss://")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        if self.connect_timeout <= 0:
            raise ValueError("connect_timeout must be positive")
        if self.max_reconnect_attempts < 0:
            raise ValueError("max_reconnect_attempts must be non-negative")
        if self.reconnect_base_delay <= 0:
            raise ValueError("reconnect_base_delay must be positive")
        if self.reconnect_max_delay < self.reconnect_base_delay:
            raise ValueError("reconnect_max_delay must be at least reconnect_base_delay")
        if not 0.0 <= self.reconnect_jitter < 1.0:
            raise ValueError("reconnect_jitter must be in [0, 1)")
        if self.trace not in TRACE_VALUES:
            raise ValueError(f"trace must be one of {', '.join(TRACE_VALUES)}")
        if self.alert_timeout <= 0:
            raise ValueError("alert_timeout must be positive")
        if self.log_history < 1:
            raise ValueError("log_history must be at least 1")

    def _is_localhost(self) -> bool:
        """Check if the address points to localhost."""
        host = urlparse(self.address).hostname or ""
        return host in ("localhost", "127.0.0.1", "::1", "[::1]")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LSPClientConfig":
        """Create from a config dict with camelCase or snake_case keys."""
        return cls(**_config_kwargs(data))


def _snake_case(key: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in key)


def _config_kwargs(data: dict[str, Any]) -> dict[str, Any]:
    known = {f.name for f in fields(LSPClientConfig)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _snake_case(key)
        if name in known:
            kwargs[name] = value
        else:
            logger.warning(f"Ignoring unknown LSP config key: {key}")
    return kwargs


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        data = oj.loads(path.read_text())
    except (OSError, oj.JSONDecodeError) as e:
        logger.warning(f"Could not read LSP config {path}: {e}")
        return {}

    section = data.get("lsp") if isinstance(data, dict) else None
    if not isinstance(section, dict):
        logger.warning(f"LSP config {path} has no \"lsp\" object")
        return {}
    return _config_kwargs(section)


def load_lsp_config(working_dir: Path | None = None) -> LSPClientConfig:
    """Load the LSP client config from global and local config files.

    Global config (~/.lsplink/lsp.json) is loaded first.
    Local config ({working_dir}/.lsplink/lsp.json) overrides global,
    key by key.

    Returns:
        The merged config. Defaults apply where no file sets a value.
    """
    merged: dict[str, Any] = {}

    # Load global config
    if GLOBAL_LSP_CONFIG.exists():
        merged.update(_read_config_file(GLOBAL_LSP_CONFIG))

    # Load local config (overrides global)
    if working_dir:
        local_config = working_dir / LOCAL_LSP_CONFIG_DIR / LSP_CONFIG_FILENAME
        if local_config.exists():
            merged.update(_read_config_file(local_config))

    try:
        return LSPClientConfig(**merged)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid LSP config, using defaults: {e}")
        return LSPClientConfig()
