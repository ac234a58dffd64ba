"""Request/response correlation with per-request deadlines."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any

from lsplink.lsp.protocol.errors import LSPError, RequestCancelled, RequestTimeout

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass
class PendingEntry:
    """An in-flight request awaiting its response."""

    identifier: int
    future: asyncio.Future[Any]
    created_at: float = field(default_factory=time.monotonic)
    method: str | None = None
    timer: asyncio.TimerHandle | None = None

    @property
    def age(self) -> float:
        """Seconds since the entry was registered."""
        return time.monotonic() - self.created_at


class CorrelationTable:
    """
    Single source of truth for "is this request still awaited".

    Every registered entry leaves the table exactly once: through
    resolve/reject/cancel when a response (or caller) gets there first,
    or through its timeout callback. Whichever runs second finds the
    entry absent and does nothing.
    """

    def __init__(self, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        """
        Args:
            timeout: Default deadline in seconds for new entries.
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.timeout = timeout
        self._entries: dict[int, PendingEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def pending_ids(self) -> list[int]:
        """Identifiers currently awaited, in registration order."""
        return list(self._entries)

    def get(self, identifier: int) -> PendingEntry | None:
        return self._entries.get(identifier)

    def register(
        self,
        identifier: int,
        future: asyncio.Future[Any],
        timeout: float | None = None,
        method: str | None = None,
    ) -> PendingEntry:
        """
        Store a pending entry and arm its timeout.

        Raises:
            ValueError: If the identifier is already pending.
        """
        if identifier in self._entries:
            raise ValueError(f"Request id {identifier} is already pending")

        effective_timeout = timeout if timeout is not None else self.timeout
        entry = PendingEntry(identifier=identifier, future=future, method=method)
        loop = asyncio.get_running_loop()
        entry.timer = loop.call_later(
            effective_timeout,
            self._expire,
            identifier,
            effective_timeout,
        )
        self._entries[identifier] = entry
        return entry

    def resolve(self, identifier: Any, result: Any) -> bool:
        """Complete a pending request with its result."""
        entry = self._pop(identifier)
        if entry is None:
            logger.debug(f"No pending request for id {identifier!r}; response discarded")
            return False

        logger.debug(f"Request {identifier} answered after {entry.age:.3f}s")
        if not entry.future.done():
            entry.future.set_result(result)
        return True

    def reject(self, identifier: Any, error: BaseException) -> bool:
        """Complete a pending request with an error."""
        entry = self._pop(identifier)
        if entry is None:
            logger.debug(f"No pending request for id {identifier!r}; error discarded")
            return False

        if not entry.future.done():
            entry.future.set_exception(error)
        return True

    def cancel(self, identifier: Any, reason: str | None = None) -> bool:
        """Reject a pending request with RequestCancelled."""
        return self.reject(identifier, RequestCancelled.because(reason))

    def discard(self, identifier: Any) -> None:
        """Drop an entry without completing it (its awaiter is already gone)."""
        self._pop(identifier)

    def reject_all(self, error: LSPError) -> int:
        """Fail every pending request. Returns how many were failed."""
        count = 0
        for identifier in list(self._entries):
            if self.reject(identifier, error):
                count += 1
        return count

    def _pop(self, identifier: Any) -> PendingEntry | None:
        entry = self._entries.pop(identifier, None)
        if entry is not None and entry.timer is not None:
            entry.timer.cancel()
        return entry

    def _expire(self, identifier: int, timeout: float) -> None:
        entry = self._entries.pop(identifier, None)
        if entry is None:
            return

        logger.warning(f"Request {identifier} ({entry.method}) timed out after {timeout}s")
        if not entry.future.done():
            entry.future.set_exception(RequestTimeout.after(timeout, entry.method))
