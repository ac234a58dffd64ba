"""Editor integration: document sync and position translation."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from lsplink.lsp.bridge import BridgeAdapter
from lsplink.lsp.features.types import (
    CompletionList,
    ContentChange,
    DocumentSnapshot,
    HoverResult,
    Position,
)

if TYPE_CHECKING:
    from lsplink.lsp.session.engine import LSPSession

logger = logging.getLogger(__name__)

TRIGGER_CHARACTERS = [".", ":", "(", ","]

INITIAL_VERSION = 1


class EditorIntegration:
    """
    Keeps the server's view of the editor document in sync.

    The document is (re)opened with didOpen after every handshake, since
    a reconnected server has forgotten it. Each batch of edits bumps the
    version and is forwarded as one didChange; a single task drains the
    change queue so notifications leave in edit order. Provider methods
    take one-based editor positions.
    """

    def __init__(
        self,
        session: "LSPSession",
        bridge: BridgeAdapter | None = None,
        language_id: str | None = None,
    ):
        """
        Args:
            session: Session to send document and feature requests through.
            bridge: Source of the document and its edits (session.bridge by default).
            language_id: languageId for didOpen (config.language_id by default).
        """
        self.session = session
        self.bridge = bridge or session.bridge
        self.language_id = language_id or session.config.language_id
        self.version = INITIAL_VERSION

        self._changes: asyncio.Queue[tuple[int, list[ContentChange]]] = asyncio.Queue()
        self._worker: asyncio.Task | None = None
        self._attached = False

    @property
    def enable_completion(self) -> bool:
        return self.session.config.enable_completion

    @property
    def enable_hover(self) -> bool:
        return self.session.config.enable_hover

    def attach(self) -> None:
        """Subscribe to session readiness and editor changes (once)."""
        if self._attached:
            return
        self._attached = True

        self.session.on_ready(self._on_ready)
        self.bridge.on_content_change(self._on_content_change)
        self._worker = asyncio.create_task(
            self._drain_changes(),
            name="lsp-document-sync",
        )

    async def detach(self) -> None:
        """Stop forwarding changes."""
        task = self._worker
        self._worker = None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def flush(self) -> None:
        """Wait until every queued change has been forwarded."""
        await self._changes.join()

    async def provide_completion(self, line_number: int, column: int) -> CompletionList:
        """Completions at a one-based editor position."""
        if not self.enable_completion:
            return CompletionList.empty()

        snapshot = self._snapshot()
        if snapshot is None:
            return CompletionList.empty()

        return await self.session.completion(
            snapshot.uri,
            Position.from_editor(line_number, column),
        )

    async def provide_hover(self, line_number: int, column: int) -> HoverResult | None:
        """Hover at a one-based editor position."""
        if not self.enable_hover:
            return None

        snapshot = self._snapshot()
        if snapshot is None:
            return None

        return await self.session.hover(
            snapshot.uri,
            Position.from_editor(line_number, column),
        )

    def _snapshot(self) -> DocumentSnapshot | None:
        return self.bridge.get_document_snapshot()

    async def _on_ready(self) -> None:
        snapshot = self._snapshot()
        if snapshot is None:
            logger.debug("No open document to sync")
            return

        await self.session.open_document(
            snapshot.uri,
            self.language_id,
            self.version,
            snapshot.text,
        )
        logger.info(f"Opened {snapshot.uri} (version {self.version})")

    def _on_content_change(self, changes: list[ContentChange]) -> None:
        self.version += 1
        self._changes.put_nowait((self.version, list(changes)))

    async def _drain_changes(self) -> None:
        while True:
            version, changes = await self._changes.get()
            try:
                await self._forward_changes(version, changes)
            except Exception:
                logger.exception("Failed to forward document change")
            finally:
                self._changes.task_done()

    async def _forward_changes(self, version: int, changes: list[ContentChange]) -> None:
        # The next didOpen carries the full text, so edits made while
        # not ready only need the version bump
        if not self.session.is_ready:
            return

        snapshot = self._snapshot()
        if snapshot is None:
            return

        await self.session.change_document(snapshot.uri, version, changes)
