"""Lifecycle of one brief being edited: load, edit, autosave, reload, close."""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType

from briefsync.repositories.content_brief_repository import BriefStore
from briefsync.services.briefs.autosave import DebouncedBriefWriter, WriteFailedCallback
from briefsync.services.briefs.document import BriefDocument
from briefsync.services.briefs.sync_controller import SyncController
from briefsync.services.briefs.sync_machine import SyncOutcome

logger = logging.getLogger(__name__)


class BriefEditingSession:
    """Wire a SyncController to a store through a debounced writer.

    Outward notifications from local edits are forwarded to the optional
    caller callbacks and scheduled for persistence. ``reload`` feeds the
    stored record back in as an external replacement.
    """

    def __init__(
        self,
        store: BriefStore,
        brief_id: str,
        *,
        debounce_seconds: float | None = None,
        on_document_changed: Callable[[str], None] | None = None,
        on_titles_changed: Callable[[list[str]], None] | None = None,
        on_links_changed: Callable[[list[str]], None] | None = None,
        on_write_failed: WriteFailedCallback | None = None,
    ) -> None:
        self.store = store
        self.brief_id = brief_id
        self.writer = DebouncedBriefWriter(
            store,
            brief_id,
            delay_seconds=debounce_seconds,
            on_write_failed=on_write_failed,
        )
        self._on_document_changed = on_document_changed
        self._on_titles_changed = on_titles_changed
        self._on_links_changed = on_links_changed
        self._controller: SyncController | None = None

    @property
    def controller(self) -> SyncController:
        if self._controller is None:
            raise RuntimeError("Editing session is not open")
        return self._controller

    @property
    def document(self) -> BriefDocument:
        return self.controller.document

    async def open(self) -> BriefEditingSession:
        record = await self.store.load_document(self.brief_id)
        self._controller = SyncController(
            record.brief_content,
            record.possible_article_titles,
            record.internal_links,
            on_document_changed=self._document_changed,
            on_titles_changed=self._titles_changed,
            on_links_changed=self._links_changed,
        )
        logger.info(
            "Opened brief editing session",
            extra={
                "brief_id": self.brief_id,
                "source_format": self._controller.document.source_format.value,
            },
        )
        return self

    async def reload(self) -> SyncOutcome:
        record = await self.store.load_document(self.brief_id)
        return self.controller.replace_document(
            record.brief_content,
            record.possible_article_titles,
            record.internal_links,
        )

    def add_item(self, section: str, value: str) -> SyncOutcome:
        return self.controller.add_item(section, value)

    def update_item(self, section: str, index: int, value: str) -> SyncOutcome:
        return self.controller.update_item(section, index, value)

    def remove_item(self, section: str, index: int) -> SyncOutcome:
        return self.controller.remove_item(section, index)

    async def close(self) -> None:
        await self.writer.flush()
        self._controller = None

    async def __aenter__(self) -> BriefEditingSession:
        return await self.open()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()

    def _schedule_write(self, raw: str) -> None:
        controller = self.controller
        self.writer.schedule(raw, controller.titles, controller.links)

    def _document_changed(self, raw: str) -> None:
        self._schedule_write(raw)
        if self._on_document_changed is not None:
            self._on_document_changed(raw)

    def _titles_changed(self, titles: list[str]) -> None:
        if self._on_titles_changed is not None:
            self._on_titles_changed(titles)

    def _links_changed(self, links: list[str]) -> None:
        if self._on_links_changed is not None:
            self._on_links_changed(links)
