"""Debounced, fire-and-forget persistence of brief edits."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from briefsync.config import settings
from briefsync.repositories.content_brief_repository import BriefStore

logger = logging.getLogger(__name__)

WriteFailedCallback = Callable[[str, Exception | None], None]


@dataclass(frozen=True)
class PendingWrite:
    raw: str
    titles: tuple[str, ...]
    links: tuple[str, ...]


class DebouncedBriefWriter:
    """Coalesce rapid edits into a single ``save_document`` call.

    Every ``schedule`` restarts the debounce window and replaces the pending
    state, so the write that eventually fires carries the latest document.
    At most one write is in flight; state scheduled meanwhile is written once
    it completes. Local state is never rolled back when a write fails.
    """

    def __init__(
        self,
        store: BriefStore,
        brief_id: str,
        *,
        delay_seconds: float | None = None,
        on_write_failed: WriteFailedCallback | None = None,
    ) -> None:
        self.store = store
        self.brief_id = brief_id
        self.delay_seconds = max(
            0.0,
            settings.autosave_debounce_seconds if delay_seconds is None else float(delay_seconds),
        )
        self.on_write_failed = on_write_failed
        self._pending: PendingWrite | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._in_flight: asyncio.Task[bool] | None = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule(self, raw: str, titles: list[str], links: list[str]) -> None:
        """Queue a write of the given state, restarting the debounce window."""
        self._pending = PendingWrite(raw, tuple(titles), tuple(links))
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay_seconds, self._fire)

    def cancel(self) -> None:
        """Drop the pending write; writes already started still complete."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = None

    async def flush(self) -> None:
        """Write any pending state now and wait until nothing is left to write."""
        while True:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._fire()
            task = self._in_flight
            if task is None:
                return
            await asyncio.gather(task, return_exceptions=True)

    def _fire(self) -> None:
        self._timer = None
        # One write per brief at a time; the pending state waits for it.
        if self._in_flight is not None:
            return
        pending, self._pending = self._pending, None
        if pending is None:
            return
        task = asyncio.create_task(
            self._write(pending),
            name=f"brief-autosave-{self.brief_id}",
        )
        self._in_flight = task
        task.add_done_callback(self._on_write_done)

    def _on_write_done(self, task: asyncio.Task[bool]) -> None:
        if self._in_flight is task:
            self._in_flight = None
        if self._pending is not None and self._timer is None:
            self._fire()

    async def _write(self, pending: PendingWrite) -> bool:
        try:
            saved = await self.store.save_document(
                self.brief_id,
                pending.raw,
                list(pending.titles),
                list(pending.links),
            )
        except Exception as exc:
            logger.exception(
                "Brief autosave failed",
                extra={"brief_id": self.brief_id},
            )
            self._report_failure(exc)
            return False

        if not saved:
            logger.warning(
                "Brief autosave was not persisted",
                extra={"brief_id": self.brief_id},
            )
            self._report_failure(None)
            return False

        logger.debug("Brief autosaved", extra={"brief_id": self.brief_id})
        return True

    def _report_failure(self, exc: Exception | None) -> None:
        if self.on_write_failed is not None:
            self.on_write_failed(self.brief_id, exc)
