"""Owner of the live brief document and its outward notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from briefsync.services.briefs import sync_machine
from briefsync.services.briefs.document import LINKS_FIELD, TITLES_FIELD, BriefDocument
from briefsync.services.briefs.serializer import serialize
from briefsync.services.briefs.sync_machine import (
    DocumentChanged,
    EditOperation,
    ExternalArraysReplaced,
    ExternalDocumentReplaced,
    LinksChanged,
    LocalEdit,
    SyncEffect,
    SyncEvent,
    SyncOutcome,
    SyncState,
    TitlesChanged,
)

logger = logging.getLogger(__name__)

DocumentCallback = Callable[[str], None]
ItemsCallback = Callable[[list[str]], None]


class SyncController:
    """Single writer for one brief document.

    External replacements update the document silently. Local edits update it
    and notify outward. Any event arriving while a transition is in progress,
    including one triggered from inside an outward callback, is dropped.
    """

    def __init__(
        self,
        raw: object = "",
        external_titles: Sequence[str] | None = None,
        external_links: Sequence[str] | None = None,
        *,
        on_document_changed: DocumentCallback | None = None,
        on_titles_changed: ItemsCallback | None = None,
        on_links_changed: ItemsCallback | None = None,
    ) -> None:
        self._state = SyncState.IDLE
        self._snapshot = sync_machine.build_snapshot(raw, external_titles, external_links)
        self.on_document_changed = on_document_changed
        self.on_titles_changed = on_titles_changed
        self.on_links_changed = on_links_changed

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def document(self) -> BriefDocument:
        return self._snapshot.document.copy()

    @property
    def titles(self) -> list[str]:
        return self._snapshot.document.titles

    @property
    def links(self) -> list[str]:
        return self._snapshot.document.links

    def serialized(self) -> str:
        return serialize(self._snapshot.document)

    # External updates

    def replace_document(
        self,
        raw: object,
        external_titles: Sequence[str] | None = None,
        external_links: Sequence[str] | None = None,
    ) -> SyncOutcome:
        return self.dispatch(
            ExternalDocumentReplaced(
                raw,
                None if external_titles is None else tuple(external_titles),
                None if external_links is None else tuple(external_links),
            )
        )

    def replace_titles(self, items: Sequence[str]) -> SyncOutcome:
        return self.dispatch(ExternalArraysReplaced(TITLES_FIELD, tuple(items)))

    def replace_links(self, items: Sequence[str]) -> SyncOutcome:
        return self.dispatch(ExternalArraysReplaced(LINKS_FIELD, tuple(items)))

    # Local edits

    def add_item(self, section: str, value: str) -> SyncOutcome:
        return self.dispatch(LocalEdit(section, EditOperation.ADD, value=value))

    def update_item(self, section: str, index: int, value: str) -> SyncOutcome:
        return self.dispatch(LocalEdit(section, EditOperation.UPDATE, value=value, index=index))

    def remove_item(self, section: str, index: int) -> SyncOutcome:
        return self.dispatch(LocalEdit(section, EditOperation.REMOVE, index=index))

    def dispatch(self, event: SyncEvent) -> SyncOutcome:
        transition = sync_machine.begin_transition(self._state, event)
        if not transition.accepted:
            logger.warning(
                "Dropped re-entrant brief update",
                extra={"state": self._state.value, "event": type(event).__name__},
            )
            return SyncOutcome.REJECTED_REENTRANT

        self._state = transition.working_state
        try:
            plan = sync_machine.plan_transition(self._snapshot, event)
            self._snapshot = plan.snapshot
            for effect in plan.effects:
                self._emit(effect)
        finally:
            self._state = SyncState.IDLE

        logger.debug(
            "Brief sync transition finished",
            extra={"event": type(event).__name__, "outcome": plan.outcome.value},
        )
        return plan.outcome

    def _emit(self, effect: SyncEffect) -> None:
        if isinstance(effect, DocumentChanged):
            if self.on_document_changed is not None:
                self.on_document_changed(effect.raw)
        elif isinstance(effect, TitlesChanged):
            if self.on_titles_changed is not None:
                self.on_titles_changed(list(effect.items))
        elif isinstance(effect, LinksChanged):
            if self.on_links_changed is not None:
                self.on_links_changed(list(effect.items))
