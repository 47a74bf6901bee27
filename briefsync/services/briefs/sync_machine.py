"""Pure state machine arbitrating external updates and local edits of a brief.

Every function here is free of side effects: ``plan_transition`` takes the
current snapshot and an event and returns the next snapshot together with the
outward effects the owner should emit. ``SyncController`` drives it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from briefsync.core.exceptions import InvalidSectionEditError
from briefsync.services.briefs.canonical import CANONICAL_KEYS, is_metadata_key
from briefsync.services.briefs.document import (
    LINKS_FIELD,
    RESERVED_FIELD_SET,
    TITLES_FIELD,
    BriefDocument,
)
from briefsync.services.briefs.parser import parse_embedded
from briefsync.services.briefs.reconciler import (
    apply_external_precedence,
    dedupe_preserving_order,
    reconcile,
    resolve_authoritative,
)
from briefsync.services.briefs.serializer import serialize

ARRAY_FIELDS = frozenset({TITLES_FIELD, LINKS_FIELD})


class SyncState(str, Enum):
    IDLE = "idle"
    APPLYING_EXTERNAL_UPDATE = "applying_external_update"
    APPLYING_LOCAL_EDIT = "applying_local_edit"


class SyncOutcome(str, Enum):
    APPLIED = "applied"
    NOOP = "noop"
    REJECTED_REENTRANT = "rejected_reentrant"


class EditOperation(str, Enum):
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"


# Events


@dataclass(frozen=True)
class ExternalDocumentReplaced:
    """The owning record supplied a new raw blob (e.g. reloaded from storage).

    ``None`` arrays keep the externally supplied values already known.
    """

    raw: object
    external_titles: tuple[str, ...] | None = None
    external_links: tuple[str, ...] | None = None


@dataclass(frozen=True)
class ExternalArraysReplaced:
    section: str
    items: tuple[str, ...]

    def __post_init__(self) -> None:
        if self.section not in ARRAY_FIELDS:
            raise ValueError(f"{self.section!r} is not an externally supplied array field")


@dataclass(frozen=True)
class LocalEdit:
    section: str
    operation: EditOperation
    value: str | None = None
    index: int | None = None


SyncEvent = ExternalDocumentReplaced | ExternalArraysReplaced | LocalEdit


# Effects


@dataclass(frozen=True)
class DocumentChanged:
    raw: str


@dataclass(frozen=True)
class TitlesChanged:
    items: tuple[str, ...]


@dataclass(frozen=True)
class LinksChanged:
    items: tuple[str, ...]


SyncEffect = DocumentChanged | TitlesChanged | LinksChanged


@dataclass(frozen=True)
class SyncSnapshot:
    """Live document plus the two sources its titles/links are resolved from."""

    document: BriefDocument
    embedded_titles: tuple[str, ...] = ()
    embedded_links: tuple[str, ...] = ()
    external_titles: tuple[str, ...] = ()
    external_links: tuple[str, ...] = ()


@dataclass(frozen=True)
class Transition:
    accepted: bool
    working_state: SyncState


@dataclass(frozen=True)
class TransitionPlan:
    outcome: SyncOutcome
    snapshot: SyncSnapshot
    effects: tuple[SyncEffect, ...] = field(default_factory=tuple)


def _as_tuple(items: Sequence[str] | None) -> tuple[str, ...]:
    return tuple(items) if items else ()


def build_snapshot(
    raw: object,
    external_titles: Sequence[str] | None = None,
    external_links: Sequence[str] | None = None,
) -> SyncSnapshot:
    """Parse, resolve precedence and reconcile a raw blob into a snapshot."""
    embedded = parse_embedded(raw)
    titles = _as_tuple(external_titles)
    links = _as_tuple(external_links)
    document = reconcile(apply_external_precedence(embedded, titles, links))
    return SyncSnapshot(
        document=document,
        embedded_titles=tuple(embedded.titles),
        embedded_links=tuple(embedded.links),
        external_titles=titles,
        external_links=links,
    )


def begin_transition(state: SyncState, event: SyncEvent) -> Transition:
    """Decide whether an event may start a transition from ``state``."""
    if state is not SyncState.IDLE:
        return Transition(accepted=False, working_state=state)
    if isinstance(event, LocalEdit):
        return Transition(accepted=True, working_state=SyncState.APPLYING_LOCAL_EDIT)
    return Transition(accepted=True, working_state=SyncState.APPLYING_EXTERNAL_UPDATE)


def _replace_document(snapshot: SyncSnapshot, event: ExternalDocumentReplaced) -> TransitionPlan:
    titles = snapshot.external_titles if event.external_titles is None else event.external_titles
    links = snapshot.external_links if event.external_links is None else event.external_links
    return TransitionPlan(SyncOutcome.APPLIED, build_snapshot(event.raw, titles, links))


def _replace_array(snapshot: SyncSnapshot, event: ExternalArraysReplaced) -> TransitionPlan:
    embedded = snapshot.embedded_titles if event.section == TITLES_FIELD else snapshot.embedded_links
    effective = dedupe_preserving_order(resolve_authoritative(embedded, event.items))
    if effective == snapshot.document.items(event.section):
        return TransitionPlan(SyncOutcome.NOOP, snapshot)

    document = snapshot.document.copy()
    document.sections[event.section] = effective
    if event.section == TITLES_FIELD:
        updated = replace(snapshot, document=document, external_titles=tuple(event.items))
    else:
        updated = replace(snapshot, document=document, external_links=tuple(event.items))
    return TransitionPlan(SyncOutcome.APPLIED, updated)


def validate_section_name(section: str) -> None:
    """Reject section names that could not survive a serialize/parse round trip."""
    if section in RESERVED_FIELD_SET:
        return
    if not section.strip():
        raise InvalidSectionEditError(section, "Section name must not be blank")
    if section in CANONICAL_KEYS or is_metadata_key(section):
        raise InvalidSectionEditError(section, "Section name collides with a canonical section key")


def _check_index(section: str, items: list[str], index: int | None) -> int:
    if index is None or not 0 <= index < len(items):
        raise InvalidSectionEditError(
            section,
            f"Item index {index} out of range",
            details={"index": index, "length": len(items)},
        )
    return index


def _apply_edit(snapshot: SyncSnapshot, event: LocalEdit) -> TransitionPlan:
    validate_section_name(event.section)
    items = snapshot.document.items(event.section)

    if event.operation is EditOperation.REMOVE:
        del items[_check_index(event.section, items, event.index)]
    else:
        value = (event.value or "").strip()
        if event.operation is EditOperation.UPDATE:
            position = _check_index(event.section, items, event.index)
            if not value:
                return TransitionPlan(SyncOutcome.NOOP, snapshot)
            items[position] = value
        else:
            if not value:
                return TransitionPlan(SyncOutcome.NOOP, snapshot)
            items.append(value)

    edited = snapshot.document.copy()
    edited.sections[event.section] = items
    edited = reconcile(edited)
    if edited == snapshot.document:
        return TransitionPlan(SyncOutcome.NOOP, snapshot)

    effects: list[SyncEffect] = [DocumentChanged(serialize(edited))]
    updated = replace(snapshot, document=edited)
    if event.section == TITLES_FIELD:
        titles = tuple(edited.titles)
        updated = replace(updated, embedded_titles=titles, external_titles=titles)
        effects.append(TitlesChanged(titles))
    elif event.section == LINKS_FIELD:
        links = tuple(edited.links)
        updated = replace(updated, embedded_links=links, external_links=links)
        effects.append(LinksChanged(links))
    return TransitionPlan(SyncOutcome.APPLIED, updated, tuple(effects))


def plan_transition(snapshot: SyncSnapshot, event: SyncEvent) -> TransitionPlan:
    """Compute the next snapshot and outward effects for an accepted event."""
    if isinstance(event, ExternalDocumentReplaced):
        return _replace_document(snapshot, event)
    if isinstance(event, ExternalArraysReplaced):
        return _replace_array(snapshot, event)
    return _apply_edit(snapshot, event)
