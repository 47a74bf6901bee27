"""De-duplicate brief sections and apply title/link precedence."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from briefsync.services.briefs.document import (
    LINKS_FIELD,
    RESERVED_FIELDS,
    TITLES_FIELD,
    BriefDocument,
)


def dedupe_preserving_order(items: Iterable[str]) -> list[str]:
    """Drop exact repeats, keeping the first occurrence of each item."""
    seen: set[str] = set()
    unique: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        unique.append(item)
    return unique


def reconcile(document: BriefDocument) -> BriefDocument:
    """Return a copy with every reserved section de-duplicated.

    Matching is exact string equality; extra sections are left as they are.
    """
    reconciled = document.copy()
    for name in RESERVED_FIELDS:
        reconciled.sections[name] = dedupe_preserving_order(reconciled.sections.get(name, []))
    return reconciled


def resolve_authoritative(embedded: Sequence[str], external: Sequence[str] | None) -> list[str]:
    """Non-empty externally supplied arrays win over the embedded values."""
    if external:
        return list(external)
    return list(embedded)


def apply_external_precedence(
    document: BriefDocument,
    external_titles: Sequence[str] | None = None,
    external_links: Sequence[str] | None = None,
) -> BriefDocument:
    """Return a copy whose titles/links follow the authoritative arrays."""
    resolved = document.copy()
    resolved.sections[TITLES_FIELD] = resolve_authoritative(
        document.sections.get(TITLES_FIELD, []), external_titles
    )
    resolved.sections[LINKS_FIELD] = resolve_authoritative(
        document.sections.get(LINKS_FIELD, []), external_links
    )
    return resolved
