"""Rewrite stored briefs in the canonical numbered encoding."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from briefsync.repositories.content_brief_repository import BriefStore
from briefsync.schemas.brief import BriefRecord
from briefsync.services.briefs.document import BriefDocument, ParseFormat
from briefsync.services.briefs.parser import parse
from briefsync.services.briefs.reconciler import reconcile
from briefsync.services.briefs.sanitizer import coerce_raw
from briefsync.services.briefs.serializer import serialize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RepairResult:
    brief_id: str
    source_format: ParseFormat
    changed: bool
    saved: bool


def looks_corrupted(raw: object) -> bool:
    """Heuristic for blobs that were not stored as a bare JSON object."""
    text = coerce_raw(raw).strip()
    if not text:
        return False
    return "```" in text or "<p>" in text.lower() or not text.startswith("{")


def normalize_record(record: BriefRecord) -> BriefDocument:
    return reconcile(
        parse(record.brief_content, record.possible_article_titles, record.internal_links)
    )


async def repair_brief(store: BriefStore, brief_id: str, *, dry_run: bool = False) -> RepairResult:
    """Load a brief, normalize it and write it back when the encoding changes."""
    record = await store.load_document(brief_id)
    document = normalize_record(record)
    canonical = serialize(document)
    changed = canonical != record.brief_content

    saved = False
    if changed and not dry_run:
        saved = await store.save_document(brief_id, canonical, document.titles, document.links)
        if not saved:
            logger.warning("Repaired brief could not be saved", extra={"brief_id": brief_id})

    logger.info(
        "Brief repair checked",
        extra={
            "brief_id": brief_id,
            "source_format": document.source_format.value,
            "changed": changed,
            "saved": saved,
            "dry_run": dry_run,
        },
    )
    return RepairResult(
        brief_id=brief_id,
        source_format=document.source_format,
        changed=changed,
        saved=saved,
    )
