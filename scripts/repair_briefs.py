"""Rewrite stored content briefs in the canonical numbered encoding.

With ``--file`` a local payload is normalized and printed instead.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from briefsync.core.logging import setup_logging
from briefsync.repositories.content_brief_repository import BriefStore, SqlBriefStore
from briefsync.services.briefs.parser import parse
from briefsync.services.briefs.reconciler import reconcile
from briefsync.services.briefs.repair import looks_corrupted, repair_brief
from briefsync.services.briefs.serializer import serialize


def normalize_file(path: Path) -> str:
    return serialize(reconcile(parse(path.read_text(encoding="utf-8"))))


async def repair_stored(store: BriefStore, brief_ids: list[str] | None, *, dry_run: bool) -> int:
    """Repair every stored brief that does not look like a bare JSON object."""
    ids = brief_ids or await store.list_brief_ids()
    repaired = 0
    for brief_id in ids:
        record = await store.load_document(brief_id)
        if not looks_corrupted(record.brief_content):
            continue
        result = await repair_brief(store, brief_id, dry_run=dry_run)
        if not result.changed:
            continue
        repaired += 1
        action = "would repair" if dry_run else ("repaired" if result.saved else "failed to save")
        print(f"  {brief_id}: {action} ({result.source_format.value})")

    verb = "need repair" if dry_run else "repaired"
    print(f"repair-briefs: {repaired} of {len(ids)} briefs {verb}")
    return repaired


def main(argv: list[str] | None = None, *, store: BriefStore | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--file", type=Path, help="Normalize a local brief payload and print it")
    parser.add_argument(
        "--brief-id",
        action="append",
        dest="brief_ids",
        help="Restrict the repair to this brief (repeatable)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Report without writing")
    args = parser.parse_args(argv)

    setup_logging()

    if args.file is not None:
        print(normalize_file(args.file))
        return 0

    asyncio.run(repair_stored(store or SqlBriefStore(), args.brief_ids, dry_run=args.dry_run))
    return 0


if __name__ == "__main__":
    sys.exit(main())
