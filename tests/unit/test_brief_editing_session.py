"""Unit tests for the brief editing session lifecycle."""

from __future__ import annotations

import json

import pytest

from briefsync.core.exceptions import ContentBriefNotFoundError
from briefsync.repositories.content_brief_repository import InMemoryBriefStore
from briefsync.services.briefs.editing_session import BriefEditingSession
from briefsync.services.briefs.parser import parse
from briefsync.services.briefs.sync_machine import SyncOutcome


def _store() -> InMemoryBriefStore:
    store = InMemoryBriefStore()
    store.put(
        "b1",
        brief_content='```json\n{"pain_points": ["A"]}\n```',
        possible_article_titles='["Stored title"]',
        internal_links="http://x\nhttp://y",
    )
    return store


@pytest.mark.asyncio
async def test_session_persists_edits_on_close() -> None:
    store = _store()
    documents: list[str] = []

    async with BriefEditingSession(
        store, "b1", debounce_seconds=60, on_document_changed=documents.append
    ) as session:
        assert session.document.titles == ["Stored title"]
        assert session.add_item("pain_points", "B") is SyncOutcome.APPLIED
        assert session.add_item("internal_links", "http://z") is SyncOutcome.APPLIED
        assert store.save_calls == 0

    assert store.save_calls == 1
    record = store.records["b1"]
    assert parse(record.brief_content).sections["pain_points"] == ["A", "B"]
    assert record.internal_links == ["http://x", "http://y", "http://z"]
    assert record.possible_article_titles == ["Stored title"]
    assert len(documents) == 2


@pytest.mark.asyncio
async def test_reload_applies_stored_state_as_external_update() -> None:
    store = _store()
    session = await BriefEditingSession(store, "b1", debounce_seconds=60).open()
    store.put("b1", brief_content=json.dumps({"usps": ["Fast"]}))

    outcome = await session.reload()

    assert outcome is SyncOutcome.APPLIED
    assert session.document.sections["usps"] == ["Fast"]
    assert session.document.sections["pain_points"] == []
    assert not session.writer.has_pending
    await session.close()


@pytest.mark.asyncio
async def test_closed_session_rejects_edits() -> None:
    session = await BriefEditingSession(_store(), "b1", debounce_seconds=0).open()
    await session.close()

    with pytest.raises(RuntimeError):
        session.add_item("pain_points", "B")


@pytest.mark.asyncio
async def test_open_missing_brief_raises() -> None:
    with pytest.raises(ContentBriefNotFoundError):
        await BriefEditingSession(InMemoryBriefStore(), "nope").open()
