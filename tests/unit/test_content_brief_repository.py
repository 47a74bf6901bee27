"""Unit tests for content brief storage collaborators."""

from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy.exc import OperationalError

from briefsync.core.exceptions import ContentBriefNotFoundError
from briefsync.models.content_brief import ContentBrief
from briefsync.repositories.content_brief_repository import (
    InMemoryBriefStore,
    SqlBriefStore,
    join_lines,
)


class _FakeScalars:
    def __init__(self, values: list[Any]) -> None:
        self._values = values

    def all(self) -> list[Any]:
        return self._values


class _FakeResult:
    def __init__(self, values: list[Any]) -> None:
        self._values = values

    def scalars(self) -> _FakeScalars:
        return _FakeScalars(self._values)


class _FakeSession:
    def __init__(self, briefs: dict[str, ContentBrief]) -> None:
        self.briefs = briefs
        self.get_error: Exception | None = None

    async def get(self, model: Any, brief_id: str) -> ContentBrief | None:
        if self.get_error is not None:
            raise self.get_error
        return self.briefs.get(brief_id)

    async def execute(self, statement: Any) -> _FakeResult:
        return _FakeResult(sorted(self.briefs))


class _FakeSessionContextManager:
    def __init__(self, session: _FakeSession) -> None:
        self._session = session

    async def __aenter__(self) -> _FakeSession:
        return self._session

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        return None


def _sql_store(session: _FakeSession) -> SqlBriefStore:
    return SqlBriefStore(session_factory=lambda: _FakeSessionContextManager(session))  # type: ignore[arg-type,return-value]


def _brief() -> ContentBrief:
    return ContentBrief(
        id="b1",
        brief_content='{"pain_points": ["A"]}',
        possible_article_titles="T1\nT2",
        internal_links=None,
    )


def test_join_lines_drops_blank_items() -> None:
    assert join_lines(["/a", " ", " /b "]) == "/a\n/b"


@pytest.mark.asyncio
async def test_sql_store_loads_record_with_split_arrays() -> None:
    store = _sql_store(_FakeSession({"b1": _brief()}))

    record = await store.load_document("b1")

    assert record.brief_id == "b1"
    assert record.brief_content == '{"pain_points": ["A"]}'
    assert record.possible_article_titles == ["T1", "T2"]
    assert record.internal_links == []


@pytest.mark.asyncio
async def test_sql_store_missing_load_raises() -> None:
    store = _sql_store(_FakeSession({}))

    with pytest.raises(ContentBriefNotFoundError):
        await store.load_document("nope")


@pytest.mark.asyncio
async def test_sql_store_saves_newline_joined_arrays() -> None:
    brief = _brief()
    store = _sql_store(_FakeSession({"b1": brief}))

    saved = await store.save_document("b1", "{}", ["T3"], ["/a", "/b"])

    assert saved is True
    assert brief.brief_content == "{}"
    assert brief.possible_article_titles == "T3"
    assert brief.internal_links == "/a\n/b"


@pytest.mark.asyncio
async def test_sql_store_save_reports_missing_and_database_errors() -> None:
    session = _FakeSession({})
    store = _sql_store(session)

    assert await store.save_document("nope", "{}", [], []) is False

    session.get_error = OperationalError("SELECT 1", {}, Exception("connection lost"))
    assert await store.save_document("b1", "{}", [], []) is False


@pytest.mark.asyncio
async def test_sql_store_lists_brief_ids() -> None:
    store = _sql_store(_FakeSession({"b2": _brief(), "b1": _brief()}))

    assert await store.list_brief_ids() == ["b1", "b2"]


@pytest.mark.asyncio
async def test_in_memory_store_round_trip() -> None:
    store = InMemoryBriefStore()
    store.put("b1", {"usps": ["Fast"]}, internal_links="/a")

    assert await store.save_document("b1", "{}", ["T"], ["/b"]) is True
    record = await store.load_document("b1")

    assert record.brief_content == "{}"
    assert record.possible_article_titles == ["T"]
    assert record.internal_links == ["/b"]
    assert await store.list_brief_ids() == ["b1"]
    assert await store.save_document("missing", "{}", [], []) is False
