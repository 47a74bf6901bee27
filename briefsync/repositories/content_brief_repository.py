"""Storage collaborators for content brief documents."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from briefsync.core.database import get_session_context
from briefsync.core.exceptions import ContentBriefNotFoundError
from briefsync.models.content_brief import ContentBrief
from briefsync.schemas.brief import BriefRecord

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def join_lines(items: Sequence[str]) -> str:
    """Store a title/link array as newline-joined text."""
    return "\n".join(item.strip() for item in items if item.strip())


class BriefStore(Protocol):
    async def list_brief_ids(self) -> list[str]: ...

    async def load_document(self, brief_id: str) -> BriefRecord: ...

    async def save_document(
        self,
        brief_id: str,
        raw: str,
        titles: Sequence[str],
        links: Sequence[str],
    ) -> bool: ...


class InMemoryBriefStore:
    """Dict-backed store for tests and local tooling."""

    def __init__(self, records: dict[str, BriefRecord] | None = None) -> None:
        self.records: dict[str, BriefRecord] = dict(records or {})
        self.save_calls = 0

    def put(
        self,
        brief_id: str,
        brief_content: object = "",
        possible_article_titles: object = None,
        internal_links: object = None,
    ) -> BriefRecord:
        record = BriefRecord(
            brief_id=brief_id,
            brief_content=brief_content,
            possible_article_titles=possible_article_titles,
            internal_links=internal_links,
        )
        self.records[brief_id] = record
        return record

    async def list_brief_ids(self) -> list[str]:
        return sorted(self.records)

    async def load_document(self, brief_id: str) -> BriefRecord:
        record = self.records.get(brief_id)
        if record is None:
            raise ContentBriefNotFoundError(brief_id)
        return record.model_copy(deep=True)

    async def save_document(
        self,
        brief_id: str,
        raw: str,
        titles: Sequence[str],
        links: Sequence[str],
    ) -> bool:
        self.save_calls += 1
        if brief_id not in self.records:
            return False
        self.records[brief_id] = BriefRecord(
            brief_id=brief_id,
            brief_content=raw,
            possible_article_titles=list(titles),
            internal_links=list(links),
        )
        return True


class SqlBriefStore:
    """Loads and saves briefs in the ``content_briefs`` table via short-lived sessions."""

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory or get_session_context

    async def list_brief_ids(self) -> list[str]:
        async with self._session_factory() as session:
            result = await session.execute(select(ContentBrief.id).order_by(ContentBrief.id))
            return [str(brief_id) for brief_id in result.scalars().all()]

    async def load_document(self, brief_id: str) -> BriefRecord:
        async with self._session_factory() as session:
            brief = await session.get(ContentBrief, brief_id)
            if brief is None:
                raise ContentBriefNotFoundError(brief_id)
            return BriefRecord(
                brief_id=brief.id,
                brief_content=brief.brief_content,
                possible_article_titles=brief.possible_article_titles,
                internal_links=brief.internal_links,
            )

    async def save_document(
        self,
        brief_id: str,
        raw: str,
        titles: Sequence[str],
        links: Sequence[str],
    ) -> bool:
        try:
            async with self._session_factory() as session:
                brief = await session.get(ContentBrief, brief_id)
                if brief is None:
                    logger.warning(
                        "Cannot save missing content brief",
                        extra={"brief_id": brief_id},
                    )
                    return False
                brief.brief_content = raw
                brief.possible_article_titles = join_lines(titles)
                brief.internal_links = join_lines(links)
        except SQLAlchemyError:
            logger.exception("Failed to save content brief", extra={"brief_id": brief_id})
            return False
        return True
