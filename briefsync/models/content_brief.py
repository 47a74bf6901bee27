"""Content brief record model."""

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from briefsync.models.base import Base, StringIdMixin, TimestampMixin


class ContentBrief(Base, StringIdMixin, TimestampMixin):
    """Stored content brief.

    ``brief_content`` holds the document blob in whatever encoding it was
    written with. Suggested titles and internal links are persisted next to
    it as newline-joined text and are authoritative when non-empty.
    """

    __tablename__ = "content_briefs"

    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    brief_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    possible_article_titles: Mapped[str | None] = mapped_column(Text, nullable=True)
    internal_links: Mapped[str | None] = mapped_column(Text, nullable=True)
