"""Content brief storage record and API schemas."""

import json
from typing import Any

from pydantic import BaseModel, Field, field_validator

from briefsync.services.briefs.document import ParseFormat

# Keys carrying the text of a suggestion object in stored title/link arrays.
_SUGGESTION_TEXT_KEYS = ("url", "title", "text", "value")


def _suggestion_text(item: dict[str, Any]) -> str | None:
    for key in _SUGGESTION_TEXT_KEYS:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def coerce_text_array(value: Any) -> list[str]:
    """Normalize every historical storage shape of a title/link array.

    Accepts lists, newline-joined text, JSON-stringified arrays (nested ones are
    flattened) and lists of ``{"url": ...}`` / ``{"title": ...}`` objects.
    """
    if value is None:
        return []
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            try:
                decoded = json.loads(stripped)
            except json.JSONDecodeError:
                decoded = None
            if isinstance(decoded, list):
                return coerce_text_array(decoded)
        return [line.strip() for line in value.splitlines() if line.strip()]
    if isinstance(value, dict):
        text = _suggestion_text(value)
        return [text.strip()] if text else []
    if isinstance(value, list | tuple):
        items: list[str] = []
        for item in value:
            items.extend(coerce_text_array(item))
        return items
    text = str(value).strip()
    return [text] if text else []


def coerce_brief_content(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, dict | list):
        return json.dumps(value, indent=2, ensure_ascii=False)
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class BriefRecord(BaseModel):
    """A stored brief as loaded from the storage collaborator."""

    brief_id: str
    brief_content: str = ""
    possible_article_titles: list[str] = Field(default_factory=list)
    internal_links: list[str] = Field(default_factory=list)

    @field_validator("brief_content", mode="before")
    @classmethod
    def validate_brief_content(cls, value: Any) -> str:
        return coerce_brief_content(value)

    @field_validator("possible_article_titles", "internal_links", mode="before")
    @classmethod
    def validate_text_arrays(cls, value: Any) -> list[str]:
        return coerce_text_array(value)


class NormalizeBriefRequest(BaseModel):
    """Schema for normalizing a raw brief payload."""

    raw: Any = None
    possible_article_titles: list[str] = Field(default_factory=list)
    internal_links: list[str] = Field(default_factory=list)

    @field_validator("possible_article_titles", "internal_links", mode="before")
    @classmethod
    def validate_text_arrays(cls, value: Any) -> list[str]:
        return coerce_text_array(value)


class NormalizedBriefResponse(BaseModel):
    """Canonical sections plus the numbered-schema encoding of a brief."""

    source_format: ParseFormat
    sections: dict[str, list[str]]
    canonical: dict[str, Any]


class BriefDetailResponse(NormalizedBriefResponse):
    """Normalized view of a stored brief."""

    brief_id: str


class BriefRepairResponse(BaseModel):
    """Result of rewriting a stored brief in canonical form."""

    brief_id: str
    source_format: ParseFormat
    changed: bool
    saved: bool
