"""Canonical in-memory representation of a content brief."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

RESERVED_FIELDS: tuple[str, ...] = (
    "pain_points",
    "usps",
    "capabilities",
    "competitors",
    "target_audience",
    "keywords",
    "notes",
    "content_objectives",
    "ctas",
    "internal_links",
    "possible_article_titles",
)
RESERVED_FIELD_SET = frozenset(RESERVED_FIELDS)

TITLES_FIELD = "possible_article_titles"
LINKS_FIELD = "internal_links"


class ParseFormat(str, Enum):
    """Encoding a brief document was recovered from."""

    STRUCTURED_NUMBERED = "structured_numbered"
    FLAT_LEGACY = "flat_legacy"
    PLAIN_TEXT = "plain_text"
    UNPARSEABLE = "unparseable"


def _empty_sections() -> dict[str, list[str]]:
    return {name: [] for name in RESERVED_FIELDS}


@dataclass
class BriefDocument:
    """Ordered mapping of section key to text items.

    Reserved sections are always present. Any other key is an extra section
    carried over from the source encoding so no user data is dropped.
    """

    sections: dict[str, list[str]] = field(default_factory=_empty_sections)
    source_format: ParseFormat = field(default=ParseFormat.UNPARSEABLE, compare=False)

    def __post_init__(self) -> None:
        for name in RESERVED_FIELDS:
            self.sections.setdefault(name, [])

    @classmethod
    def empty(cls, source_format: ParseFormat = ParseFormat.UNPARSEABLE) -> BriefDocument:
        return cls(sections=_empty_sections(), source_format=source_format)

    def items(self, key: str) -> list[str]:
        """Return a copy of a section's items (empty for unknown keys)."""
        return list(self.sections.get(key, []))

    def extend(self, key: str, values: list[str]) -> None:
        self.sections.setdefault(key, []).extend(values)

    def extra_keys(self) -> list[str]:
        return [key for key in self.sections if key not in RESERVED_FIELD_SET]

    @property
    def titles(self) -> list[str]:
        return self.items(TITLES_FIELD)

    @property
    def links(self) -> list[str]:
        return self.items(LINKS_FIELD)

    def copy(self) -> BriefDocument:
        return BriefDocument(
            sections={key: list(values) for key, values in self.sections.items()},
            source_format=self.source_format,
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(values) for key, values in self.sections.items()}
