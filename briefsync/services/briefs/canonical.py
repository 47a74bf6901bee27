"""Key tables for the canonical numbered brief schema and legacy aliases."""

from __future__ import annotations

import re
from dataclasses import dataclass

from briefsync.services.briefs.document import LINKS_FIELD, TITLES_FIELD

METADATA_KEY = "Content Brief"
OVERVIEW_KEY = "1. Overview"
AUDIENCE_KEY = "2. Target Audience"
OBJECTIVES_KEY = "3. Content Objectives"
SEO_KEY = "4. SEO Strategy"
PAIN_POINTS_KEY = "5. Key Pain Points to Address (Select 4-6)"
USPS_KEY = "6. Unique Selling Propositions / Benefits (List up to 4)"
CAPABILITIES_KEY = "7. Capabilities (List up to 4)"
CTAS_KEY = "8. Call-to-Actions (CTAs)"
COMPETITORS_KEY = "9. Competitors (List up to 4 relevant competitors)"

NUMBERED_KEYS: tuple[str, ...] = (
    OVERVIEW_KEY,
    AUDIENCE_KEY,
    OBJECTIVES_KEY,
    SEO_KEY,
    PAIN_POINTS_KEY,
    USPS_KEY,
    CAPABILITIES_KEY,
    CTAS_KEY,
    COMPETITORS_KEY,
)
CANONICAL_KEYS: tuple[str, ...] = (METADATA_KEY, *NUMBERED_KEYS)

DEFAULT_OVERFLOW_KEY = "Additional Details"


@dataclass(frozen=True)
class ObjectSection:
    """A numbered section stored as an object of labelled sub-fields.

    Sub-fields flatten into ``"Label: value"`` items of ``field``. Items that
    carry no known label live under ``overflow_key`` verbatim, and
    ``embedded_lists`` name list sub-keys that belong to another field.
    """

    key: str
    field: str
    labels: tuple[str, ...]
    nested: tuple[tuple[str, tuple[str, ...]], ...] = ()
    overflow_key: str = DEFAULT_OVERFLOW_KEY
    embedded_lists: tuple[tuple[str, str], ...] = ()

    def nested_key_for(self, label: str) -> str | None:
        for nested_key, nested_labels in self.nested:
            if label in nested_labels:
                return nested_key
        return None

    def owns_label(self, label: str) -> bool:
        return label in self.labels or self.nested_key_for(label) is not None

    def embedded_field(self, sub_key: str) -> str | None:
        for embedded_key, field_name in self.embedded_lists:
            if embedded_key == sub_key:
                return field_name
        return None


METADATA_SECTION = ObjectSection(
    key=METADATA_KEY,
    field="notes",
    labels=("Prepared For", "Date", "Version"),
    overflow_key="Additional Notes",
)
OVERVIEW_SECTION = ObjectSection(
    key=OVERVIEW_KEY,
    field="notes",
    labels=("Project Goal", "Content Format"),
    embedded_lists=(("Possible Article Titles", TITLES_FIELD),),
)
AUDIENCE_SECTION = ObjectSection(
    key=AUDIENCE_KEY,
    field="target_audience",
    labels=("Primary Persona",),
    nested=(("Psychographics", ("Values", "Goals", "Challenges", "Information Sources")),),
)
SEO_SECTION = ObjectSection(
    key=SEO_KEY,
    field="keywords",
    labels=("Primary Keyword", "Meta Description (Draft)", "URL Slug (Draft)"),
    overflow_key="Secondary Keywords",
    embedded_lists=(("Internal Links", LINKS_FIELD),),
)
CTA_SECTION = ObjectSection(
    key=CTAS_KEY,
    field="ctas",
    labels=("Primary CTA", "Secondary CTA"),
    overflow_key="Additional CTAs",
)

OBJECT_SECTIONS: dict[str, ObjectSection] = {
    section.key: section
    for section in (METADATA_SECTION, OVERVIEW_SECTION, AUDIENCE_SECTION, SEO_SECTION, CTA_SECTION)
}

LIST_SECTIONS: dict[str, str] = {
    OBJECTIVES_KEY: "content_objectives",
    PAIN_POINTS_KEY: "pain_points",
    USPS_KEY: "usps",
    CAPABILITIES_KEY: "capabilities",
    COMPETITORS_KEY: "competitors",
}

# Legacy top-level names seen in flat payloads and plain-text headings.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "pain_points": ("pain_points", "painpoints", "key_pain_points", "problems"),
    "usps": (
        "usps",
        "usp",
        "unique_selling_propositions",
        "selling_points",
        "value_propositions",
        "benefits",
    ),
    "capabilities": ("capabilities", "features", "functionality"),
    "competitors": ("competitors", "competition", "competitive_analysis"),
    "target_audience": ("target_audience", "audience", "demographics"),
    "keywords": ("keywords", "seo_keywords", "search_terms"),
    "notes": ("notes", "additional_notes", "comments"),
    "content_objectives": ("content_objectives", "objectives"),
    "ctas": ("ctas", "cta", "call_to_actions", "calls_to_action", "call_to_action"),
    "internal_links": ("internal_links", "internal_linking"),
    "possible_article_titles": ("possible_article_titles", "article_titles", "suggested_titles"),
}
_ALIAS_LOOKUP: dict[str, str] = {
    alias: field_name for field_name, aliases in FIELD_ALIASES.items() for alias in aliases
}


def normalize_key(key: str) -> str:
    """Lower-case a key and collapse every non-alphanumeric run to ``_``."""
    return re.sub(r"[^a-z0-9]+", "_", key.lower()).strip("_")


def resolve_field_alias(key: str) -> str | None:
    """Map a legacy key to its reserved field name, if it is a known alias."""
    return _ALIAS_LOOKUP.get(normalize_key(key))


def is_metadata_key(key: str) -> bool:
    return key == METADATA_KEY or "metadata" in key.lower()
