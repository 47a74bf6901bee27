"""Write a BriefDocument back out in the canonical numbered schema.

``notes`` items are split between the metadata and overview objects by label,
so a notes list that did not come from this schema is regrouped on its first
save: metadata items (unlabelled ones included) come back ahead of overview
items. Serializer output itself round-trips unchanged.
"""

from __future__ import annotations

import json
from typing import Any

from briefsync.services.briefs.canonical import (
    AUDIENCE_SECTION,
    CANONICAL_KEYS,
    CTA_SECTION,
    LIST_SECTIONS,
    METADATA_SECTION,
    OVERVIEW_SECTION,
    SEO_SECTION,
    ObjectSection,
)
from briefsync.services.briefs.coercion import split_labeled_item
from briefsync.services.briefs.document import BriefDocument

# Sections sharing a field; the first one also receives unlabelled items.
_FIELD_SECTIONS: dict[str, tuple[ObjectSection, ...]] = {
    "notes": (METADATA_SECTION, OVERVIEW_SECTION),
    "target_audience": (AUDIENCE_SECTION,),
    "keywords": (SEO_SECTION,),
    "ctas": (CTA_SECTION,),
}


def _put(target: dict[str, Any], label: str, value: str) -> None:
    if label not in target:
        target[label] = value
    elif isinstance(target[label], list):
        target[label].append(value)
    else:
        target[label] = [target[label], value]


def _expand_field(items: list[str], sections: tuple[ObjectSection, ...]) -> dict[str, dict[str, Any]]:
    """Distribute ``"Label: value"`` items over their owning section objects.

    Sub-fields appear in first-seen order so unedited sections keep their
    item order through a parse/serialize round trip.
    """
    home = sections[0]
    objects: dict[str, dict[str, Any]] = {section.key: {} for section in sections}

    for item in items:
        labeled = split_labeled_item(item)
        owner = None
        if labeled is not None:
            owner = next((s for s in sections if s.owns_label(labeled[0])), None)
        if owner is None or labeled is None:
            objects[home.key].setdefault(home.overflow_key, []).append(item)
            continue

        label, value = labeled
        target = objects[owner.key]
        nested_key = owner.nested_key_for(label)
        if nested_key is not None:
            target = target.setdefault(nested_key, {})
        _put(target, label, value)

    for section in sections:
        _fill_missing_labels(objects[section.key], section)
    return objects


def _fill_missing_labels(obj: dict[str, Any], section: ObjectSection) -> None:
    for label in section.labels:
        obj.setdefault(label, "")
    for nested_key, nested_labels in section.nested:
        nested = obj.setdefault(nested_key, {})
        for label in nested_labels:
            nested.setdefault(label, "")


def serialize_to_object(document: BriefDocument) -> dict[str, Any]:
    """Build the canonical numbered-section object for a document."""
    sections: dict[str, dict[str, Any]] = {}
    for field_name, owners in _FIELD_SECTIONS.items():
        sections.update(_expand_field(document.items(field_name), owners))

    for section in (OVERVIEW_SECTION, SEO_SECTION):
        for sub_key, field_name in section.embedded_lists:
            sections[section.key][sub_key] = document.items(field_name)

    result: dict[str, Any] = {}
    for key in CANONICAL_KEYS:
        if key in LIST_SECTIONS:
            result[key] = document.items(LIST_SECTIONS[key])
        else:
            result[key] = sections[key]

    for key in document.extra_keys():
        if key in result:
            continue
        result[key] = document.items(key)
    return result


def serialize(document: BriefDocument) -> str:
    """Serialize a document to the canonical numbered JSON encoding."""
    return json.dumps(serialize_to_object(document), indent=2, ensure_ascii=False)
