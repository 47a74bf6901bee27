"""Recover a canonical BriefDocument from any historical brief encoding.

Parsing never raises. Each decode attempt falls through to the next one:

1. the sanitized payload as JSON,
2. a double-encoded payload (a JSON string literal wrapping the JSON),
3. ``# Heading`` / ``- item`` plain text,
4. a JSON object embedded in HTML or prose,

and anything left over becomes an empty ``unparseable`` document.
"""

from __future__ import annotations

import html
import json
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from briefsync.core.logging import preview
from briefsync.services.briefs.canonical import (
    LIST_SECTIONS,
    METADATA_SECTION,
    NUMBERED_KEYS,
    OBJECT_SECTIONS,
    ObjectSection,
    is_metadata_key,
    resolve_field_alias,
)
from briefsync.services.briefs.coercion import flatten_object, to_items
from briefsync.services.briefs.document import RESERVED_FIELD_SET, BriefDocument, ParseFormat
from briefsync.services.briefs.reconciler import apply_external_precedence
from briefsync.services.briefs.sanitizer import repair_braces, strip_code_fences

logger = logging.getLogger(__name__)

HEADING_PATTERN = re.compile(r"^\s*#{1,6}\s*(?P<heading>\S(?:.*\S)?)?\s*$")
BULLET_PATTERN = re.compile(r"^\s*(?:[-•]|\*(?=\s))\s*(?P<item>.*)$")
HTML_TAG_PATTERN = re.compile(r"<[^>]*>")

_NUMBERED_KEY_SET = frozenset(NUMBERED_KEYS)


def _decode(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text, strict=False)
    except (ValueError, RecursionError):
        return False, None


def detect_format(payload: Any) -> ParseFormat:
    """Classify a decoded payload."""
    if not isinstance(payload, Mapping):
        return ParseFormat.UNPARSEABLE
    if any(str(key) in _NUMBERED_KEY_SET for key in payload):
        return ParseFormat.STRUCTURED_NUMBERED
    return ParseFormat.FLAT_LEGACY


def _extract_object_section(document: BriefDocument, section: ObjectSection, value: Any) -> None:
    if not isinstance(value, Mapping):
        document.extend(section.field, to_items(value))
        return

    remaining: dict[str, Any] = {}
    for sub_key, sub_value in value.items():
        embedded_field = section.embedded_field(str(sub_key))
        if embedded_field is not None:
            document.extend(embedded_field, to_items(sub_value))
        else:
            remaining[str(sub_key)] = sub_value
    document.extend(section.field, flatten_object(remaining, overflow_key=section.overflow_key))


def _from_numbered(payload: Mapping[str, Any]) -> BriefDocument:
    document = BriefDocument.empty(ParseFormat.STRUCTURED_NUMBERED)
    for key, value in payload.items():
        key_text = str(key)
        if key_text in LIST_SECTIONS:
            document.extend(LIST_SECTIONS[key_text], to_items(value))
            continue

        section = OBJECT_SECTIONS.get(key_text)
        if section is None and is_metadata_key(key_text):
            section = METADATA_SECTION
        if section is not None:
            _extract_object_section(document, section, value)
            continue

        # Reserved names merge into their field; anything else is kept as-is.
        document.extend(key_text, to_items(value))
    return document


def _from_flat_legacy(payload: Mapping[str, Any]) -> BriefDocument:
    document = BriefDocument.empty(ParseFormat.FLAT_LEGACY)
    recognized = 0
    for key, value in payload.items():
        key_text = str(key)
        if is_metadata_key(key_text):
            recognized += 1
            _extract_object_section(document, METADATA_SECTION, value)
            continue
        target = key_text if key_text in RESERVED_FIELD_SET else resolve_field_alias(key_text)
        if target is not None:
            recognized += 1
        else:
            target = key_text
        if value is None and target not in RESERVED_FIELD_SET:
            continue
        document.extend(target, to_items(value))

    if payload and recognized == 0:
        logger.info(
            "Brief payload matched no known section names; keeping keys as extra sections",
            extra={"keys": [str(key) for key in list(payload)[:20]]},
        )
    return document


def _unparseable() -> BriefDocument:
    return BriefDocument.empty(ParseFormat.UNPARSEABLE)


_TRANSFORMS: dict[ParseFormat, Callable[[Any], BriefDocument]] = {
    ParseFormat.STRUCTURED_NUMBERED: _from_numbered,
    ParseFormat.FLAT_LEGACY: _from_flat_legacy,
    ParseFormat.UNPARSEABLE: lambda _payload: _unparseable(),
}


def _from_payload(payload: Any) -> BriefDocument:
    parse_format = detect_format(payload)
    if parse_format is ParseFormat.UNPARSEABLE:
        logger.info(
            "Decoded brief payload is not an object",
            extra={"payload_type": type(payload).__name__},
        )
    return _TRANSFORMS[parse_format](payload)


def _decode_double_encoded(text: str) -> tuple[bool, Any]:
    """Decode a payload that was JSON-encoded (or escaped) one time too many."""
    if text.startswith('"'):
        candidate = text
    elif '\\"' in text:
        candidate = f'"{text}"'
    else:
        return False, None

    ok, inner = _decode(candidate)
    if not ok or not isinstance(inner, str):
        return False, None
    return _decode(repair_braces(strip_code_fences(inner)))


def _decode_embedded_payload(text: str) -> tuple[bool, Any]:
    """Find a JSON object wrapped in HTML markup or surrounding prose."""
    unwrapped = html.unescape(HTML_TAG_PATTERN.sub("", text))
    start = unwrapped.find("{")
    end = unwrapped.rfind("}")
    if start == -1 or end <= start:
        return False, None
    return _decode(unwrapped[start : end + 1])


def heading_to_section_name(heading: str) -> str:
    """``"Pain Points"`` -> ``"pain_points"``."""
    return re.sub(r"\s+", "_", heading.strip().lower())


def _parse_plain_text(text: str) -> BriefDocument | None:
    collected: dict[str, list[str]] = {}
    current: str | None = None

    for line in text.splitlines():
        heading_match = HEADING_PATTERN.match(line)
        if heading_match:
            heading = (heading_match.group("heading") or "").rstrip("#").rstrip()
            current = heading_to_section_name(heading) if heading else None
            if current is not None:
                current = resolve_field_alias(current) or current
            continue
        if current is None:
            continue
        bullet_match = BULLET_PATTERN.match(line)
        if not bullet_match:
            continue
        item = bullet_match.group("item").strip()
        if item:
            collected.setdefault(current, []).append(item)

    if not collected:
        return None

    document = BriefDocument.empty(ParseFormat.PLAIN_TEXT)
    for name, items in collected.items():
        document.extend(name, items)
    return document


def _parse_embedded(raw: Any) -> BriefDocument:
    text = strip_code_fences(raw)

    ok, payload = _decode(repair_braces(text))
    if ok:
        return _from_payload(payload)
    logger.debug("Structured decode failed", extra={"raw_preview": preview(text)})

    ok, payload = _decode_double_encoded(text)
    if ok:
        logger.info("Recovered double-encoded brief payload")
        return _from_payload(payload)

    plain = _parse_plain_text(text)
    if plain is not None:
        return plain

    ok, payload = _decode_embedded_payload(text)
    if ok:
        logger.info("Recovered brief payload embedded in surrounding markup")
        return _from_payload(payload)

    logger.info(
        "Brief payload could not be parsed; returning empty document",
        extra={"raw_preview": preview(text)},
    )
    return _unparseable()


def parse_embedded(raw: Any) -> BriefDocument:
    """Parse a raw brief using only the values embedded in the payload itself."""
    try:
        return _parse_embedded(raw)
    except RecursionError:
        logger.warning("Brief payload nested too deeply to parse", extra={"raw_preview": preview(raw)})
        return _unparseable()


def parse(
    raw: Any,
    external_titles: Sequence[str] | None = None,
    external_links: Sequence[str] | None = None,
) -> BriefDocument:
    """Parse a raw brief, letting non-empty external titles/links win."""
    return apply_external_precedence(parse_embedded(raw), external_titles, external_links)
