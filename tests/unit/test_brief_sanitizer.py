"""Unit tests for raw brief sanitization."""

from __future__ import annotations

import json

from briefsync.services.briefs.document import BriefDocument, ParseFormat
from briefsync.services.briefs.parser import parse
from briefsync.services.briefs.sanitizer import (
    coerce_raw,
    repair_braces,
    sanitize,
    strip_code_fences,
)


def test_strip_code_fences_unwraps_tagged_block() -> None:
    raw = '```json\n{"pain_points": ["Slow onboarding"]}\n```'

    assert strip_code_fences(raw) == '{"pain_points": ["Slow onboarding"]}'


def test_strip_code_fences_unwraps_untagged_block_with_padding() -> None:
    raw = '  \n```\n  {"a": 1}  \n```\n\n'

    assert strip_code_fences(raw) == '{"a": 1}'


def test_strip_code_fences_removes_dangling_opening_fence() -> None:
    raw = '```json\n{"a": 1}'

    assert strip_code_fences(raw) == '{"a": 1}'


def test_strip_code_fences_removes_dangling_closing_fence() -> None:
    assert strip_code_fences('{"a": 1}\n```') == '{"a": 1}'


def test_strip_code_fences_leaves_plain_text_trimmed() -> None:
    assert strip_code_fences("  # Notes\n- one  ") == "# Notes\n- one"


def test_repair_braces_wraps_truncated_object() -> None:
    assert repair_braces('"notes": "A"') == '{"notes": "A"}'
    assert repair_braces('{"notes": "A"') == '{"notes": "A"}'


def test_repair_braces_leaves_trailing_bracket_alone() -> None:
    assert repair_braces('"pain_points": ["A"]') == '{"pain_points": ["A"]'


def test_parse_of_truncated_payload_returns_document() -> None:
    document = parse('"pain_points": ["A"]')

    assert isinstance(document, BriefDocument)
    assert document.source_format == ParseFormat.UNPARSEABLE
    assert document.sections["pain_points"] == []


def test_repair_braces_keeps_balanced_payloads() -> None:
    assert repair_braces('{"a": 1}') == '{"a": 1}'
    assert repair_braces("[1, 2]") == "[1, 2]"


def test_sanitize_empty_input_becomes_empty_object() -> None:
    assert sanitize("") == "{}"
    assert sanitize(None) == "{}"


def test_coerce_raw_handles_bytes_and_objects() -> None:
    assert coerce_raw(b'{"a": 1}') == '{"a": 1}'
    assert json.loads(coerce_raw({"usps": ["Fast"]})) == {"usps": ["Fast"]}
    assert coerce_raw(None) == ""
