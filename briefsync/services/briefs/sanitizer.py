"""Strip formatting artifacts from raw brief payloads."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from briefsync.core.logging import preview

logger = logging.getLogger(__name__)

_LANGUAGE_TAG = r"(?:[A-Za-z][\w+-]*)?"

FULL_FENCE_PATTERN = re.compile(
    rf"^\s*```[ \t]*{_LANGUAGE_TAG}[ \t]*\r?\n?(?P<body>.*?)```\s*$",
    re.DOTALL,
)
LEADING_FENCE_PATTERN = re.compile(rf"^\s*```[ \t]*{_LANGUAGE_TAG}")
TRAILING_FENCE_PATTERN = re.compile(r"```\s*$")

OPENING_CHARS = ("{", "[")
CLOSING_CHARS = ("}", "]")


def coerce_raw(raw: Any) -> str:
    """Turn whatever the record store handed us into text."""
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    try:
        return json.dumps(raw, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(raw)


def strip_code_fences(raw: Any) -> str:
    """Remove a surrounding code fence (or stray fence markers) and trim."""
    text = coerce_raw(raw)

    full_match = FULL_FENCE_PATTERN.match(text)
    if full_match:
        return full_match.group("body").strip()

    stripped = LEADING_FENCE_PATTERN.sub("", text, count=1)
    stripped = TRAILING_FENCE_PATTERN.sub("", stripped, count=1)
    if stripped != text:
        logger.debug("Stripped partial code fence", extra={"raw_preview": preview(text)})
    return stripped.strip()


def repair_braces(text: str) -> str:
    """Wrap text missing its outer braces.

    A heuristic for truncated payloads; the result may still not decode.
    """
    repaired = text
    if not repaired.startswith(OPENING_CHARS):
        repaired = "{" + repaired
    if not repaired.endswith(CLOSING_CHARS):
        repaired = repaired + "}"
    return repaired


def sanitize(raw: Any) -> str:
    """Return the best structured-payload guess for a raw brief string."""
    return repair_braces(strip_code_fences(raw))
