"""Coerce loosely typed stored values into ordered text items."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

LABEL_SEPARATOR = ": "


def scalar_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _keep(text: str | None) -> bool:
    return text is not None and bool(text.strip())


def split_text_items(text: str) -> list[str]:
    """Split a stored string into items.

    A string holding a JSON array is unpacked; anything else is split on
    newlines with blank lines dropped.
    """
    stripped = text.strip()
    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return to_items(parsed)
    return [line for line in text.splitlines() if line.strip()]


def to_items(value: Any) -> list[str]:
    """Coerce any decoded JSON value into a flat list of text items."""
    if value is None:
        return []
    if isinstance(value, str):
        return split_text_items(value)
    if isinstance(value, Mapping):
        return flatten_object(value)
    if isinstance(value, list | tuple):
        items: list[str] = []
        for item in value:
            if isinstance(item, str):
                if item.strip():
                    items.append(item)
            elif isinstance(item, Mapping):
                items.extend(flatten_object(item))
            elif isinstance(item, list | tuple):
                items.extend(to_items(item))
            else:
                text = scalar_text(item)
                if _keep(text):
                    items.append(text)  # type: ignore[arg-type]
        return items
    text = scalar_text(value)
    return [text] if _keep(text) else []  # type: ignore[list-item]


def labeled_item(label: str, value: str) -> str:
    return f"{label}{LABEL_SEPARATOR}{value}"


def split_labeled_item(item: str) -> tuple[str, str] | None:
    """Split ``"Label: value"`` into its parts; None when there is no label."""
    label, separator, value = item.partition(LABEL_SEPARATOR)
    if not separator or not label or not value.strip():
        return None
    return label, value


def _labeled_lines(label: str, value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return flatten_object(value)
    if isinstance(value, list | tuple):
        lines: list[str] = []
        for item in value:
            if isinstance(item, Mapping):
                lines.extend(flatten_object(item))
            elif isinstance(item, list | tuple):
                lines.extend(_labeled_lines(label, item))
            else:
                text = scalar_text(item)
                if _keep(text):
                    lines.append(labeled_item(label, text))  # type: ignore[arg-type]
        return lines
    text = scalar_text(value)
    if not _keep(text):
        return []
    return [labeled_item(label, text)]  # type: ignore[arg-type]


def flatten_object(obj: Mapping[str, Any], *, overflow_key: str | None = None) -> list[str]:
    """Flatten nested sub-fields into ``"Label: value"`` lines.

    Nested objects use their leaf labels. Items under ``overflow_key`` are
    taken verbatim.
    """
    lines: list[str] = []
    for key, value in obj.items():
        label = str(key)
        if overflow_key is not None and label == overflow_key:
            lines.extend(to_items(value))
            continue
        lines.extend(_labeled_lines(label, value))
    return lines
