"""Unit tests for settings parsing and log formatting."""

from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from briefsync.config import Settings
from briefsync.core.logging import MAX_EXTRA_VALUE_CHARS, JSONExtrasFormatter, preview


def test_database_url_is_normalized_to_asyncpg() -> None:
    config = Settings(database_url="postgres://user:pw@db:5432/briefs")

    assert config.database_url == "postgresql+asyncpg://user:pw@db:5432/briefs"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("http://a, http://b", ["http://a", "http://b"]),
        ('["http://a"]', ["http://a"]),
        ("", []),
    ],
)
def test_cors_origins_parsing(raw: str, expected: list[str]) -> None:
    assert Settings(cors_origins=raw).cors_origins == expected


def test_negative_debounce_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(autosave_debounce_seconds=-1)


def test_preview_caps_long_payloads() -> None:
    text = "x" * (MAX_EXTRA_VALUE_CHARS + 50)

    assert preview(text) == "x" * MAX_EXTRA_VALUE_CHARS + "..."
    assert preview("a\nb") == "a\\nb"


def test_json_extras_formatter_appends_extras() -> None:
    record = logging.LogRecord(
        name="briefsync.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Parsed brief",
        args=(),
        exc_info=None,
    )
    record.brief_id = "b1"
    record.raw_preview = "y" * 500

    line = JSONExtrasFormatter().format(record)

    assert "| INFO     | briefsync.test | Parsed brief" in line
    extras = json.loads(line.split("Parsed brief ", 1)[1])
    assert extras["brief_id"] == "b1"
    assert len(extras["raw_preview"]) == MAX_EXTRA_VALUE_CHARS + 3
