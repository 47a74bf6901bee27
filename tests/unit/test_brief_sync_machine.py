"""Unit tests for the pure brief sync state machine."""

from __future__ import annotations

import json

import pytest

from briefsync.core.exceptions import InvalidSectionEditError
from briefsync.services.briefs.sync_machine import (
    DocumentChanged,
    EditOperation,
    ExternalArraysReplaced,
    ExternalDocumentReplaced,
    LinksChanged,
    LocalEdit,
    SyncOutcome,
    SyncState,
    TitlesChanged,
    begin_transition,
    build_snapshot,
    plan_transition,
    validate_section_name,
)

RAW = json.dumps(
    {
        "pain_points": ["A"],
        "possible_article_titles": ["Embedded title"],
        "internal_links": ["/embedded"],
    }
)


def test_begin_transition_is_total() -> None:
    events = [
        ExternalDocumentReplaced("{}"),
        ExternalArraysReplaced("internal_links", ("/x",)),
        LocalEdit("pain_points", EditOperation.ADD, value="B"),
    ]
    for state in SyncState:
        for event in events:
            transition = begin_transition(state, event)
            assert transition.accepted is (state is SyncState.IDLE)

    assert begin_transition(SyncState.IDLE, events[0]).working_state is (
        SyncState.APPLYING_EXTERNAL_UPDATE
    )
    assert begin_transition(SyncState.IDLE, events[2]).working_state is (
        SyncState.APPLYING_LOCAL_EDIT
    )


def test_local_edit_during_external_update_keeps_working_state() -> None:
    transition = begin_transition(
        SyncState.APPLYING_EXTERNAL_UPDATE,
        LocalEdit("pain_points", EditOperation.ADD, value="B"),
    )

    assert transition.accepted is False
    assert transition.working_state is SyncState.APPLYING_EXTERNAL_UPDATE


def test_build_snapshot_keeps_both_title_sources() -> None:
    snapshot = build_snapshot(RAW, ["External title"], None)

    assert snapshot.document.titles == ["External title"]
    assert snapshot.embedded_titles == ("Embedded title",)
    assert snapshot.external_titles == ("External title",)
    assert snapshot.document.links == ["/embedded"]


def test_external_document_replacement_has_no_effects() -> None:
    snapshot = build_snapshot(RAW, ["External title"])

    plan = plan_transition(snapshot, ExternalDocumentReplaced(json.dumps({"usps": ["Fast"]})))

    assert plan.outcome is SyncOutcome.APPLIED
    assert plan.effects == ()
    assert plan.snapshot.document.sections["usps"] == ["Fast"]
    # Known external titles are kept when the event carries none.
    assert plan.snapshot.document.titles == ["External title"]


def test_unchanged_external_array_is_noop() -> None:
    snapshot = build_snapshot(RAW, None, ["/a", "/b"])

    plan = plan_transition(snapshot, ExternalArraysReplaced("internal_links", ("/a", "/b")))

    assert plan.outcome is SyncOutcome.NOOP
    assert plan.snapshot is snapshot


def test_empty_external_array_falls_back_to_embedded() -> None:
    snapshot = build_snapshot(RAW, ["External title"])

    plan = plan_transition(snapshot, ExternalArraysReplaced("possible_article_titles", ()))

    assert plan.outcome is SyncOutcome.APPLIED
    assert plan.snapshot.document.titles == ["Embedded title"]
    assert plan.effects == ()


def test_external_array_event_rejects_other_sections() -> None:
    with pytest.raises(ValueError):
        ExternalArraysReplaced("pain_points", ("A",))


def test_local_edit_emits_document_and_links_effects() -> None:
    snapshot = build_snapshot(RAW)

    plan = plan_transition(
        snapshot, LocalEdit("internal_links", EditOperation.ADD, value="/new")
    )

    assert plan.outcome is SyncOutcome.APPLIED
    assert isinstance(plan.effects[0], DocumentChanged)
    assert plan.effects[1] == LinksChanged(("/embedded", "/new"))
    assert plan.snapshot.external_links == ("/embedded", "/new")
    assert not any(isinstance(effect, TitlesChanged) for effect in plan.effects)


def test_local_edit_with_blank_value_is_noop() -> None:
    snapshot = build_snapshot(RAW)

    plan = plan_transition(snapshot, LocalEdit("pain_points", EditOperation.ADD, value="   "))

    assert plan.outcome is SyncOutcome.NOOP
    assert plan.effects == ()


def test_local_edit_duplicate_is_noop() -> None:
    snapshot = build_snapshot(RAW)

    plan = plan_transition(snapshot, LocalEdit("pain_points", EditOperation.ADD, value="A"))

    assert plan.outcome is SyncOutcome.NOOP


def test_local_edit_index_out_of_range() -> None:
    snapshot = build_snapshot(RAW)

    with pytest.raises(InvalidSectionEditError) as exc_info:
        plan_transition(snapshot, LocalEdit("pain_points", EditOperation.REMOVE, index=3))

    assert exc_info.value.details == {"section": "pain_points", "index": 3, "length": 1}


@pytest.mark.parametrize("section", ["1. Overview", "Content Brief", "brief metadata", "  "])
def test_validate_section_name_rejects_canonical_keys(section: str) -> None:
    with pytest.raises(InvalidSectionEditError):
        validate_section_name(section)


def test_validate_section_name_accepts_reserved_and_extra_names() -> None:
    validate_section_name("notes")
    validate_section_name("faq")
