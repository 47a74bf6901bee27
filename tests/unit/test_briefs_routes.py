"""Unit tests for brief API routes."""

from __future__ import annotations

import json
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from briefsync.api.v1.dependencies import get_brief_store
from briefsync.config import settings
from briefsync.main import create_app
from briefsync.repositories.content_brief_repository import InMemoryBriefStore


@pytest.fixture
def store() -> InMemoryBriefStore:
    store = InMemoryBriefStore()
    store.put(
        "b1",
        brief_content='<p>```json\n{"pain_points": ["A", "A"]}\n```</p>',
        internal_links="/pricing",
    )
    return store


@pytest.fixture
def client(store: InMemoryBriefStore) -> Iterator[TestClient]:
    original_environment = settings.environment
    settings.environment = "production"
    app = create_app()
    app.dependency_overrides[get_brief_store] = lambda: store
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        settings.environment = original_environment


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_normalize_plain_text_with_external_links(client: TestClient) -> None:
    response = client.post(
        "/api/v1/briefs/normalize",
        json={"raw": "# Notes\n- a\n- a", "internal_links": "http://x"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["source_format"] == "plain_text"
    assert payload["sections"]["notes"] == ["a"]
    assert payload["sections"]["internal_links"] == ["http://x"]
    assert payload["canonical"]["4. SEO Strategy"]["Internal Links"] == ["http://x"]
    assert payload["canonical"]["Content Brief"]["Additional Notes"] == ["a"]


def test_normalize_accepts_object_payloads(client: TestClient) -> None:
    response = client.post("/api/v1/briefs/normalize", json={"raw": {"usps": ["Fast"]}})

    assert response.status_code == 200
    assert response.json()["sections"]["usps"] == ["Fast"]


def test_get_brief_returns_normalized_view(client: TestClient) -> None:
    response = client.get("/api/v1/briefs/b1")

    assert response.status_code == 200
    payload = response.json()
    assert payload["brief_id"] == "b1"
    assert payload["sections"]["pain_points"] == ["A"]
    assert payload["sections"]["internal_links"] == ["/pricing"]


def test_get_missing_brief_is_404(client: TestClient) -> None:
    response = client.get("/api/v1/briefs/missing")

    assert response.status_code == 404
    assert response.json()["detail"] == "Content brief not found"


def test_repair_rewrites_stored_brief_once(client: TestClient, store: InMemoryBriefStore) -> None:
    first = client.post("/api/v1/briefs/b1/repair")
    second = client.post("/api/v1/briefs/b1/repair")

    assert first.status_code == 200
    assert first.json() == {
        "brief_id": "b1",
        "source_format": "flat_legacy",
        "changed": True,
        "saved": True,
    }
    assert second.json()["changed"] is False
    stored = json.loads(store.records["b1"].brief_content)
    assert stored["5. Key Pain Points to Address (Select 4-6)"] == ["A"]
    assert stored["4. SEO Strategy"]["Internal Links"] == ["/pricing"]


def test_repair_dry_run_leaves_store_untouched(
    client: TestClient, store: InMemoryBriefStore
) -> None:
    original = store.records["b1"].brief_content

    response = client.post("/api/v1/briefs/b1/repair", params={"dry_run": "true"})

    assert response.json()["changed"] is True
    assert response.json()["saved"] is False
    assert store.records["b1"].brief_content == original


def test_repair_missing_brief_is_404(client: TestClient) -> None:
    assert client.post("/api/v1/briefs/missing/repair").status_code == 404
