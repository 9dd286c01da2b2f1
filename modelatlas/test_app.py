from __future__ import annotations

import logging
from typing import Iterable

import pytest
from fastapi.testclient import TestClient

from . import app as app_module


@pytest.fixture
def client() -> Iterable[TestClient]:
    with TestClient(app_module.app, raise_server_exceptions=False) as test_client:
        yield test_client


def _entities() -> list:
    return [
        {"id": 1, "name": "RT-1", "org": "Google", "date": "Dec 2022", "category": "VLA"},
        {"id": 2, "name": "RT-2", "org": "Google", "date": "Jul 2023", "category": "VLA", "params": "55B"},
        {"id": 3, "name": "N1", "org": "NVIDIA", "date": "Mar 2025", "category": "VLA"},
    ]


def test_health_endpoint_returns_uptime_and_version(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "uptime_seconds" in data
    assert "version" in data
    assert "X-Request-ID" in response.headers


def test_request_id_header_is_reused_from_client(client: TestClient) -> None:
    response = client.get("/health/live", headers={"X-Request-ID": "test-request-123"})
    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "test-request-123"


def test_unhandled_exception_returns_request_id(client: TestClient) -> None:
    if not any(
        getattr(route, "path", None) == "/_test-error"
        for route in app_module.app.router.routes
    ):
        @app_module.app.get("/_test-error")
        async def _raise_error():  # pragma: no cover - used only for tests
            raise RuntimeError("boom")

    response = client.get("/_test-error")
    assert response.status_code == 500
    data = response.json()
    assert data["detail"] == "Internal server error"
    assert response.headers["X-Request-ID"] == data["request_id"]


def test_layout_endpoint_uses_default_eras(client: TestClient) -> None:
    response = client.post("/api/layout", json={"entities": _entities()})
    assert response.status_code == 200, response.text
    data = response.json()
    assert [marker["entity_id"] for marker in data["markers"]] == ["1", "2", "3"]
    assert len(data["labels"]) == 3
    assert [band["label"] for band in data["era_bands"]] == [None, "LLM Era", "VLA Era", "VAM Era"]
    assert data["track_height"] >= 122


def test_layout_endpoint_empty_request(client: TestClient) -> None:
    response = client.post("/api/layout", json={"entities": [], "eras": []})
    assert response.status_code == 200
    data = response.json()
    assert data["markers"] == []
    assert data["era_bands"] == []
    assert data["track_height"] == 60


def test_layout_endpoint_rejects_blank_names(client: TestClient) -> None:
    response = client.post("/api/layout", json={"entities": [{"id": 1, "name": "  "}]})
    assert response.status_code == 422


def test_layout_endpoint_enforces_entity_limit(monkeypatch, client: TestClient) -> None:
    monkeypatch.setattr(app_module.settings, "max_entities", 2)
    response = client.post("/api/layout", json={"entities": _entities()})
    assert response.status_code == 400
    assert "Too many entities" in response.json()["detail"]


def test_annotate_endpoint_returns_spans(client: TestClient) -> None:
    payload = {
        "text": "500 robot hours logged",
        "glossary": [
            {"term": "robot", "definition": "A machine."},
            {"term": "robot hours", "definition": "Teleoperation time."},
        ],
    }
    response = client.post("/api/annotate", json=payload)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["total_annotations"] == 1
    assert "".join(span["text"] for span in data["spans"]) == payload["text"]
    annotated = [span for span in data["spans"] if span["is_annotation"]]
    assert annotated[0]["ref_id"] == "robot hours"
    assert annotated[0]["annotation_kind"] == "glossary"


def test_annotate_endpoint_enforces_text_limit(monkeypatch, client: TestClient) -> None:
    monkeypatch.setattr(app_module.settings, "max_text_characters", 10)
    response = client.post("/api/annotate", json={"text": "x" * 11, "glossary": []})
    assert response.status_code == 400


def test_link_endpoint_excludes_current_entity(client: TestClient) -> None:
    payload = {"text": "RT-2 builds on RT-1.", "entities": _entities(), "current_entity_id": 2}
    response = client.post("/api/link", json=payload)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["total_annotations"] == 1
    linked = [span for span in data["spans"] if span["is_annotation"]]
    assert linked == [
        {"text": "RT-1", "is_annotation": True, "annotation_kind": "model-link", "ref_id": "1"}
    ]


def test_stats_endpoint(client: TestClient) -> None:
    response = client.post("/api/stats", json={"entities": _entities()})
    assert response.status_code == 200
    assert response.json() == {"total_models": 3, "total_orgs": 2, "date_range": "2022–2025"}


def test_datasets_endpoint(client: TestClient) -> None:
    response = client.post("/api/datasets", json={"text": "Trained on DROID and LIBERO."})
    assert response.status_code == 200
    assert sorted(response.json()["datasets"]) == ["DROID", "LIBERO"]


def test_annotate_endpoint_enforces_glossary_limit(monkeypatch, client: TestClient) -> None:
    monkeypatch.setattr(app_module.settings, "max_glossary_terms", 2)
    glossary = [{"term": f"term{index}", "definition": "A term."} for index in range(3)]
    response = client.post("/api/annotate", json={"text": "term0 term1 term2", "glossary": glossary})
    assert response.status_code == 400
    assert "Too many glossary terms" in response.json()["detail"]


def test_annotate_endpoint_accepts_glossary_at_limit(monkeypatch, client: TestClient) -> None:
    monkeypatch.setattr(app_module.settings, "max_glossary_terms", 3)
    glossary = [{"term": f"term{index}", "definition": "A term."} for index in range(3)]
    response = client.post("/api/annotate", json={"text": "term0 term1 term2", "glossary": glossary})
    assert response.status_code == 200
    assert response.json()["total_annotations"] == 3


def test_link_endpoint_accepts_float_current_entity_id(client: TestClient) -> None:
    payload = {"text": "RT-2 builds on RT-1.", "entities": _entities(), "current_entity_id": 2.0}
    response = client.post("/api/link", json=payload)
    assert response.status_code == 200, response.text
    linked = [span["ref_id"] for span in response.json()["spans"] if span["is_annotation"]]
    assert linked == ["1"]


def test_startup_logs_request_limits(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="modelatlas.app"):
        with TestClient(app_module.app):
            pass
    messages = [record.getMessage() for record in caplog.records if record.name == "modelatlas.app"]
    assert any("glossary terms" in message for message in messages)
