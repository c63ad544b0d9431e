"""HTTP surface tests. The orchestrator is swapped for one backed by a mock transport."""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from askwiki import api
from askwiki.core.orchestrator import Orchestrator

from conftest import ADA_URL


@pytest.fixture
def client(ada_fetcher, monkeypatch) -> TestClient:
    monkeypatch.setattr(api, "orchestrator", Orchestrator(fetcher=ada_fetcher))
    return TestClient(api.app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_query_returns_pipeline_response(client: TestClient) -> None:
    response = client.post("/api/query", json={"query": "who is Ada Lovelace"})
    assert response.status_code == 200
    data = response.json()
    assert data["query"] == "who is Ada Lovelace"
    assert data["task"] == {"mode": "overview"}
    assert data["analysis"]["difficulty"] == "intermediate"
    assert len(data["analysis"]["keyPoints"]) == 3
    assert data["research"]["url"] == ADA_URL
    assert "## 📚 Ada Lovelace" in data["finalAnswer"]
    assert data["error"] is False
    assert "timestamp" in data


@pytest.mark.parametrize(
    "body",
    [{}, {"query": 42}, {"query": None}, {"query": "   "}, {"question": "who is Ada Lovelace"}],
)
def test_malformed_query_is_rejected(client: TestClient, body: dict) -> None:
    with patch.object(api.orchestrator, "orchestrate", new=AsyncMock()) as orchestrate:
        response = client.post("/api/query", json=body)
    assert response.status_code == 400
    data = response.json()
    assert data["error"] is True
    assert data["message"] == api.INVALID_QUERY
    assert data["details"]
    assert data["query"] == (body["query"] if isinstance(body.get("query"), str) else None)
    orchestrate.assert_not_called()


def test_unexpected_failure_returns_error_object(client: TestClient) -> None:
    with patch.object(api.orchestrator, "orchestrate", new=AsyncMock(side_effect=RuntimeError("boom"))):
        response = client.post("/api/query", json={"query": "who is Ada Lovelace"})
    assert response.status_code == 500
    assert response.json() == {"query": "who is Ada Lovelace", "error": True, "message": "boom", "details": None}


def test_debug_research(client: TestClient) -> None:
    response = client.get("/debug/research", params={"query": "who is Ada Lovelace"})
    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["topic"] == "Ada Lovelace"
    assert data["triedTopics"] == ["Ada_Lovelace"]
