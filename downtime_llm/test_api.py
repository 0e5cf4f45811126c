"""
API tests for the downtime analysis server.

Run: python -m pytest downtime_llm/test_api.py -v
"""

import json

import pytest
from fastapi.testclient import TestClient

from downtime_llm.api.main import app


LEGACY_ANALYSIS = {
    "recordCount": 412,
    "totalDowntimeHours": 100,
    "rootCauseAnalysis": [
        {"cause": "Mixer bearing failure", "estimatedImpact": "40 hours", "priority": "high"}
    ],
    "patterns": [
        {"title": "Extended changeover on Line 2", "frequency": "Weekly"}
    ],
}


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "segments": ["safety", "quality", "operations", "maintenance"],
    }


def test_segments_without_analysis(client):
    response = client.post("/segments", json={"analysis": None})
    assert response.status_code == 200
    assert response.json() == {"segments": None}


def test_segments_reconstructed(client):
    response = client.post("/segments", json={"analysis": LEGACY_ANALYSIS})
    assert response.status_code == 200
    segments = response.json()["segments"]
    assert segments["maintenance"]["downtimeHours"] == 70.0
    assert segments["operations"]["downtimeHours"] == 30.0
    assert segments["safety"]["severity"] == "low"


def test_segments_native(client):
    native = {"quality": {"downtimeHours": 12, "severity": "critical"}}
    response = client.post("/segments", json={"analysis": {"segments": native}})
    assert response.json() == {"segments": native}


def test_parse_report(client):
    response = client.post(
        "/reports/parse",
        json={
            "raw_response": "```json\n" + json.dumps(LEGACY_ANALYSIS) + "\n```",
            "calculated_total_hours": 100,
            "parsed_record_count": 450,
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["recordCount"] == 450
    assert body["totalDowntimeHours"] == 100
    assert body["segments"]["maintenance"]["rootCauses"][0]["riskLevel"] == "high"


def test_parse_report_rejects_unusable_response(client):
    response = client.post("/reports/parse", json={"raw_response": "Service unavailable"})
    assert response.status_code == 422
    assert "JSON" in response.json()["detail"]


def test_parse_report_validates_request(client):
    response = client.post("/reports/parse", json={"raw_response": "{}", "parsed_record_count": -1})
    assert response.status_code == 422


def test_export_segment(client):
    response = client.post("/segments/maintenance/export", json={"analysis": LEGACY_ANALYSIS})
    assert response.status_code == 200
    body = response.json()
    assert body["segment"] == "maintenance"
    assert body["data"]["rootCauses"][0]["cause"] == "Mixer bearing failure"


def test_export_empty_segment(client):
    response = client.post("/segments/safety/export", json={"analysis": LEGACY_ANALYSIS})
    assert response.status_code == 404


def test_export_unknown_segment(client):
    response = client.post("/segments/finance/export", json={"analysis": LEGACY_ANALYSIS})
    assert response.status_code == 404


def test_not_ready_before_startup():
    client = TestClient(app)
    response = client.post("/segments", json={"analysis": None})
    assert response.status_code == 503
