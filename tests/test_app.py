import sqlite3
from unittest.mock import MagicMock

from app import create_app
from models import AnalysisResult

STATEMENT = "The DOH reported 1,200 dengue cases this week."


def post_analyze(client, **body):
    return client.post('/api/analyze', json=body)


def test_analyze_returns_result_and_saves_it(client):
    response = post_analyze(client, content=STATEMENT, type="text")

    assert response.status_code == 200
    data = response.get_json()
    assert data["verdict"] == "UNVERIFIED"
    assert 0 <= data["confidence_score"] <= 99
    assert data["id"]

    stored = client.get(f"/api/history/{data['id']}").get_json()
    assert stored["verdict"] == "UNVERIFIED"
    assert stored["result"]["explanation"] == data["explanation"]


def test_type_defaults_to_text(client):
    response = post_analyze(client, content=STATEMENT)
    assert response.get_json()["verdict"] == "UNVERIFIED"


def test_missing_content_is_400(client):
    response = post_analyze(client, type="text")
    assert response.status_code == 400
    assert response.get_json() == {"error": "No content provided"}


def test_blank_content_is_400(client):
    assert post_analyze(client, content="   ").status_code == 400


def test_non_json_body_is_400(client):
    response = client.post('/api/analyze', data="content=hello", content_type="text/plain")
    assert response.status_code == 400
    assert "error" in response.get_json()


def test_rejected_input_is_200_error_and_not_saved(client):
    response = post_analyze(client, content="Too short", type="text")

    assert response.status_code == 200
    data = response.get_json()
    assert data["verdict"] == "ERROR"
    assert data["explanation"] == "The input does not contain meaningful news content."
    assert "id" not in data
    assert client.get('/api/stats').get_json()["total"] == 0


def test_pipeline_crash_is_500(history):
    pipeline = MagicMock()
    pipeline.integrations.return_value = {}
    pipeline.analyze.side_effect = RuntimeError("boom")
    client = create_app(pipeline=pipeline, history=history).test_client()

    response = post_analyze(client, content=STATEMENT)

    assert response.status_code == 500
    assert response.get_json() == {"error": "Analysis failed"}


def test_history_failure_does_not_fail_request():
    pipeline = MagicMock()
    pipeline.integrations.return_value = {}
    pipeline.analyze.return_value = AnalysisResult(verdict="REAL", confidence_score=90, explanation="ok")
    history = MagicMock()
    history.append.side_effect = sqlite3.OperationalError("database is locked")
    client = create_app(pipeline=pipeline, history=history).test_client()

    response = post_analyze(client, content=STATEMENT)

    assert response.status_code == 200
    assert response.get_json()["verdict"] == "REAL"


def test_history_listing_stats_and_clear(client):
    post_analyze(client, content=STATEMENT)
    post_analyze(client, content="Reuters reported that the Senate passed the budget on Monday.")

    listing = client.get('/api/history?limit=1').get_json()
    assert listing["count"] == 1
    assert client.get('/api/history').get_json()["count"] == 2

    stats = client.get('/api/stats').get_json()
    assert stats["total"] == 2
    assert stats["real"] + stats["fake"] + stats["unverified"] == 2

    assert client.delete('/api/history').get_json() == {"deleted": 2}
    assert client.get('/api/stats').get_json()["total"] == 0


def test_unknown_history_id_is_404(client):
    response = client.get('/api/history/does-not-exist')
    assert response.status_code == 404
    assert response.get_json() == {"error": "Analysis not found"}


def test_health_lists_integrations(client):
    data = client.get('/api/health').get_json()
    assert data["ok"] is True
    assert data["integrations"]["zero_shot"] is False
    assert data["integrations"]["fact_check"] is False


def test_wrong_method_is_json(client):
    response = client.get('/api/analyze')
    assert response.status_code == 405
    assert response.get_json() == {"error": "Method not allowed"}
