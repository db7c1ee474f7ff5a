"""Unit tests for the HTTP endpoints, exercised through the local Flask server."""

import json

import pytest
from unittest.mock import patch


@pytest.fixture
def client():
    from serve_local import app

    app.config["TESTING"] = True
    return app.test_client()


def _body(response):
    return json.loads(response.get_data(as_text=True))


class TestInsightEndpoint:

    def test_success(self, client):
        response = client.post("/api/insight", json={"lis": 70, "ris": 30, "cpi": 400})

        assert response.status_code == 200
        body = _body(response)
        assert body["success"] is True
        assert body["data"]["scores"]["quadrant"] == "Costly"
        assert body["data"]["scores"]["cpiBand"] == "extreme"
        assert body["data"]["insightText"]["source"] == "static"

    def test_validation_error(self, client):
        response = client.post("/api/insight", json={"ris": 30})

        assert response.status_code == 400
        body = _body(response)
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert body["error"]["details"]["field"] == "lis"

    def test_invalid_json(self, client):
        response = client.post("/api/insight", data="{not json", content_type="application/json")

        assert response.status_code == 400
        assert _body(response)["error"]["code"] == "VALIDATION_ERROR"

    def test_cors_preflight(self, client):
        response = client.options("/api/insight")

        assert response.status_code == 204
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_unexpected_error(self, client):
        with patch("main.handle_insight_request", side_effect=RuntimeError("boom")):
            response = client.post("/api/insight", json={"lis": 1, "ris": 1, "cpi": 1})

        assert response.status_code == 500
        assert _body(response)["error"]["code"] == "INTERNAL_ERROR"


class TestCanonicalEndpoint:

    def test_match(self, client):
        response = client.post("/api/insight/canonical", json={
            "type": "comparison",
            "primaryId": "double_pane_window",
            "tags": ["windows"],
        })

        assert response.status_code == 200
        assert _body(response)["data"]["id"] == "insight-003"

    def test_no_match_is_null(self, client):
        response = client.post("/api/insight/canonical", json={"type": "material", "primaryId": "x"})

        assert response.status_code == 200
        assert _body(response)["data"] is None


class TestCompareEndpoint:

    def test_compare(self, client):
        response = client.post("/api/compare", json={
            "baseline": {"id": "a", "cost": 31, "totalCarbon": 28},
            "alternative": {"id": "b", "cost": 25, "totalCarbon": 10},
            "regionId": "denver",
        })

        assert response.status_code == 200
        data = _body(response)["data"]
        assert data["region"]["id"] == "denver"
        assert data["breakEven"]["recommendation"] == "✅ Lower cost AND lower carbon - clear winner!"

    def test_infinite_break_even_serializes_as_null(self, client):
        response = client.post("/api/compare", json={
            "baseline": {"id": "a", "cost": 10, "totalCarbon": 5},
            "alternative": {"id": "b", "cost": 20, "totalCarbon": 5},
        })

        data = _body(response)["data"]
        assert data["breakEven"]["carbon_price_break_even"] is None
        assert data["formatted"]["carbonPriceBreakEven"] == "—"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert _body(response) == {"status": "ok", "service": "blockplane-python-functions"}
