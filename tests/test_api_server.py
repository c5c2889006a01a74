from __future__ import annotations

from fastapi.testclient import TestClient

from chartgen.api.server import MAX_ROWS, _sanitize_non_finite, app
from chartgen.engine.errors import OracleError

client = TestClient(app)

ROWS = [
    {"region": "east", "month": "Jan", "sales": "10"},
    {"region": "east", "month": "Feb", "sales": "20"},
    {"region": "west", "month": "Jan", "sales": "5"},
]


def test_health() -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_profile_returns_camel_case_columns() -> None:
    response = client.post("/profile", json={"data": ROWS})

    assert response.status_code == 200
    body = response.json()
    assert body["rowCount"] == 3
    sales = body["columns"][2]
    assert sales == {"name": "sales", "type": "numeric", "min": 5.0, "max": 20.0, "uniqueCount": 3}
    # min/max omitted for non-numeric columns
    assert "min" not in body["columns"][0]


def test_generate_rejects_large_rows() -> None:
    payload = {
        "columns": ["x"],
        "data": [{"x": str(i)} for i in range(MAX_ROWS + 1)],
        "objective": "anything",
    }
    response = client.post("/generate", json=payload)

    assert response.status_code == 413
    assert response.json()["detail"]["code"] == "ROWS_LIMIT_EXCEEDED"


def test_generate_returns_validated_spec_with_rows(monkeypatch) -> None:
    def _fake_suggest(objective, data_context):
        return {
            "chartType": "bar",
            "x": "month",
            "y": "sales",
            "groupBy": "nonexistent_col",
            "summary": "East sells more.",
        }

    monkeypatch.setattr("chartgen.agent.oracle.suggest_chart_spec", _fake_suggest)

    response = client.post(
        "/generate",
        json={"columns": ["region", "month", "sales"], "data": ROWS, "objective": "Sales per month"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["chartType"] == "bar"
    assert body["groupBy"] is None
    assert body["dataTransform"] == "none"
    assert body["data"] == ROWS
    assert body["requestId"].startswith("cg-")


def test_generate_maps_spec_errors_to_422(monkeypatch) -> None:
    monkeypatch.setattr(
        "chartgen.agent.oracle.suggest_chart_spec",
        lambda objective, data_context: {"chartType": "bar", "x": "month", "y": "revenue", "summary": ""},
    )

    response = client.post(
        "/generate",
        json={"columns": ["region", "month", "sales"], "data": ROWS, "objective": "Revenue"},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "UNKNOWN_COLUMN"
    assert response.json()["detail"]["reason"] == "UnknownColumn"


def test_generate_maps_oracle_errors_to_502(monkeypatch) -> None:
    def _unavailable(objective, data_context):
        raise OracleError("ORACLE_UNAVAILABLE", "OPENAI_API_KEY is not configured")

    monkeypatch.setattr("chartgen.agent.oracle.suggest_chart_spec", _unavailable)

    response = client.post(
        "/generate",
        json={"columns": ["region", "month", "sales"], "data": ROWS, "objective": "Sales"},
    )

    assert response.status_code == 502
    assert response.json()["detail"]["code"] == "ORACLE_UNAVAILABLE"


def test_generate_requires_objective() -> None:
    response = client.post("/generate", json={"columns": ["region"], "data": ROWS, "objective": ""})

    assert response.status_code == 422


def test_render_pie_series() -> None:
    response = client.post(
        "/render",
        json={
            "spec": {"chartType": "pie", "x": "region", "y": "sales", "dataTransform": "sum", "summary": ""},
            "data": ROWS,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["strategy"] == "pie"
    assert body["series"] == [{"name": "east", "value": 30.0}, {"name": "west", "value": 5.0}]


def test_render_missing_field_is_422() -> None:
    response = client.post(
        "/render",
        json={"spec": {"chartType": "bar", "x": "month", "summary": ""}, "data": ROWS},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "MISSING_FIELD"


def test_render_overflowing_sum_returns_null_value() -> None:
    response = client.post(
        "/render",
        json={
            "spec": {"chartType": "pie", "x": "k", "y": "v", "dataTransform": "sum", "summary": ""},
            "data": [{"k": "a", "v": "1e308"}, {"k": "a", "v": "1e308"}, {"k": "b", "v": "2"}],
        },
    )

    assert response.status_code == 200
    assert response.json()["series"] == [{"name": "a", "value": None}, {"name": "b", "value": 2.0}]


def test_sanitize_non_finite_walks_nested_series() -> None:
    series = [{"x": "a", "g1": float("inf"), "g2": 1.5}, {"x": "b", "g1": float("-inf"), "g2": True}]

    assert _sanitize_non_finite(series) == [
        {"x": "a", "g1": None, "g2": 1.5},
        {"x": "b", "g1": None, "g2": True},
    ]
