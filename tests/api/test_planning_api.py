# tests/api/test_planning_api.py

from fastapi.testclient import TestClient

from planning_engine.features.recommendations import get_orchestrator
from planning_engine.main import app

EVENT = {
    "event_id": "evt_456",
    "capacity": 2000,
    "start_date": "2025-05-10",
    "end_date": "2025-05-10",
    "ticket_price": 0,
    "created_at": "2024-01-01",
    "outdoor": True,
}


def test_health_check(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_attendance_forecast_endpoint(client: TestClient):
    """
    Tests the full request-response cycle for the attendance forecast.
    """
    request_payload = {"event": EVENT, "as_of": "2025-01-15"}

    response = client.post("/planning/forecasting/attendance", json=request_payload)

    assert response.status_code == 200
    response_data = response.json()
    assert response_data["success"] is True
    assert response_data["predicted_attendance"] == 2160
    assert [d["day_of_week"] for d in response_data["daily_forecast"]] == ["Saturday"]


def test_missing_event_returns_structured_error(client: TestClient):
    response = client.post("/planning/risk/assess", json={"as_of": "2025-01-15"})

    # Engine failures are part of the response body, not the status code
    assert response.status_code == 200
    response_data = response.json()
    assert response_data["success"] is False
    assert response_data["error_code"] == "MISSING_INPUT"
    assert response_data["details"]["field"] == "event"


def test_forecast_without_event_returns_structured_error(client: TestClient):
    response = client.post("/planning/forecasting/attendance", json={"as_of": "2025-01-15"})

    assert response.status_code == 200
    response_data = response.json()
    assert response_data["success"] is False
    assert response_data["error_code"] == "MISSING_INPUT"
    assert response_data["details"]["field"] == "event"


def test_malformed_payload_is_rejected(client: TestClient):
    invalid_payload = {"event": {"event_id": "evt_456", "capacity": -5}}

    response = client.post("/planning/forecasting/attendance", json=invalid_payload)

    # FastAPI should return a 422 Unprocessable Entity for Pydantic validation errors
    assert response.status_code == 422


def test_layout_endpoint(client: TestClient):
    request_payload = {
        "venue": {"capacity": 1000, "venue_type": "outdoor_park", "outdoor": True},
        "vendors": [
            {"id": "v1", "business_type": "Food truck"},
            {"id": "v2", "business_type": "Craft shop"},
            {"id": "v3", "business_type": "Bike repair"},
        ],
        "alternative_count": 1,
    }

    response = client.post("/planning/layout/optimize", json=request_payload)

    assert response.status_code == 200
    response_data = response.json()
    assert set(response_data["layout"]["vendor_positions"]) == {"v1", "v2", "v3"}
    assert response_data["layout"]["vendor_positions"]["v1"]["category"] == "food"
    assert response_data["venue_analysis"]["recommended_vendor_count"] == 10
    assert len(response_data["alternative_layouts"]) == 1


def test_layout_validation_failure(client: TestClient):
    request_payload = {
        "venue": {"capacity": 10},
        "vendors": [{"id": "v1", "business_type": "food"}, {"id": "v2", "business_type": "music"}],
    }

    response = client.post("/planning/layout/optimize", json=request_payload)

    assert response.status_code == 200
    response_data = response.json()
    assert response_data["error_code"] == "VALIDATION_FAILED"
    assert response_data["details"]["violations"] == ["Vendors v1 and v2 too close: 2.74m < 3.0m"]


def test_budget_endpoint(client: TestClient):
    request_payload = {"event": EVENT, "total_budget": "1000000", "as_of": "2025-01-15"}

    response = client.post("/planning/budget/allocate", json=request_payload)

    assert response.status_code == 200
    response_data = response.json()
    allocation = response_data["recommended_allocation"]
    assert len(allocation) == 8
    assert abs(sum(allocation.values()) - 1000000) <= 1.0
    assert allocation["contingency"] >= 20000


def test_risk_endpoint(client: TestClient):
    request_payload = {"event": EVENT, "categories": ["weather", "safety"], "as_of": "2025-01-15"}

    response = client.post("/planning/risk/assess", json=request_payload)

    assert response.status_code == 200
    response_data = response.json()
    assert set(response_data["category_assessments"]) == {"weather", "safety"}
    assert response_data["risk_level"] in {"low", "medium", "high", "critical"}


def test_unknown_risk_category_is_rejected(client: TestClient):
    request_payload = {"event": EVENT, "categories": ["reputational"]}

    response = client.post("/planning/risk/assess", json=request_payload)

    assert response.status_code == 422


def test_revenue_endpoint(client: TestClient):
    response = client.post(
        "/planning/recommendations/revenue", json={"event": EVENT, "as_of": "2025-01-15"}
    )

    assert response.status_code == 200
    response_data = response.json()
    assert response_data["predicted_attendance"] == 2160
    assert abs(response_data["total_projected_revenue"] - 1770000) < 0.01
    assert response_data["profit_projections"]["break_even_point"]["message"] == "Cannot calculate - free event"


def test_roi_endpoint(client: TestClient):
    request_payload = {
        "event": EVENT,
        "investment_scenarios": [{"name": "Second stage", "investment": "100000", "expected_revenue_increase": "150000"}],
        "as_of": "2025-01-15",
    }

    response = client.post("/planning/recommendations/roi", json=request_payload)

    assert response.status_code == 200
    response_data = response.json()
    assert response_data["current_roi"]["roi_category"] == "negative"
    assert response_data["scenario_analysis"][0]["recommendation"] == "proceed"


def test_benchmark_endpoint(client: TestClient):
    request_payload = {
        "event": EVENT,
        "peers": [{"capacity": 2000, "attendance": 1000, "start_date": "2024-05-04"}],
        "criteria": ["similar_size_events"],
        "actual_attendance": 1500,
        "as_of": "2025-01-15",
    }

    response = client.post("/planning/recommendations/benchmark", json=request_payload)

    assert response.status_code == 200
    response_data = response.json()
    assert response_data["attendance_source"] == "actual"
    comparison = response_data["benchmarking_results"]["similar_size_events"]
    assert comparison["performance"] == "above_average"
    assert comparison["percentile"] == 100.0


def test_dashboard_endpoint(client: TestClient):
    request_payload = {
        "event": {**EVENT, "budget": "1000000"},
        "vendors": [{"id": "v1", "business_type": "Food truck"}],
        "as_of": "2025-01-15",
    }

    response = client.post("/planning/recommendations/dashboard", json=request_payload)

    assert response.status_code == 200
    response_data = response.json()
    assert response_data["event_id"] == "evt_456"
    assert response_data["budget_allocation"]["success"] is True
    assert response_data["layout"]["success"] is True
    assert response_data["section_errors"] == {}
    assert response_data["summary_insights"]["total_insights"] == 2


def test_dashboard_uses_injected_orchestrator(client: TestClient, mocker):
    orchestrator = mocker.Mock()
    orchestrator.generate_dashboard.return_value = {
        "success": False,
        "error": "Dashboard generation failed: boom",
        "error_code": "INTERNAL_ERROR",
        "details": {},
    }
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    try:
        response = client.post("/planning/recommendations/dashboard", json={"event": EVENT})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert response.json()["error_code"] == "INTERNAL_ERROR"
    orchestrator.generate_dashboard.assert_called_once()
