# tests/features/test_recommendations_service.py
from datetime import date

import pytest

from planning_engine.core.exceptions import MissingInputError, ValidationFailure
from planning_engine.features.budget.schemas import AllocationResult
from planning_engine.features.forecasting.service import build_forecast
from planning_engine.features.layout.schemas import LayoutResult, Vendor, VenueSpace
from planning_engine.features.recommendations.schemas import *
from planning_engine.features.recommendations.service import *
from planning_engine.features.risk.service import build_risk_assessment
from planning_engine.schemas.common import ErrorResponse


@pytest.fixture
def orchestrator():
    return PlanningOrchestrator()


@pytest.fixture
def free_event(make_event):
    # Forecast for this event is 2000 * 0.90 * 1.2 = 2160
    return make_event(ticket_price=0)


@pytest.fixture
def vendors():
    return [
        Vendor(id=f"v{i}", business_type=business_type)
        for i, business_type in enumerate(["food truck", "craft shop", "repair service", "catering"])
    ]


# ===========================================
# Revenue projection
# ===========================================


def test_free_event_revenue_projection(orchestrator, free_event, as_of):
    """
    A free event earns only sponsorship and merchandise: 150000 from the
    small sponsorship tier and 648 buyers spending 2500 each.
    """
    # 1. Arrange
    request = RevenueProjectionRequest(event=free_event, as_of=as_of)

    # 2. Act
    result = orchestrator.project_revenue(request)

    # 3. Assert
    assert isinstance(result, RevenueProjection)
    assert result.predicted_attendance == 2160

    streams = result.revenue_streams
    assert streams.ticket_revenue.revenue_scenarios == {"conservative": 0, "expected": 0, "optimistic": 0}
    assert streams.vendor_revenue.total_vendor_revenue == 0
    assert streams.sponsorship_revenue.total_sponsorship_revenue == 150000
    assert streams.merchandise_revenue.estimated_buyers == 648
    assert streams.merchandise_revenue.total_merchandise_revenue == pytest.approx(1620000)
    assert result.total_projected_revenue == pytest.approx(1770000)

    assert result.total_costs.total_estimated_costs == 2700000
    assert result.total_costs.cost_per_attendee == 1350

    profit = result.profit_projections
    assert profit.expected_profit == pytest.approx(-930000)
    assert profit.profit_margin == pytest.approx(-52.54)
    assert profit.break_even_point.message == "Cannot calculate - free event"
    assert profit.break_even_point.break_even_attendance is None


def test_revenue_is_discounted_by_overall_risk(orchestrator, free_event, as_of):
    result = orchestrator.project_revenue(RevenueProjectionRequest(event=free_event, as_of=as_of))

    adjusted = result.risk_adjusted_projections
    # Overall risk 0.2725 removes 8.175% of profit
    assert adjusted.overall_risk_score == pytest.approx(0.2725)
    assert adjusted.adjusted_profit == pytest.approx(-930000 * (1 - 0.2725 * 0.3), abs=0.01)
    assert adjusted.risk_impact == pytest.approx(-930000 * 0.2725 * 0.3, abs=0.01)


def test_revenue_scenarios_scale_projected_revenue(orchestrator, free_event, as_of):
    result = orchestrator.project_revenue(RevenueProjectionRequest(event=free_event, as_of=as_of))

    scenarios = result.scenario_analysis
    assert list(scenarios) == ["pessimistic", "realistic", "optimistic"]
    assert scenarios["pessimistic"].attendance == 1512
    assert scenarios["pessimistic"].revenue == pytest.approx(1770000 * 0.6)
    assert scenarios["realistic"].revenue == pytest.approx(1770000)
    assert sum(s.probability for s in scenarios.values()) == pytest.approx(1.0)


def test_break_even_for_ticketed_event():
    ticket = TicketRevenue(
        base_ticket_price=1500,
        projected_attendance=2000,
        revenue_scenarios={"conservative": 0, "expected": 0, "optimistic": 0},
    )

    analysis = calculate_break_even(2700000, ticket)

    assert analysis.break_even_attendance == 1800
    assert analysis.break_even_revenue == 2700000
    assert analysis.margin_of_safety == 200


@pytest.mark.parametrize(
    "capacity, total",
    [
        (2000, 150000),
        (3000, 200000 + 2 * 100000 + 5 * 25000),
        (8000, 500000 + 3 * 200000 + 10 * 50000),
    ],
)
def test_sponsorship_tiers_follow_capacity(make_event, capacity, total):
    assert calculate_sponsorship_revenue(make_event(capacity=capacity)).total_sponsorship_revenue == total


def test_vendor_revenue_breakdown(make_event):
    revenue = calculate_vendor_revenue(make_event(vendor_count=10))

    assert revenue.vendor_breakdown == {"food_vendors": 5, "retail_vendors": 3, "service_vendors": 2}
    assert revenue.base_vendor_revenue == 500000
    assert revenue.commission_revenue == pytest.approx(100000)
    assert revenue.total_vendor_revenue == pytest.approx(600000)


def test_forecast_runs_before_risk_and_uses_as_of(mocker, free_event, as_of):
    calls = []

    def forecaster(request):
        calls.append("forecast")
        return build_forecast(request)

    def risk_assessor(request):
        calls.append("risk")
        return build_risk_assessment(request)

    forecaster_spy = mocker.Mock(side_effect=forecaster)
    orchestrator = PlanningOrchestrator(forecaster=forecaster_spy, risk_assessor=risk_assessor)

    orchestrator.project_revenue(RevenueProjectionRequest(event=free_event, as_of=as_of))

    assert calls == ["forecast", "risk"]
    assert forecaster_spy.call_args.args[0].as_of == as_of


def test_forecast_failure_is_returned_as_error(mocker, free_event, as_of):
    forecaster = mocker.Mock(side_effect=MissingInputError("Event capacity is required", field="capacity"))
    risk_assessor = mocker.Mock()
    orchestrator = PlanningOrchestrator(forecaster=forecaster, risk_assessor=risk_assessor)

    result = orchestrator.project_revenue(RevenueProjectionRequest(event=free_event, as_of=as_of))

    assert isinstance(result, ErrorResponse)
    assert result.error_code == "MISSING_INPUT"
    assert result.details["field"] == "capacity"
    risk_assessor.assert_not_called()


def test_unexpected_engine_failure_is_internal_error(mocker, free_event, as_of):
    orchestrator = PlanningOrchestrator(risk_assessor=mocker.Mock(side_effect=RuntimeError("boom")))

    result = orchestrator.project_revenue(RevenueProjectionRequest(event=free_event, as_of=as_of))

    assert isinstance(result, ErrorResponse)
    assert result.error_code == "INTERNAL_ERROR"
    assert result.error == "Revenue projection failed: boom"


def test_missing_event_is_reported(orchestrator, as_of):
    result = orchestrator.project_revenue(RevenueProjectionRequest(as_of=as_of))

    assert isinstance(result, ErrorResponse)
    assert result.details["field"] == "event"


# ===========================================
# ROI optimization
# ===========================================


def test_roi_against_event_budget_with_history(orchestrator, make_event, as_of):
    event = make_event(ticket_price=0, budget=2000000)
    request = RoiOptimizationRequest(
        event=event,
        roi_history=[
            RoiRecord(period="2022", roi_percentage=5, season="summer"),
            RoiRecord(period="2023", roi_percentage=12, season="summer"),
            RoiRecord(period="2024", roi_percentage=20, season="spring"),
        ],
        as_of=as_of,
    )

    result = orchestrator.optimize_roi(request)

    assert isinstance(result, RoiOptimizationResult)
    current = result.current_roi
    assert current.total_investment == 2000000
    assert current.net_profit == pytest.approx(-230000)
    assert current.roi_percentage == pytest.approx(-11.5)
    assert current.roi_category == "negative"

    history = result.historical_analysis
    assert history.comparison == "available"
    assert history.average_roi == pytest.approx(12.33)
    assert history.roi_trend == "improving"
    assert history.roi_volatility == "medium"
    assert history.best_performing_period.period == "2024"
    assert history.worst_performing_period.period == "2022"
    assert history.seasonal_patterns == {"summer": 8.5, "spring": 20.0}

    assert [r.type for r in result.optimization_recommendations] == [
        "cost_reduction",
        "historical_gap",
        "sponsorship_growth",
        "vendor_expansion",
    ]
    assert result.improvement_projections.total_estimated_gain == pytest.approx(5 + 23.83 + 2.5 + 1.5)
    assert result.implementation_priority[-1] == "vendor_expansion"


def test_roi_falls_back_to_estimated_costs(orchestrator, free_event, as_of):
    result = orchestrator.optimize_roi(RoiOptimizationRequest(event=free_event, as_of=as_of))

    assert result.current_roi.total_investment == 2700000
    assert result.current_roi.roi_percentage == pytest.approx(-34.44)
    assert result.historical_analysis.comparison == "no_historical_data"
    assert result.scenario_analysis == []


def test_investment_scenarios_are_ranked_by_expected_roi():
    scenarios = [
        InvestmentScenario(investment=50000, expected_revenue_increase=0),
        InvestmentScenario(name="Headliner", investment=100000, expected_revenue_increase=110000, risk_level="high"),
        InvestmentScenario(name="Premium stage", investment=100000, expected_revenue_increase=150000, risk_level="low"),
    ]

    analysis = analyze_investment_scenarios(scenarios)

    assert [a.scenario_name for a in analysis] == ["Premium stage", "Headliner", "Scenario 1"]
    assert [a.recommendation for a in analysis] == ["proceed", "consider", "avoid"]
    assert analysis[0].expected_roi == pytest.approx(50.0)
    assert analysis[0].payback_period == pytest.approx(0.67)
    assert analysis[2].payback_period is None


@pytest.mark.parametrize(
    "roi, category",
    [(-0.01, "negative"), (0, "low"), (9.99, "low"), (10, "moderate"), (25, "strong")],
)
def test_categorize_roi(roi, category):
    assert categorize_roi(roi) == category


# ===========================================
# Benchmarking
# ===========================================


@pytest.fixture
def peers():
    return [
        PeerEvent(event_id="a", capacity=2000, attendance=1000, start_date=date(2024, 5, 4), category="Music", region="North"),
        PeerEvent(event_id="b", capacity=2500, attendance=2000, start_date=date(2024, 6, 8), category="music", region="South"),
        PeerEvent(event_id="c", capacity=10000, attendance=9000, start_date=date(2024, 4, 20), category="food", region="north"),
        PeerEvent(event_id="d", attendance=500, start_date=date(2024, 5, 18), category="music", region="north"),
    ]


def test_benchmark_with_actual_attendance(mocker, make_event, peers, as_of):
    """
    Attendance rate 0.75 against peers at 0.5 and 0.8 (size and category)
    or 0.5 and 0.9 (region and season). Peer d has no capacity.
    """
    # 1. Arrange
    forecaster = mocker.Mock()
    orchestrator = PlanningOrchestrator(forecaster=forecaster)
    event = make_event(category="music", region="north")
    request = BenchmarkRequest(event=event, peers=peers, actual_attendance=1500, as_of=as_of)

    # 2. Act
    result = orchestrator.benchmark_performance(request)

    # 3. Assert
    assert isinstance(result, BenchmarkResult)
    assert result.attendance_source == "actual"
    forecaster.assert_not_called()

    size = result.benchmarking_results[BenchmarkCriterion.SIMILAR_SIZE_EVENTS]
    assert size.peer_count == 2
    assert size.event_attendance_rate == 0.75
    assert size.peer_average == pytest.approx(0.65)
    assert size.peer_median == pytest.approx(0.65)
    assert size.percentile == 50.0
    assert size.performance == "above_average"

    regional = result.benchmarking_results[BenchmarkCriterion.REGIONAL_EVENTS]
    assert regional.peer_average == pytest.approx(0.7)
    assert regional.performance == "above_average"

    assert result.overall_ranking.average_percentile == 50.0
    assert result.overall_ranking.tier == "above_median"
    assert result.competitive_position == "challenger"
    assert result.performance_gaps == []


def test_underperforming_event_gets_gaps(orchestrator, make_event, peers, as_of):
    event = make_event(category="music", region="north")

    result = orchestrator.benchmark_performance(
        BenchmarkRequest(event=event, peers=peers, actual_attendance=800, as_of=as_of)
    )

    assert result.overall_ranking.tier == "bottom_quartile"
    assert result.competitive_position == "laggard"
    assert len(result.performance_gaps) == 4
    size_gap = result.performance_gaps[0]
    assert size_gap.criterion == BenchmarkCriterion.SIMILAR_SIZE_EVENTS
    assert size_gap.gap == pytest.approx(0.25)
    assert size_gap.gap_percentage == pytest.approx(38.5)
    assert all(r.priority == "high" for r in result.improvement_recommendations)


def test_benchmark_without_matching_peers_uses_forecast(orchestrator, make_event, peers, as_of):
    result = orchestrator.benchmark_performance(
        BenchmarkRequest(
            event=make_event(ticket_price=0),
            peers=peers,
            criteria=[BenchmarkCriterion.REGIONAL_EVENTS],
            as_of=as_of,
        )
    )

    assert result.attendance_source == "forecast"
    regional = result.benchmarking_results[BenchmarkCriterion.REGIONAL_EVENTS]
    assert regional.comparison == "no_peer_data"
    assert regional.event_attendance_rate == pytest.approx(1.08)
    assert result.overall_ranking.tier == "unranked"
    assert result.competitive_position == "unknown"


# ===========================================
# Dashboard
# ===========================================


def test_dashboard_with_every_section(orchestrator, make_event, vendors, as_of):
    event = make_event(ticket_price=0, budget=1000000, outdoor=True)

    result = orchestrator.generate_dashboard(DashboardRequest(event=event, vendors=vendors, as_of=as_of))

    assert isinstance(result, DashboardResult)
    assert result.event_id == "evt_1"
    assert result.as_of == as_of
    assert result.attendance_forecast.predicted_attendance == 2160
    assert result.revenue_projections.predicted_attendance == 2160
    assert isinstance(result.budget_allocation, AllocationResult)
    assert result.budget_allocation.total_budget == 1000000
    assert isinstance(result.layout, LayoutResult)
    assert len(result.layout.layout.vendor_positions) == 4
    assert result.section_errors == {}

    indicators = result.risk_indicators
    assert indicators.cash_flow_risk.risk_level == "low"
    assert indicators.revenue_concentration_risk.primary_source == "diversified"

    insights = result.summary_insights
    assert [i.type for i in insights.insights] == ["capacity_warning", "profit_concern"]
    assert insights.total_insights == 2
    assert len(insights.high_priority_insights) == 2


def test_dashboard_skips_sections_without_inputs(orchestrator, free_event, as_of):
    result = orchestrator.generate_dashboard(DashboardRequest(event=free_event, as_of=as_of))

    assert result.budget_allocation is None
    assert result.layout is None
    assert result.section_errors == {}


def test_dashboard_reports_failed_sections(mocker, make_event, as_of):
    budget_allocator = mocker.Mock(
        side_effect=ValidationFailure("Budget allocation", ["Contingency allocation too low (0.0%)"])
    )
    orchestrator = PlanningOrchestrator(budget_allocator=budget_allocator)
    event = make_event(ticket_price=0, budget=50000)
    request = DashboardRequest(
        event=event,
        venue=VenueSpace(capacity=10),
        vendors=[Vendor(id="v1", business_type="food"), Vendor(id="v2", business_type="music")],
        as_of=as_of,
    )

    result = orchestrator.generate_dashboard(request)

    assert isinstance(result, DashboardResult)
    assert result.budget_allocation is None
    assert result.layout is None
    assert result.section_errors["budget_allocation"].error_code == "VALIDATION_FAILED"
    assert result.section_errors["layout"].details["violations"] == [
        "Vendors v1 and v2 too close: 2.74m < 3.0m"
    ]
    assert result.revenue_projections.predicted_attendance == 2160


@pytest.mark.parametrize(
    "start, level",
    [(date(2025, 2, 1), "high"), (date(2025, 3, 20), "medium"), (date(2025, 4, 15), "low")],
)
def test_cash_flow_risk_uses_days_until_event(make_event, as_of, start, level):
    event = make_event(start_date=start, end_date=start)
    assert assess_cash_flow_risk(event, as_of).risk_level == level


@pytest.mark.parametrize(
    "ticket_price, level, source",
    [
        (2500, "medium", "ticket_sales"),
        (0, "low", "diversified"),
        (None, "low", "diversified"),
    ],
)
def test_revenue_concentration_follows_largest_source(make_event, ticket_price, level, source):
    risk = assess_revenue_concentration_risk(make_event(ticket_price=ticket_price))

    assert risk.risk_level == level
    assert risk.primary_source == source


def test_high_risk_insight(make_event, as_of):
    event = make_event(
        start_date=date(2025, 12, 5),
        end_date=date(2025, 12, 10),
        outdoor=True,
        expected_attendance=12000,
        is_public=True,
        media_attention="high",
        activities=["alcohol"],
        budget=2000000,
        revenue_sources=["ticket_sales"],
        venue_count=2,
        vendor_count=60,
    )
    orchestrator = PlanningOrchestrator(budget_allocator=lambda request: None)

    result = orchestrator.generate_dashboard(DashboardRequest(event=event, as_of=as_of))

    assert "high_risk" in [i.type for i in result.summary_insights.insights]


def test_dashboard_is_idempotent(orchestrator, make_event, vendors, as_of):
    request = DashboardRequest(event=make_event(budget=500000, outdoor=True), vendors=vendors, as_of=as_of)
    assert orchestrator.generate_dashboard(request) == orchestrator.generate_dashboard(request)
