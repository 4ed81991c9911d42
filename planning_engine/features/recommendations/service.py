# planning_engine/features/recommendations/service.py
"""
Composite planning recommendations.

``PlanningOrchestrator`` runs the individual engines for one event and turns
their outputs into revenue projections, ROI guidance, peer benchmarks and a
combined dashboard. The engines are injected so callers (and tests) can
substitute them; by default the module-level builders are used.
"""

import logging
import math
from datetime import date
from typing import Callable, Dict, List, Optional, Tuple, Union

import numpy as np

from planning_engine.core.config import settings
from planning_engine.core.exceptions import PlanningEngineError, structured_errors
from planning_engine.features.budget.schemas import AllocationResult, BudgetAllocationRequest
from planning_engine.features.budget.service import build_budget_allocation
from planning_engine.features.forecasting.schemas import AttendanceForecastRequest, ForecastResult
from planning_engine.features.forecasting.service import build_forecast
from planning_engine.features.layout.schemas import (
    LayoutOptimizationRequest,
    LayoutResult,
    VenueSpace,
)
from planning_engine.features.layout.service import build_layout
from planning_engine.features.risk.schemas import RiskAssessmentRequest, RiskResult
from planning_engine.features.risk.service import build_risk_assessment
from planning_engine.schemas.common import ErrorResponse, EventProfile
from planning_engine.utils.rounding import round_half_up
from planning_engine.utils.validators import resolve_as_of, validate_event_profile

from .schemas import (
    BenchmarkComparison,
    BenchmarkCriterion,
    BenchmarkRecommendation,
    BenchmarkRequest,
    BenchmarkResult,
    BreakEvenAnalysis,
    CashFlowRisk,
    CostEstimate,
    CurrentRoi,
    DashboardRequest,
    DashboardResult,
    HistoricalRoiAnalysis,
    ImprovementProjection,
    Insight,
    InvestmentScenario,
    MerchandiseRevenue,
    OverallRanking,
    PeerEvent,
    PerformanceGap,
    PeriodRoi,
    PlanningContext,
    ProfitabilityMetrics,
    ProfitProjection,
    RevenueConcentrationRisk,
    RevenueProjection,
    RevenueProjectionRequest,
    RevenueScenario,
    RevenueStreams,
    RiskAdjustedProjection,
    RiskIndicators,
    RoiOptimizationRequest,
    RoiOptimizationResult,
    RoiRecommendation,
    RoiRecord,
    ScenarioAnalysis,
    SponsorshipRevenue,
    SummaryInsights,
    TicketRevenue,
    VendorRevenue,
)

logger = logging.getLogger(__name__)

# Revenue model
AVERAGE_VENDOR_FEE = 50000
AVERAGE_VENDOR_SALES = 200000
VENDOR_COMMISSION_RATE = 0.05
VENDOR_MIX = {"food_vendors": 0.5, "retail_vendors": 0.3, "service_vendors": 0.2}
MERCHANDISE_PURCHASE_RATE = 0.3
AVERAGE_MERCHANDISE_PURCHASE = 2500
MERCHANDISE_MIX = {"apparel": 0.4, "accessories": 0.3, "food_items": 0.2, "souvenirs": 0.1}
# Typical share of revenue per source; free events have no ticket share
REVENUE_DEPENDENCY = {"ticket_sales": 0.6, "vendor_fees": 0.3, "sponsorship": 0.1}
TICKET_SCENARIOS = {"conservative": 0.8, "expected": 1.0, "optimistic": 1.2}
MAX_RISK_DISCOUNT = 0.3

# (attendance multiplier, revenue multiplier, probability, description)
REVENUE_SCENARIOS = {
    "pessimistic": (0.7, 0.6, 0.2, "Poor weather, low marketing reach, strong competition"),
    "realistic": (1.0, 1.0, 0.6, "Expected conditions based on current planning"),
    "optimistic": (1.3, 1.4, 0.2, "Excellent weather, viral marketing, unique attractions"),
}

# Per unit of venue capacity, per day where marked
COST_RATES = {
    "venue_costs": 500,  # per day
    "security_safety": 200,
    "marketing": 150,
    "infrastructure": 300,
    "staff_costs": 100,  # per day
    "contingency": 50,
}
PER_DAY_COSTS = ("venue_costs", "staff_costs")
PERMITS_AND_INSURANCE = 100000
VARIABLE_COSTS = ("security_safety", "staff_costs", "infrastructure")
FIXED_COSTS = ("venue_costs", "permits_insurance")

PRIORITY_RANK = {"high": 0, "medium": 1, "low": 2}

SEASONS = {
    12: "winter", 1: "winter", 2: "winter",
    3: "spring", 4: "spring", 5: "spring",
    6: "summer", 7: "summer", 8: "summer",
    9: "fall", 10: "fall", 11: "fall",
}

BENCHMARK_ADVICE = {
    BenchmarkCriterion.SIMILAR_SIZE_EVENTS: "events of similar size; review pricing and marketing reach",
    BenchmarkCriterion.SAME_CATEGORY_EVENTS: "events in the same category; differentiate the programme",
    BenchmarkCriterion.REGIONAL_EVENTS: "regional events; strengthen local partnerships and promotion",
    BenchmarkCriterion.SEASONAL_EVENTS: "events held in the same season; revisit scheduling and seasonal offers",
}


def _capacity(event: EventProfile) -> int:
    return event.capacity if event.capacity is not None else settings.DEFAULT_VENUE_CAPACITY


def _ratio(numerator: float, denominator: float, fallback: float = 0.0) -> float:
    return numerator / denominator if denominator else fallback


# ===========================================
# Revenue and cost model
# ===========================================


def calculate_ticket_revenue(event: EventProfile, attendance: int) -> TicketRevenue:
    price = float(event.ticket_price or 0)
    return TicketRevenue(
        base_ticket_price=price,
        projected_attendance=attendance,
        revenue_scenarios={
            name: round(attendance * multiplier * price, 2)
            for name, multiplier in TICKET_SCENARIOS.items()
        },
    )


def calculate_vendor_revenue(event: EventProfile) -> VendorRevenue:
    vendor_count = event.vendor_count
    base = vendor_count * AVERAGE_VENDOR_FEE
    commission = vendor_count * AVERAGE_VENDOR_SALES * VENDOR_COMMISSION_RATE
    return VendorRevenue(
        total_vendors=vendor_count,
        vendor_breakdown={name: round_half_up(vendor_count * share) for name, share in VENDOR_MIX.items()},
        base_vendor_revenue=base,
        commission_revenue=commission,
        total_vendor_revenue=round(base + commission, 2),
    )


def calculate_sponsorship_revenue(event: EventProfile) -> SponsorshipRevenue:
    capacity = _capacity(event)
    if capacity > 5000:
        tiers = {"title_sponsor": 500000, "major_sponsors": 200000, "supporting_sponsors": 50000}
        counts = {"title_sponsor": 1, "major_sponsors": 3, "supporting_sponsors": 10}
    elif capacity > 2000:
        tiers = {"title_sponsor": 200000, "major_sponsors": 100000, "supporting_sponsors": 25000}
        counts = {"title_sponsor": 1, "major_sponsors": 2, "supporting_sponsors": 5}
    else:
        tiers = {"title_sponsor": 50000, "major_sponsors": 25000, "supporting_sponsors": 10000}
        counts = {"title_sponsor": 1, "major_sponsors": 2, "supporting_sponsors": 5}

    return SponsorshipRevenue(
        sponsorship_tiers=tiers,
        expected_sponsors=counts,
        total_sponsorship_revenue=sum(tiers[tier] * counts[tier] for tier in tiers),
    )


def calculate_merchandise_revenue(attendance: int) -> MerchandiseRevenue:
    revenue = attendance * MERCHANDISE_PURCHASE_RATE * AVERAGE_MERCHANDISE_PURCHASE
    return MerchandiseRevenue(
        estimated_buyers=round_half_up(attendance * MERCHANDISE_PURCHASE_RATE),
        average_purchase=AVERAGE_MERCHANDISE_PURCHASE,
        total_merchandise_revenue=round(revenue, 2),
        merchandise_mix={name: round(revenue * share, 2) for name, share in MERCHANDISE_MIX.items()},
    )


def calculate_total_costs(event: EventProfile) -> CostEstimate:
    capacity = _capacity(event)
    duration = event.duration_days

    breakdown = {}
    for name, rate in COST_RATES.items():
        breakdown[name] = capacity * rate * (duration if name in PER_DAY_COSTS else 1)
    breakdown["permits_insurance"] = PERMITS_AND_INSURANCE

    total = sum(breakdown.values())
    return CostEstimate(
        cost_breakdown=breakdown,
        total_estimated_costs=total,
        cost_per_attendee=round(_ratio(total, capacity), 2),
        variable_costs=sum(breakdown[name] for name in VARIABLE_COSTS),
        fixed_costs=sum(breakdown[name] for name in FIXED_COSTS),
    )


def calculate_break_even(total_costs: float, ticket: TicketRevenue) -> BreakEvenAnalysis:
    if ticket.base_ticket_price == 0:
        return BreakEvenAnalysis(message="Cannot calculate - free event")

    attendance = math.ceil(total_costs / ticket.base_ticket_price)
    return BreakEvenAnalysis(
        break_even_attendance=attendance,
        break_even_revenue=round(attendance * ticket.base_ticket_price, 2),
        margin_of_safety=ticket.projected_attendance - attendance,
    )


def calculate_profit_projection(streams: RevenueStreams, costs: CostEstimate) -> ProfitProjection:
    total_revenue = total_stream_revenue(streams)
    total_costs = costs.total_estimated_costs
    profit = total_revenue - total_costs
    return ProfitProjection(
        total_revenue=total_revenue,
        total_costs=total_costs,
        expected_profit=profit,
        profit_margin=round(_ratio(profit, total_revenue) * 100, 2),
        break_even_point=calculate_break_even(total_costs, streams.ticket_revenue),
    )


def total_stream_revenue(streams: RevenueStreams) -> float:
    return round(
        streams.ticket_revenue.revenue_scenarios["expected"]
        + streams.vendor_revenue.total_vendor_revenue
        + streams.sponsorship_revenue.total_sponsorship_revenue
        + streams.merchandise_revenue.total_merchandise_revenue,
        2,
    )


def apply_risk_adjustment(profit: ProfitProjection, overall_risk: float) -> RiskAdjustedProjection:
    # Up to 30% discount for the riskiest events
    factor = 1.0 - overall_risk * MAX_RISK_DISCOUNT
    adjusted_profit = profit.expected_profit * factor
    return RiskAdjustedProjection(
        overall_risk_score=overall_risk,
        risk_adjustment_factor=round(factor, 3),
        adjusted_profit=round(adjusted_profit, 2),
        adjusted_revenue=round(profit.total_revenue * factor, 2),
        risk_impact=round(profit.expected_profit - adjusted_profit, 2),
    )


def generate_revenue_scenarios(attendance: int, total_revenue: float) -> Dict[str, RevenueScenario]:
    return {
        name: RevenueScenario(
            attendance=round_half_up(attendance * attendance_multiplier),
            revenue=round(total_revenue * revenue_multiplier, 2),
            description=description,
            probability=probability,
        )
        for name, (attendance_multiplier, revenue_multiplier, probability, description) in REVENUE_SCENARIOS.items()
    }


# ===========================================
# ROI
# ===========================================


def categorize_roi(roi_percentage: float) -> str:
    if roi_percentage < 0:
        return "negative"
    if roi_percentage < 10:
        return "low"
    if roi_percentage < 25:
        return "moderate"
    return "strong"


def calculate_current_roi(total_revenue: float, total_investment: float) -> CurrentRoi:
    net_profit = total_revenue - total_investment
    roi_percentage = round(_ratio(net_profit, total_investment) * 100, 2)
    return CurrentRoi(
        total_revenue=total_revenue,
        total_investment=total_investment,
        net_profit=round(net_profit, 2),
        roi_percentage=roi_percentage,
        roi_category=categorize_roi(roi_percentage),
        profitability_metrics=ProfitabilityMetrics(
            profit_margin=round(_ratio(net_profit, total_revenue), 4),
            revenue_multiple=round(_ratio(total_revenue, total_investment), 4),
            break_even_ratio=round(_ratio(total_investment, total_revenue), 4),
        ),
    )


def analyze_historical_roi(records: List[RoiRecord]) -> HistoricalRoiAnalysis:
    if not records:
        return HistoricalRoiAnalysis(comparison="no_historical_data")

    values = np.array([record.roi_percentage for record in records], dtype=float)
    volatility = float(np.std(values))
    change = values[-1] - values[0]

    best = max(records, key=lambda r: r.roi_percentage)
    worst = min(records, key=lambda r: r.roi_percentage)

    by_season: Dict[str, List[float]] = {}
    for record in records:
        if record.season:
            by_season.setdefault(record.season, []).append(record.roi_percentage)

    return HistoricalRoiAnalysis(
        comparison="available",
        historical_periods=len(records),
        average_roi=round(float(np.mean(values)), 2),
        roi_trend="improving" if change > 2 else ("declining" if change < -2 else "stable"),
        roi_volatility="low" if volatility < 5 else ("medium" if volatility < 15 else "high"),
        best_performing_period=PeriodRoi(period=best.period, roi=best.roi_percentage),
        worst_performing_period=PeriodRoi(period=worst.period, roi=worst.roi_percentage),
        seasonal_patterns={
            season: round(float(np.mean(rois)), 2) for season, rois in by_season.items()
        },
    )


def analyze_investment_scenarios(scenarios: List[InvestmentScenario]) -> List[ScenarioAnalysis]:
    results = []
    for index, scenario in enumerate(scenarios):
        investment = float(scenario.investment)
        increase = float(scenario.expected_revenue_increase)
        expected_roi = round((increase - investment) / investment * 100, 2)

        if expected_roi > 20 and scenario.risk_level != "high":
            recommendation = "proceed"
        elif expected_roi > 0:
            recommendation = "consider"
        else:
            recommendation = "avoid"

        results.append(
            ScenarioAnalysis(
                scenario_id=index + 1,
                scenario_name=scenario.name or f"Scenario {index + 1}",
                investment_amount=investment,
                expected_roi=expected_roi,
                risk_level=scenario.risk_level,
                payback_period=round(investment / increase, 2) if increase > 0 else None,
                recommendation=recommendation,
            )
        )

    return sorted(results, key=lambda s: -s.expected_roi)


def generate_roi_recommendations(
    current: CurrentRoi, streams: RevenueStreams, history: HistoricalRoiAnalysis
) -> List[RoiRecommendation]:
    recommendations = []
    total_revenue = total_stream_revenue(streams)
    ticket_share = _ratio(streams.ticket_revenue.revenue_scenarios["expected"], total_revenue)
    sponsorship_share = _ratio(streams.sponsorship_revenue.total_sponsorship_revenue, total_revenue)

    if current.roi_percentage < 10:
        recommendations.append(
            RoiRecommendation(
                type="cost_reduction",
                priority="high",
                description="Return is below 10% - renegotiate venue and staffing costs",
                estimated_roi_gain=5.0,
            )
        )

    if history.average_roi is not None and current.roi_percentage < history.average_roi:
        recommendations.append(
            RoiRecommendation(
                type="historical_gap",
                priority="high",
                description=f"Projected ROI is below the historical average of {history.average_roi}%",
                estimated_roi_gain=round(history.average_roi - current.roi_percentage, 2),
            )
        )

    if ticket_share > 0.6:
        recommendations.append(
            RoiRecommendation(
                type="revenue_diversification",
                priority="medium",
                description="Ticket sales dominate revenue - grow vendor and sponsorship income",
                estimated_roi_gain=3.0,
            )
        )

    if sponsorship_share < 0.15:
        recommendations.append(
            RoiRecommendation(
                type="sponsorship_growth",
                priority="medium",
                description="Sponsorship is under 15% of revenue - pursue additional sponsors",
                estimated_roi_gain=2.5,
            )
        )

    if streams.vendor_revenue.total_vendors < 10:
        recommendations.append(
            RoiRecommendation(
                type="vendor_expansion",
                priority="low",
                description="Few vendors are booked - vendor fees and commission are untapped",
                estimated_roi_gain=1.5,
            )
        )

    return recommendations


# ===========================================
# Benchmarking
# ===========================================


def attendance_rate(attendance: int, capacity: Optional[int]) -> Optional[float]:
    if not capacity:
        return None
    return attendance / capacity


def matches_criterion(event: EventProfile, peer: PeerEvent, criterion: BenchmarkCriterion) -> bool:
    if criterion == BenchmarkCriterion.SIMILAR_SIZE_EVENTS:
        ratio = _ratio(peer.capacity or 0, _capacity(event))
        return 0.5 <= ratio <= 1.5
    if criterion == BenchmarkCriterion.SAME_CATEGORY_EVENTS:
        return bool(event.category and peer.category) and event.category.lower() == peer.category.lower()
    if criterion == BenchmarkCriterion.REGIONAL_EVENTS:
        return bool(event.region and peer.region) and event.region.lower() == peer.region.lower()
    return SEASONS[event.start_date.month] == SEASONS[peer.start_date.month]


def compare_with_peers(
    event: EventProfile,
    own_rate: float,
    peers: List[PeerEvent],
    criterion: BenchmarkCriterion,
) -> BenchmarkComparison:
    rates = []
    for peer in peers:
        rate = attendance_rate(peer.attendance, peer.capacity)
        # Peers without a known capacity have no comparable rate
        if rate is not None and matches_criterion(event, peer, criterion):
            rates.append(rate)

    if not rates:
        return BenchmarkComparison(
            criterion=criterion,
            comparison="no_peer_data",
            event_attendance_rate=round(own_rate, 4),
        )

    values = np.array(rates, dtype=float)
    average = float(np.mean(values))
    if own_rate > average * 1.05:
        performance = "above_average"
    elif own_rate < average * 0.95:
        performance = "below_average"
    else:
        performance = "average"

    return BenchmarkComparison(
        criterion=criterion,
        comparison="available",
        peer_count=len(rates),
        event_attendance_rate=round(own_rate, 4),
        peer_average=round(average, 4),
        peer_median=round(float(np.median(values)), 4),
        percentile=round(float(np.mean(values <= own_rate)) * 100, 1),
        performance=performance,
    )


def calculate_overall_ranking(results: Dict[BenchmarkCriterion, BenchmarkComparison]) -> OverallRanking:
    percentiles = [r.percentile for r in results.values() if r.percentile is not None]
    if not percentiles:
        return OverallRanking(tier="unranked")

    average = round(float(np.mean(percentiles)), 1)
    if average >= 75:
        tier = "top_quartile"
    elif average >= 50:
        tier = "above_median"
    elif average >= 25:
        tier = "below_median"
    else:
        tier = "bottom_quartile"
    return OverallRanking(average_percentile=average, tier=tier)


COMPETITIVE_POSITIONS = {
    "top_quartile": "leader",
    "above_median": "challenger",
    "below_median": "follower",
    "bottom_quartile": "laggard",
    "unranked": "unknown",
}


def identify_performance_gaps(results: Dict[BenchmarkCriterion, BenchmarkComparison]) -> List[PerformanceGap]:
    gaps = []
    for criterion, result in results.items():
        if result.performance != "below_average":
            continue
        gap = result.peer_average - result.event_attendance_rate
        gaps.append(
            PerformanceGap(
                criterion=criterion,
                gap=round(gap, 4),
                gap_percentage=round(gap / result.peer_average * 100, 1),
            )
        )
    return gaps


def generate_benchmark_improvements(gaps: List[PerformanceGap]) -> List[BenchmarkRecommendation]:
    return [
        BenchmarkRecommendation(
            criterion=gap.criterion,
            priority="high" if gap.gap_percentage > 20 else "medium",
            message=f"Attendance rate trails {BENCHMARK_ADVICE[gap.criterion]}",
        )
        for gap in gaps
    ]


# ===========================================
# Dashboard helpers
# ===========================================


def assess_cash_flow_risk(event: EventProfile, as_of: date) -> CashFlowRisk:
    days_to_event = (event.start_date - as_of).days
    if days_to_event < 30:
        return CashFlowRisk(risk_level="high", reason="Short time frame for revenue collection")
    if days_to_event < 90:
        return CashFlowRisk(risk_level="medium", reason="Moderate time frame for revenue collection")
    return CashFlowRisk(risk_level="low", reason="Adequate time frame for revenue collection")


def assess_revenue_concentration_risk(event: EventProfile) -> RevenueConcentrationRisk:
    ticketed = bool(event.ticket_price and event.ticket_price > 0)
    shares = {
        source: share
        for source, share in REVENUE_DEPENDENCY.items()
        if ticketed or source != "ticket_sales"
    }
    primary_source = max(shares, key=shares.get)
    max_dependency = shares[primary_source]

    if max_dependency > 0.7:
        return RevenueConcentrationRisk(risk_level="high", primary_source=primary_source)
    if max_dependency > 0.5:
        return RevenueConcentrationRisk(risk_level="medium", primary_source=primary_source)
    return RevenueConcentrationRisk(risk_level="low", primary_source="diversified")


def generate_summary_insights(
    event: EventProfile,
    forecast: ForecastResult,
    revenue: RevenueProjection,
    risk: RiskResult,
) -> SummaryInsights:
    insights = []

    if forecast.predicted_attendance > _capacity(event) * 0.9:
        insights.append(
            Insight(
                type="capacity_warning",
                priority="high",
                message="Predicted attendance near venue capacity - consider crowd management measures",
                impact="safety_revenue",
            )
        )

    profit_margin = _ratio(revenue.profit_projections.expected_profit, revenue.total_projected_revenue)
    if profit_margin < 0.1:
        insights.append(
            Insight(
                type="profit_concern",
                priority="high",
                message="Low profit margin projected - review cost structure and pricing",
                impact="financial",
            )
        )

    if risk.overall_risk_score > 0.7:
        insights.append(
            Insight(
                type="high_risk",
                priority="high",
                message="High overall risk detected - implement comprehensive mitigation strategies",
                impact="operational_financial",
            )
        )

    return SummaryInsights(
        total_insights=len(insights),
        high_priority_insights=[i for i in insights if i.priority == "high"],
        insights=insights,
    )


# ===========================================
# Orchestrator
# ===========================================


class PlanningOrchestrator:
    """
    Stateless composition of the planning engines.

    Each engine is a callable taking its request model and returning its
    result model, raising ``PlanningEngineError`` subclasses on failure.
    """

    def __init__(
        self,
        forecaster: Callable[[AttendanceForecastRequest], ForecastResult] = build_forecast,
        risk_assessor: Callable[[RiskAssessmentRequest], RiskResult] = build_risk_assessment,
        budget_allocator: Callable[[BudgetAllocationRequest], AllocationResult] = build_budget_allocation,
        layout_optimizer: Callable[[LayoutOptimizationRequest], LayoutResult] = build_layout,
    ):
        self.forecaster = forecaster
        self.risk_assessor = risk_assessor
        self.budget_allocator = budget_allocator
        self.layout_optimizer = layout_optimizer

    def _forecast(self, context: PlanningContext, as_of: date) -> ForecastResult:
        return self.forecaster(
            AttendanceForecastRequest(
                event=context.event,
                historical_samples=context.historical_samples,
                weather=context.weather,
                competing_events=context.competing_events,
                as_of=as_of,
            )
        )

    def _assess_risk(self, event: EventProfile, as_of: date) -> RiskResult:
        return self.risk_assessor(RiskAssessmentRequest(event=event, as_of=as_of))

    def _project(
        self, context: PlanningContext
    ) -> Tuple[EventProfile, date, ForecastResult, RiskResult, RevenueProjection]:
        event = validate_event_profile(context.event)
        as_of = resolve_as_of(context.as_of)

        # Revenue depends on the forecast, so it always runs first
        forecast = self._forecast(context, as_of)
        risk = self._assess_risk(event, as_of)
        attendance = forecast.predicted_attendance

        streams = RevenueStreams(
            ticket_revenue=calculate_ticket_revenue(event, attendance),
            vendor_revenue=calculate_vendor_revenue(event),
            sponsorship_revenue=calculate_sponsorship_revenue(event),
            merchandise_revenue=calculate_merchandise_revenue(attendance),
        )
        costs = calculate_total_costs(event)
        profit = calculate_profit_projection(streams, costs)
        total_revenue = total_stream_revenue(streams)

        projection = RevenueProjection(
            predicted_attendance=attendance,
            revenue_streams=streams,
            total_projected_revenue=total_revenue,
            total_costs=costs,
            profit_projections=profit,
            risk_adjusted_projections=apply_risk_adjustment(profit, risk.overall_risk_score),
            scenario_analysis=generate_revenue_scenarios(attendance, total_revenue),
        )
        return event, as_of, forecast, risk, projection

    @structured_errors("Revenue projection")
    def project_revenue(
        self, request: RevenueProjectionRequest
    ) -> Union[RevenueProjection, ErrorResponse]:
        """Revenue streams, costs and profit, discounted by overall risk."""
        event, _, _, _, projection = self._project(request)
        logger.info(
            f"Revenue projection for event {event.event_id}: "
            f"{projection.total_projected_revenue} revenue, "
            f"{projection.profit_projections.expected_profit} profit"
        )
        return projection

    @structured_errors("ROI optimization")
    def optimize_roi(
        self, request: RoiOptimizationRequest
    ) -> Union[RoiOptimizationResult, ErrorResponse]:
        event, _, _, _, projection = self._project(request)

        total_investment = (
            float(event.budget)
            if event.budget
            else projection.total_costs.total_estimated_costs
        )
        current = calculate_current_roi(projection.total_projected_revenue, total_investment)
        history = analyze_historical_roi(request.roi_history)
        recommendations = generate_roi_recommendations(current, projection.revenue_streams, history)

        total_gain = round(sum(r.estimated_roi_gain for r in recommendations), 2)
        logger.info(f"ROI for event {event.event_id}: {current.roi_percentage}% ({current.roi_category})")

        return RoiOptimizationResult(
            current_roi=current,
            historical_analysis=history,
            scenario_analysis=analyze_investment_scenarios(request.investment_scenarios),
            optimization_recommendations=recommendations,
            improvement_projections=ImprovementProjection(
                current_roi=current.roi_percentage,
                projected_roi=round(current.roi_percentage + total_gain, 2),
                total_estimated_gain=total_gain,
            ),
            implementation_priority=[
                r.type for r in sorted(recommendations, key=lambda r: PRIORITY_RANK[r.priority])
            ],
        )

    @structured_errors("Performance benchmarking")
    def benchmark_performance(
        self, request: BenchmarkRequest
    ) -> Union[BenchmarkResult, ErrorResponse]:
        event = validate_event_profile(request.event)
        as_of = resolve_as_of(request.as_of)

        if request.actual_attendance is not None:
            attendance, source = request.actual_attendance, "actual"
        else:
            attendance, source = self._forecast(request, as_of).predicted_attendance, "forecast"

        own_rate = attendance_rate(attendance, _capacity(event)) or 0.0
        results = {
            criterion: compare_with_peers(event, own_rate, request.peers, criterion)
            for criterion in request.criteria
        }
        ranking = calculate_overall_ranking(results)
        gaps = identify_performance_gaps(results)

        logger.info(
            f"Benchmarked event {event.event_id} against {len(request.peers)} peers: {ranking.tier}"
        )

        return BenchmarkResult(
            attendance_source=source,
            benchmarking_results=results,
            overall_ranking=ranking,
            competitive_position=COMPETITIVE_POSITIONS[ranking.tier],
            performance_gaps=gaps,
            improvement_recommendations=generate_benchmark_improvements(gaps),
        )

    @structured_errors("Dashboard generation")
    def generate_dashboard(
        self, request: DashboardRequest
    ) -> Union[DashboardResult, ErrorResponse]:
        """
        Forecast, revenue, risk indicators and summary insights for one event.
        Budget and layout sections are added when the event has a budget or
        vendors were supplied; a failure there is reported per section.
        """
        event, as_of, forecast, risk, projection = self._project(request)
        section_errors = {}

        budget = None
        if event.budget:
            try:
                budget = self.budget_allocator(
                    BudgetAllocationRequest(event=event, total_budget=event.budget, as_of=as_of)
                )
            except PlanningEngineError as e:
                logger.warning(f"Dashboard budget section failed: {e.message}")
                section_errors["budget_allocation"] = ErrorResponse(
                    error=e.message, error_code=e.error_code, details=e.details
                )

        layout = None
        if request.vendors:
            venue = request.venue or VenueSpace(capacity=event.capacity, outdoor=event.outdoor)
            try:
                layout = self.layout_optimizer(
                    LayoutOptimizationRequest(venue=venue, vendors=request.vendors)
                )
            except PlanningEngineError as e:
                logger.warning(f"Dashboard layout section failed: {e.message}")
                section_errors["layout"] = ErrorResponse(
                    error=e.message, error_code=e.error_code, details=e.details
                )

        return DashboardResult(
            event_id=event.event_id,
            as_of=as_of,
            attendance_forecast=forecast,
            revenue_projections=projection,
            risk_indicators=RiskIndicators(
                overall_risk_assessment=risk,
                cash_flow_risk=assess_cash_flow_risk(event, as_of),
                revenue_concentration_risk=assess_revenue_concentration_risk(event),
            ),
            budget_allocation=budget,
            layout=layout,
            section_errors=section_errors,
            summary_insights=generate_summary_insights(event, forecast, projection, risk),
        )
