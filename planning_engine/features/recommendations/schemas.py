# planning_engine/features/recommendations/schemas.py
"""
Pydantic schemas for the composite planning recommendations.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from planning_engine.features.budget.schemas import AllocationResult
from planning_engine.features.forecasting.schemas import ForecastResult
from planning_engine.features.layout.schemas import LayoutResult, Vendor, VenueSpace
from planning_engine.features.risk.schemas import RiskResult
from planning_engine.schemas.common import (
    CompetingEvent,
    ErrorResponse,
    EventProfile,
    HistoricalEventSample,
    WeatherSnapshot,
)

Level = Literal["low", "medium", "high"]


class PlanningContext(BaseModel):
    """Everything the forecaster needs, shared by the composite requests."""

    event: Optional[EventProfile] = None
    historical_samples: List[HistoricalEventSample] = []
    weather: Optional[WeatherSnapshot] = None
    competing_events: List[CompetingEvent] = []
    as_of: Optional[date] = Field(None, description="Defaults to today")


# ===========================================
# Revenue projection
# ===========================================


class RevenueProjectionRequest(PlanningContext):
    pass


class TicketRevenue(BaseModel):
    base_ticket_price: float
    projected_attendance: int
    # conservative / expected / optimistic
    revenue_scenarios: Dict[str, float]


class VendorRevenue(BaseModel):
    total_vendors: int
    vendor_breakdown: Dict[str, int]
    base_vendor_revenue: float
    commission_revenue: float
    total_vendor_revenue: float


class SponsorshipRevenue(BaseModel):
    sponsorship_tiers: Dict[str, float]
    expected_sponsors: Dict[str, int]
    total_sponsorship_revenue: float


class MerchandiseRevenue(BaseModel):
    estimated_buyers: int
    average_purchase: float
    total_merchandise_revenue: float
    merchandise_mix: Dict[str, float]


class RevenueStreams(BaseModel):
    ticket_revenue: TicketRevenue
    vendor_revenue: VendorRevenue
    sponsorship_revenue: SponsorshipRevenue
    merchandise_revenue: MerchandiseRevenue


class CostEstimate(BaseModel):
    cost_breakdown: Dict[str, float]
    total_estimated_costs: float
    cost_per_attendee: float
    variable_costs: float
    fixed_costs: float


class BreakEvenAnalysis(BaseModel):
    break_even_attendance: Optional[int] = None
    break_even_revenue: Optional[float] = None
    margin_of_safety: Optional[int] = None
    message: Optional[str] = None


class ProfitProjection(BaseModel):
    total_revenue: float
    total_costs: float
    expected_profit: float
    profit_margin: float = Field(..., description="Percentage of revenue, 0 when there is no revenue")
    break_even_point: BreakEvenAnalysis


class RiskAdjustedProjection(BaseModel):
    overall_risk_score: float = Field(..., ge=0, le=1)
    risk_adjustment_factor: float
    adjusted_profit: float
    adjusted_revenue: float
    risk_impact: float


class RevenueScenario(BaseModel):
    attendance: int
    revenue: float
    description: str
    probability: float = Field(..., ge=0, le=1)


class RevenueProjection(BaseModel):
    success: bool = True
    predicted_attendance: int
    revenue_streams: RevenueStreams
    total_projected_revenue: float
    total_costs: CostEstimate
    profit_projections: ProfitProjection
    risk_adjusted_projections: RiskAdjustedProjection
    scenario_analysis: Dict[str, RevenueScenario]


# ===========================================
# ROI optimization
# ===========================================


class InvestmentScenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    investment: Decimal = Field(..., gt=0)
    expected_revenue_increase: Decimal = Field(..., ge=0)
    risk_level: Level = "medium"


class RoiRecord(BaseModel):
    """ROI achieved in a past period of the same event series."""

    model_config = ConfigDict(frozen=True)

    period: str
    roi_percentage: float
    season: Optional[Literal["spring", "summer", "fall", "winter"]] = None


class RoiOptimizationRequest(PlanningContext):
    investment_scenarios: List[InvestmentScenario] = []
    roi_history: List[RoiRecord] = []


class ProfitabilityMetrics(BaseModel):
    profit_margin: float
    revenue_multiple: float
    break_even_ratio: float


class CurrentRoi(BaseModel):
    total_revenue: float
    total_investment: float
    net_profit: float
    roi_percentage: float
    roi_category: Literal["negative", "low", "moderate", "strong"]
    profitability_metrics: ProfitabilityMetrics


class PeriodRoi(BaseModel):
    period: str
    roi: float


class HistoricalRoiAnalysis(BaseModel):
    comparison: Literal["available", "no_historical_data"]
    historical_periods: int = 0
    average_roi: Optional[float] = None
    roi_trend: Optional[Literal["improving", "declining", "stable"]] = None
    roi_volatility: Optional[Level] = None
    best_performing_period: Optional[PeriodRoi] = None
    worst_performing_period: Optional[PeriodRoi] = None
    seasonal_patterns: Dict[str, float] = {}


class ScenarioAnalysis(BaseModel):
    scenario_id: int
    scenario_name: str
    investment_amount: float
    expected_roi: float
    risk_level: Level
    payback_period: Optional[float] = Field(None, description="Event editions to recover the investment")
    recommendation: Literal["proceed", "consider", "avoid"]


class RoiRecommendation(BaseModel):
    type: str
    priority: Level
    description: str
    estimated_roi_gain: float


class ImprovementProjection(BaseModel):
    current_roi: float
    projected_roi: float
    total_estimated_gain: float


class RoiOptimizationResult(BaseModel):
    success: bool = True
    current_roi: CurrentRoi
    historical_analysis: HistoricalRoiAnalysis
    scenario_analysis: List[ScenarioAnalysis] = []
    optimization_recommendations: List[RoiRecommendation] = []
    improvement_projections: ImprovementProjection
    implementation_priority: List[str] = []


# ===========================================
# Benchmarking
# ===========================================


class BenchmarkCriterion(str, Enum):
    SIMILAR_SIZE_EVENTS = "similar_size_events"
    SAME_CATEGORY_EVENTS = "same_category_events"
    REGIONAL_EVENTS = "regional_events"
    SEASONAL_EVENTS = "seasonal_events"


class PeerEvent(BaseModel):
    """Outcome of a comparable event, supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    event_id: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0)
    attendance: int = Field(..., ge=0)
    start_date: date
    category: Optional[str] = None
    region: Optional[str] = None


class BenchmarkRequest(PlanningContext):
    peers: List[PeerEvent] = []
    criteria: List[BenchmarkCriterion] = Field(default_factory=lambda: list(BenchmarkCriterion))
    actual_attendance: Optional[int] = Field(
        None, ge=0, description="Measured attendance; the forecast is used when absent"
    )


class BenchmarkComparison(BaseModel):
    criterion: BenchmarkCriterion
    comparison: Literal["available", "no_peer_data"]
    peer_count: int = 0
    event_attendance_rate: float
    peer_average: Optional[float] = None
    peer_median: Optional[float] = None
    percentile: Optional[float] = Field(None, ge=0, le=100)
    performance: Optional[Literal["above_average", "average", "below_average"]] = None


class OverallRanking(BaseModel):
    average_percentile: Optional[float] = None
    tier: Literal["top_quartile", "above_median", "below_median", "bottom_quartile", "unranked"]


class PerformanceGap(BaseModel):
    criterion: BenchmarkCriterion
    gap: float
    gap_percentage: float


class BenchmarkRecommendation(BaseModel):
    criterion: BenchmarkCriterion
    priority: Level
    message: str


class BenchmarkResult(BaseModel):
    success: bool = True
    attendance_source: Literal["actual", "forecast"]
    benchmarking_results: Dict[BenchmarkCriterion, BenchmarkComparison]
    overall_ranking: OverallRanking
    competitive_position: Literal["leader", "challenger", "follower", "laggard", "unknown"]
    performance_gaps: List[PerformanceGap] = []
    improvement_recommendations: List[BenchmarkRecommendation] = []


# ===========================================
# Dashboard
# ===========================================


class DashboardRequest(PlanningContext):
    # Optional sections, computed only when their inputs are present
    venue: Optional[VenueSpace] = None
    vendors: List[Vendor] = []


class CashFlowRisk(BaseModel):
    risk_level: Level
    reason: str


class RevenueConcentrationRisk(BaseModel):
    risk_level: Level
    primary_source: str


class RiskIndicators(BaseModel):
    overall_risk_assessment: RiskResult
    cash_flow_risk: CashFlowRisk
    revenue_concentration_risk: RevenueConcentrationRisk


class Insight(BaseModel):
    type: str
    priority: Level
    message: str
    impact: str


class SummaryInsights(BaseModel):
    total_insights: int
    high_priority_insights: List[Insight] = []
    insights: List[Insight] = []


class DashboardResult(BaseModel):
    success: bool = True
    event_id: Optional[str] = None
    as_of: date
    attendance_forecast: ForecastResult
    revenue_projections: RevenueProjection
    risk_indicators: RiskIndicators
    budget_allocation: Optional[AllocationResult] = None
    layout: Optional[LayoutResult] = None
    section_errors: Dict[str, ErrorResponse] = Field(
        {}, description="Optional sections that could not be computed"
    )
    summary_insights: SummaryInsights
