# planning_engine/features/budget/service.py
"""
Budget allocation across the fixed spending categories.

Percentages start from a base table, are shifted by the event profile,
historical category efficiency and calendar risk, then normalized and
applied to the total budget.
"""

import logging
from datetime import date
from typing import Dict, List, Union

from planning_engine.core.config import settings
from planning_engine.core.exceptions import (
    MissingInputError,
    ValidationFailure,
    structured_errors,
)
from planning_engine.schemas.common import ErrorResponse, EventProfile
from planning_engine.utils.validators import days_since, resolve_as_of, validate_event_profile

from .schemas import (
    AllocationResult,
    BudgetAllocationRequest,
    BudgetCategory,
    BudgetRisk,
    ContingencyBudgetPlan,
    EventBudgetProfile,
    HistoricalPerformanceRecord,
    OptimizationOpportunity,
)

logger = logging.getLogger(__name__)

Allocation = Dict[BudgetCategory, float]

BASE_ALLOCATION = {
    BudgetCategory.VENUE_COSTS: 0.25,
    BudgetCategory.MARKETING_PROMOTION: 0.15,
    BudgetCategory.SECURITY_SAFETY: 0.12,
    BudgetCategory.INFRASTRUCTURE: 0.18,
    BudgetCategory.ENTERTAINMENT: 0.15,
    BudgetCategory.FOOD_BEVERAGE: 0.05,
    BudgetCategory.LOGISTICS: 0.08,
    BudgetCategory.CONTINGENCY: 0.02,
}

SIZE_ADJUSTMENTS = {
    "small": {
        BudgetCategory.MARKETING_PROMOTION: 0.05,
        BudgetCategory.SECURITY_SAFETY: -0.03,
        BudgetCategory.CONTINGENCY: -0.02,
    },
    "mega": {
        BudgetCategory.SECURITY_SAFETY: 0.05,
        BudgetCategory.LOGISTICS: 0.03,
        BudgetCategory.CONTINGENCY: 0.02,
        BudgetCategory.MARKETING_PROMOTION: -0.05,
        BudgetCategory.ENTERTAINMENT: -0.05,
    },
}

OUTDOOR_ADJUSTMENTS = {
    BudgetCategory.INFRASTRUCTURE: 0.05,
    BudgetCategory.CONTINGENCY: 0.03,
    BudgetCategory.VENUE_COSTS: -0.05,
    BudgetCategory.ENTERTAINMENT: -0.03,
}

HIGH_RISK_ADJUSTMENTS = {
    BudgetCategory.SECURITY_SAFETY: 0.03,
    BudgetCategory.CONTINGENCY: 0.05,
    BudgetCategory.MARKETING_PROMOTION: -0.05,
    BudgetCategory.ENTERTAINMENT: -0.03,
}

WINTER_MONTHS = (11, 12, 1, 2)
NEW_EVENT_DAYS = 90
MIN_CONTINGENCY_SHARE = 0.02
ROUNDING_TOLERANCE = 1.0

CONTINGENCY_BREAKDOWN = {
    "emergency_response": 0.4,
    "weather_contingency": 0.3,
    "vendor_issues": 0.15,
    "equipment_failure": 0.1,
    "general_buffer": 0.05,
}

APPROVAL_THRESHOLDS = {
    "immediate_use": 0.1,
    "manager_approval": 0.3,
    "executive_approval": 0.5,
}

USAGE_GUIDELINES = [
    "Emergency response: Safety incidents, medical emergencies",
    "Weather contingency: Equipment protection, alternative arrangements",
    "Vendor issues: Last-minute cancellations, additional requirements",
    "Equipment failure: Backup equipment, emergency repairs",
    "General buffer: Unforeseen minor expenses",
]


def is_new_event(event: EventProfile, as_of: date) -> bool:
    return days_since(event.created_at, as_of) < NEW_EVENT_DAYS


# ===========================================
# Event profile
# ===========================================


def categorize_event_size(event: EventProfile) -> str:
    capacity = event.capacity if event.capacity is not None else settings.DEFAULT_VENUE_CAPACITY
    if capacity <= 500:
        return "small"
    if capacity <= 2000:
        return "medium"
    if capacity <= 10000:
        return "large"
    return "mega"


def calculate_profile_risk_level(
    size: str, duration: int, outdoor: bool, expected_attendance: int
) -> str:
    points = sum(
        [
            size == "mega",
            duration > 3,
            outdoor,
            expected_attendance > 5000,
        ]
    )
    if points <= 1:
        return "low"
    if points <= 3:
        return "medium"
    return "high"


def analyze_event_profile(event: EventProfile) -> EventBudgetProfile:
    size = categorize_event_size(event)
    expected_attendance = (
        event.expected_attendance if event.expected_attendance is not None else 1000
    )
    return EventBudgetProfile(
        size=size,
        type=event.category or "general",
        duration=event.duration_days,
        outdoor=event.outdoor,
        expected_attendance=expected_attendance,
        risk_level=calculate_profile_risk_level(
            size, event.duration_days, event.outdoor, expected_attendance
        ),
    )


# ===========================================
# Percentages
# ===========================================


def apply_adjustments(allocation: Allocation, adjustments: Allocation) -> Allocation:
    adjusted = dict(allocation)
    for category, delta in adjustments.items():
        adjusted[category] += delta
    return adjusted


def normalize_allocation(allocation: Allocation) -> Allocation:
    """Rescale so the shares sum to 1.0. A non-positive total is left as is."""
    total = sum(allocation.values())
    if total == 1.0 or total <= 0:
        return dict(allocation)
    return {category: share / total for category, share in allocation.items()}


def calculate_base_allocation(profile: EventBudgetProfile) -> Allocation:
    allocation = apply_adjustments(BASE_ALLOCATION, SIZE_ADJUSTMENTS.get(profile.size, {}))
    if profile.outdoor:
        allocation = apply_adjustments(allocation, OUTDOOR_ADJUSTMENTS)
    if profile.risk_level == "high":
        allocation = apply_adjustments(allocation, HIGH_RISK_ADJUSTMENTS)
    return normalize_allocation(allocation)


def calculate_performance_adjustments(
    historical_performance: List[HistoricalPerformanceRecord],
) -> Allocation:
    adjustments = {}
    known = {category.value for category in BudgetCategory}

    for record in historical_performance:
        if record.category not in known or record.efficiency_score is None:
            continue

        category = BudgetCategory(record.category)
        if record.efficiency_score > 0.9:
            adjustments[category] = adjustments.get(category, 0.0) + 0.02
        elif record.efficiency_score < 0.6:
            adjustments[category] = adjustments.get(category, 0.0) - 0.03

    return adjustments


def calculate_risk_adjustments(event: EventProfile, as_of: date) -> Allocation:
    adjustments = {}

    if event.start_date.month in WINTER_MONTHS:
        adjustments[BudgetCategory.CONTINGENCY] = 0.02
        adjustments[BudgetCategory.INFRASTRUCTURE] = 0.01

    if is_new_event(event, as_of):
        adjustments[BudgetCategory.CONTINGENCY] = (
            adjustments.get(BudgetCategory.CONTINGENCY, 0.0) + 0.03
        )
        adjustments[BudgetCategory.MARKETING_PROMOTION] = (
            adjustments.get(BudgetCategory.MARKETING_PROMOTION, 0.0) + 0.02
        )

    return adjustments


def convert_to_amounts(shares: Allocation, total_budget: float) -> Allocation:
    return {category: round(share * total_budget, 2) for category, share in shares.items()}


def validate_budget_allocation(amounts: Allocation, total_budget: float) -> List[str]:
    errors = []

    allocation_total = round(sum(amounts.values()), 2)
    if abs(allocation_total - total_budget) > ROUNDING_TOLERANCE:
        errors.append(
            f"Allocation total ({allocation_total}) doesn't match budget ({total_budget})"
        )

    negative = [category.value for category, amount in amounts.items() if amount < 0]
    if negative:
        errors.append(f"Negative allocations found: {', '.join(negative)}")

    contingency_share = amounts[BudgetCategory.CONTINGENCY] / total_budget
    if contingency_share < MIN_CONTINGENCY_SHARE:
        errors.append(f"Contingency allocation too low ({round(contingency_share * 100, 1)}%)")

    return errors


# ===========================================
# Narrative
# ===========================================


def generate_allocation_rationale(
    amounts: Allocation, profile: EventBudgetProfile
) -> Dict[BudgetCategory, str]:
    allocated = sum(amounts.values())
    rationale = {}

    for category, amount in amounts.items():
        percentage = round(amount / allocated * 100, 1) if allocated else 0.0

        if category == BudgetCategory.VENUE_COSTS:
            text = f"{percentage}% allocated for venue rental and facility costs"
        elif category == BudgetCategory.SECURITY_SAFETY:
            text = f"{percentage}% for security and safety measures"
            if profile.risk_level == "high":
                text += " (increased due to high risk profile)"
        elif category == BudgetCategory.MARKETING_PROMOTION:
            text = f"{percentage}% for marketing and promotional activities"
            if profile.size == "small":
                text += " (increased for small event visibility)"
        elif category == BudgetCategory.CONTINGENCY:
            text = f"{percentage}% contingency fund for unexpected expenses"
            if profile.outdoor:
                text += " (increased for outdoor event risks)"
        else:
            text = f"{percentage}% allocated for {category.value.replace('_', ' ')}"

        rationale[category] = text

    return rationale


def assess_budget_risks(amounts: Allocation, new_event: bool) -> List[BudgetRisk]:
    risks = []
    allocated = sum(amounts.values())
    if not allocated:
        return risks

    contingency_share = amounts[BudgetCategory.CONTINGENCY] / allocated
    if contingency_share < 0.05:
        risks.append(
            BudgetRisk(
                type="low_contingency",
                severity="medium",
                description=f"Contingency fund is {round(contingency_share * 100, 1)}%, recommend minimum 5%",
            )
        )

    venue_share = amounts[BudgetCategory.VENUE_COSTS] / allocated
    if venue_share > 0.4:
        risks.append(
            BudgetRisk(
                type="high_venue_costs",
                severity="high",
                description=f"Venue costs consume {round(venue_share * 100, 1)}% of budget, limiting flexibility",
            )
        )

    marketing_share = amounts[BudgetCategory.MARKETING_PROMOTION] / allocated
    if marketing_share < 0.1 and new_event:
        risks.append(
            BudgetRisk(
                type="underfunded_marketing",
                severity="medium",
                description=(
                    f"New event with only {round(marketing_share * 100, 1)}% "
                    "marketing budget may struggle with awareness"
                ),
            )
        )

    return risks


def identify_optimization_opportunities(amounts: Allocation) -> List[OptimizationOpportunity]:
    opportunities = []
    allocated = sum(amounts.values())
    if not allocated:
        return opportunities

    if amounts[BudgetCategory.LOGISTICS] / allocated > 0.12:
        opportunities.append(
            OptimizationOpportunity(
                type="logistics_optimization",
                potential_savings=round(amounts[BudgetCategory.LOGISTICS] * 0.15, 2),
                description="Logistics allocation high - consider vendor partnerships or bulk purchasing",
            )
        )

    if amounts[BudgetCategory.FOOD_BEVERAGE] / allocated < 0.03:
        opportunities.append(
            OptimizationOpportunity(
                type="revenue_enhancement",
                potential_revenue=round(allocated * 0.02, 2),
                description="Low food/beverage allocation - consider revenue-sharing with vendors",
            )
        )

    if amounts[BudgetCategory.INFRASTRUCTURE] / allocated > 0.25:
        opportunities.append(
            OptimizationOpportunity(
                type="infrastructure_efficiency",
                potential_savings=round(amounts[BudgetCategory.INFRASTRUCTURE] * 0.1, 2),
                description="High infrastructure costs - explore rental partnerships or reusable solutions",
            )
        )

    return opportunities


def generate_contingency_plan(amounts: Allocation) -> ContingencyBudgetPlan:
    contingency = amounts[BudgetCategory.CONTINGENCY]
    return ContingencyBudgetPlan(
        total_contingency=contingency,
        allocation_breakdown={
            name: round(contingency * share, 2) for name, share in CONTINGENCY_BREAKDOWN.items()
        },
        approval_thresholds={
            name: round(contingency * share, 2) for name, share in APPROVAL_THRESHOLDS.items()
        },
        usage_guidelines=list(USAGE_GUIDELINES),
    )


# ===========================================
# Public operation
# ===========================================


def build_budget_allocation(request: BudgetAllocationRequest) -> AllocationResult:
    if request.total_budget is None or request.total_budget <= 0:
        raise MissingInputError("Event and a positive budget are required", field="total_budget")

    event = validate_event_profile(request.event)
    as_of = resolve_as_of(request.as_of)
    total_budget = float(request.total_budget)

    profile = analyze_event_profile(event)
    base_shares = calculate_base_allocation(profile)
    adjusted = apply_adjustments(
        base_shares, calculate_performance_adjustments(request.historical_performance)
    )
    adjusted = apply_adjustments(adjusted, calculate_risk_adjustments(event, as_of))
    shares = normalize_allocation(adjusted)

    amounts = convert_to_amounts(shares, total_budget)
    errors = validate_budget_allocation(amounts, total_budget)
    if errors:
        raise ValidationFailure("Budget allocation", errors)

    logger.info(
        f"Allocated {total_budget} for event {event.event_id} "
        f"({profile.size}, {profile.risk_level} risk)"
    )
    logger.debug(f"Budget shares: {shares}")

    return AllocationResult(
        total_budget=total_budget,
        profile=profile,
        recommended_allocation=amounts,
        percentages=shares,
        allocation_rationale=generate_allocation_rationale(amounts, profile),
        risk_assessment=assess_budget_risks(amounts, is_new_event(event, as_of)),
        optimization_opportunities=identify_optimization_opportunities(amounts),
        contingency_plan=generate_contingency_plan(amounts),
    )


@structured_errors("Budget allocation")
def allocate_budget(
    request: BudgetAllocationRequest,
) -> Union[AllocationResult, ErrorResponse]:
    """
    Splits the total budget across the eight spending categories with a
    rationale, budget risk flags, savings opportunities and a contingency plan.
    """
    return build_budget_allocation(request)
