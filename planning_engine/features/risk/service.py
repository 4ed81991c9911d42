# planning_engine/features/risk/service.py
"""
Composite event risk scoring.

Five independent categories are scored from event attributes, combined with
fixed weights, and paired with mitigation strategies, monitoring advice and
contingency plans for the categories that need them.
"""

import logging
from datetime import date
from typing import Callable, Dict, List, Union

from planning_engine.core.exceptions import structured_errors
from planning_engine.schemas.common import ErrorResponse, EventProfile
from planning_engine.utils.validators import days_since, resolve_as_of, validate_event_profile

from . import catalog
from .schemas import (
    CategoryAssessment,
    CriticalRisk,
    MitigationStrategy,
    MonitoringRecommendation,
    RiskAssessmentRequest,
    RiskCategory,
    RiskContingencyPlan,
    RiskLevel,
    RiskResult,
)

logger = logging.getLogger(__name__)

CATEGORY_WEIGHTS = {
    RiskCategory.WEATHER: 0.20,
    RiskCategory.SAFETY: 0.25,
    RiskCategory.SECURITY: 0.20,
    RiskCategory.FINANCIAL: 0.20,
    RiskCategory.OPERATIONAL: 0.15,
}
FALLBACK_WEIGHT = 0.1

WINTER_MONTHS = (12, 1, 2)
SUMMER_MONTHS = (6, 7, 8)
NEW_EVENT_DAYS = 90
LARGE_BUDGET = 1_000_000
CRITICAL_THRESHOLD = 0.7
MONITORING_THRESHOLD = 0.5
STRATEGY_THRESHOLD = 0.6


def expected_attendance(event: EventProfile) -> int:
    if event.expected_attendance is not None:
        return event.expected_attendance
    if event.capacity is not None:
        return event.capacity
    return 1000


def _assessment(score: float, factors: List[str], high_above: float) -> CategoryAssessment:
    # Rounded before the threshold check so 0.2 + 0.3 + 0.1 lands on 0.6 exactly
    risk_score = round(min(max(score, 0.0), 1.0), 4)
    return CategoryAssessment(
        risk_score=risk_score,
        factors=factors,
        mitigation_priority="high" if risk_score > high_above else "medium",
    )


# ===========================================
# Category assessors
# ===========================================


def assess_weather_risk(event: EventProfile, as_of: date) -> CategoryAssessment:
    score = 0.3
    factors = []

    if event.outdoor:
        score += 0.2
        factors.append("Outdoor venue susceptible to weather conditions")

    month = event.start_date.month
    if month in WINTER_MONTHS:
        score += 0.3
        factors.append("Winter season increases risk of snow, ice, and cold temperatures")
    elif month in SUMMER_MONTHS:
        score += 0.2
        factors.append("Summer season increases risk of rain, storms, and extreme heat")

    if event.duration_days > 3:
        score += 0.1
        factors.append("Extended duration increases probability of adverse weather")

    return _assessment(score, factors, high_above=0.7)


def assess_safety_risk(event: EventProfile, as_of: date) -> CategoryAssessment:
    score = 0.2
    factors = []
    attendance = expected_attendance(event)

    if attendance > 5000:
        score += 0.3
        factors.append("Large crowd size increases safety management complexity")
    elif attendance > 2000:
        score += 0.2
        factors.append("Moderate crowd size requires structured crowd control")

    if event.outdoor:
        score += 0.1
        factors.append("Outdoor venue requires additional safety considerations")

    if "alcohol" in event.activities:
        score += 0.2
        factors.append("Alcohol service increases incident likelihood")

    factors.append("Standard safety risks include crowd control, emergency access, and incident response")
    return _assessment(score, factors, high_above=0.6)


def assess_security_risk(event: EventProfile, as_of: date) -> CategoryAssessment:
    score = 0.25
    factors = []
    attendance = expected_attendance(event)

    if event.is_public:
        score += 0.15
        factors.append("Public event increases security screening requirements")

    if attendance > 10000:
        score += 0.25
        factors.append("Very large attendance requires comprehensive security planning")
    elif attendance > 5000:
        score += 0.15
        factors.append("Large attendance requires enhanced security measures")

    if event.media_attention == "high":
        score += 0.2
        factors.append("High media attention raises the event's profile as a target")

    factors.append("Standard security considerations include access control, bag checks, and crowd monitoring")
    return _assessment(score, factors, high_above=0.6)


def assess_financial_risk(event: EventProfile, as_of: date) -> CategoryAssessment:
    score = 0.3
    factors = []

    if days_since(event.created_at, as_of) < NEW_EVENT_DAYS:
        score += 0.2
        factors.append("New event lacks historical performance data")

    if event.budget is not None and event.budget > LARGE_BUDGET:
        score += 0.2
        factors.append("Large budget increases financial exposure")

    if "ticket_sales" in event.revenue_sources:
        score += 0.1
        factors.append("Revenue depends on ticket sales")

    factors.append("Standard financial risks include cost overruns, revenue shortfalls, and vendor payment issues")
    return _assessment(score, factors, high_above=0.7)


def assess_operational_risk(event: EventProfile, as_of: date) -> CategoryAssessment:
    score = 0.35
    factors = []

    if event.duration_days > 5:
        score += 0.2
        factors.append("Extended duration increases operational complexity")
    elif event.duration_days > 3:
        score += 0.1
        factors.append("Multi-day event requires sustained operational excellence")

    if event.venue_count > 1:
        score += 0.15
        factors.append("Multiple venues require cross-site coordination")

    if event.vendor_count > 50:
        score += 0.15
        factors.append("Large number of vendors increases coordination complexity")

    factors.append("Standard operational risks include logistics coordination, staff management, and schedule adherence")
    return _assessment(score, factors, high_above=0.7)


ASSESSORS: Dict[RiskCategory, Callable[[EventProfile, date], CategoryAssessment]] = {
    RiskCategory.WEATHER: assess_weather_risk,
    RiskCategory.SAFETY: assess_safety_risk,
    RiskCategory.SECURITY: assess_security_risk,
    RiskCategory.FINANCIAL: assess_financial_risk,
    RiskCategory.OPERATIONAL: assess_operational_risk,
}


# ===========================================
# Aggregation
# ===========================================


def calculate_overall_risk_score(assessments: Dict[RiskCategory, CategoryAssessment]) -> float:
    weighted_score = 0.0
    total_weight = 0.0

    for category, assessment in assessments.items():
        weight = CATEGORY_WEIGHTS.get(category, FALLBACK_WEIGHT)
        weighted_score += assessment.risk_score * weight
        total_weight += weight

    if total_weight <= 0:
        return 0.5
    return round(weighted_score / total_weight, 4)


def categorize_risk_level(overall_risk_score: float) -> RiskLevel:
    if overall_risk_score < 0.3:
        return RiskLevel.LOW
    if overall_risk_score < 0.6:
        return RiskLevel.MEDIUM
    if overall_risk_score < 0.8:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def identify_critical_risks(
    assessments: Dict[RiskCategory, CategoryAssessment],
) -> List[CriticalRisk]:
    critical = [
        CriticalRisk(
            category=category,
            risk_score=assessment.risk_score,
            priority=assessment.mitigation_priority,
            factors=assessment.factors,
        )
        for category, assessment in assessments.items()
        if assessment.risk_score > CRITICAL_THRESHOLD
    ]
    # sorted() is stable, so equal scores keep request order
    return sorted(critical, key=lambda risk: -risk.risk_score)


# ===========================================
# Mitigation
# ===========================================


def generate_category_strategies(
    category: RiskCategory, assessment: CategoryAssessment, event: EventProfile
) -> List[MitigationStrategy]:
    elevated = assessment.risk_score > STRATEGY_THRESHOLD

    if category == RiskCategory.WEATHER:
        strategies = []
        if elevated:
            strategies.append(catalog.WEATHER_MONITORING)
        if event.outdoor or elevated:
            strategies.append(catalog.TEMPORARY_SHELTER)
        strategies.append(catalog.WEATHER_PROTOCOLS)
    elif category == RiskCategory.SAFETY:
        strategies = [catalog.SAFETY_PLAN]
        if elevated:
            strategies.append(catalog.MEDICAL_SERVICES)
        strategies.append(catalog.CROWD_MANAGEMENT)
    elif category == RiskCategory.SECURITY:
        strategies = [catalog.PROFESSIONAL_SECURITY] if elevated else []
        strategies += [catalog.ACCESS_CONTROL, catalog.SECURITY_COORDINATION]
    elif category == RiskCategory.FINANCIAL:
        strategies = [catalog.DIVERSIFIED_REVENUE]
        if elevated:
            strategies.append(catalog.FINANCIAL_RESERVES)
        strategies.append(catalog.COST_CONTROL)
    else:
        strategies = [catalog.OPERATIONAL_PLANNING]
        if elevated:
            strategies.append(catalog.REDUNDANT_SYSTEMS)
        strategies.append(catalog.REHEARSALS)

    return [strategy.model_copy() for strategy in strategies]


def generate_monitoring_recommendations(
    assessments: Dict[RiskCategory, CategoryAssessment],
) -> List[MonitoringRecommendation]:
    recommendations = []
    for category, recommendation in catalog.MONITORING.items():
        assessment = assessments.get(category)
        if assessment is not None and assessment.risk_score > MONITORING_THRESHOLD:
            recommendations.append(recommendation.model_copy())
    return recommendations


def generate_contingency_plans(
    critical_risks: List[CriticalRisk],
) -> Dict[RiskCategory, RiskContingencyPlan]:
    return {
        risk.category: catalog.CONTINGENCY_PLANS[risk.category].model_copy(deep=True)
        for risk in critical_risks
    }


# ===========================================
# Public operation
# ===========================================


def build_risk_assessment(request: RiskAssessmentRequest) -> RiskResult:
    event = validate_event_profile(request.event)
    as_of = resolve_as_of(request.as_of)

    assessments = {}
    for category in request.categories:
        assessments[category] = ASSESSORS[category](event, as_of)

    overall = calculate_overall_risk_score(assessments)
    critical_risks = identify_critical_risks(assessments)

    logger.info(
        f"Risk for event {event.event_id}: {overall} "
        f"({len(critical_risks)} critical of {len(assessments)} assessed)"
    )

    return RiskResult(
        overall_risk_score=overall,
        risk_level=categorize_risk_level(overall),
        category_assessments=assessments,
        critical_risks=critical_risks,
        mitigation_strategies={
            category: generate_category_strategies(category, assessment, event)
            for category, assessment in assessments.items()
        },
        monitoring_recommendations=generate_monitoring_recommendations(assessments),
        contingency_plans=generate_contingency_plans(critical_risks),
    )


@structured_errors("Risk assessment")
def assess_risks(request: RiskAssessmentRequest) -> Union[RiskResult, ErrorResponse]:
    """
    Scores the requested risk categories and derives mitigation strategies,
    monitoring advice and contingency plans for the critical ones.
    """
    return build_risk_assessment(request)
