"""Event risk assessment feature module."""

from planning_engine.features.risk.router import router
from planning_engine.features.risk.schemas import (
    RiskAssessmentRequest,
    RiskCategory,
    RiskLevel,
    RiskResult,
)
from planning_engine.features.risk.service import assess_risks, build_risk_assessment

__all__ = [
    "router",
    "RiskAssessmentRequest",
    "RiskCategory",
    "RiskLevel",
    "RiskResult",
    "assess_risks",
    "build_risk_assessment",
]
