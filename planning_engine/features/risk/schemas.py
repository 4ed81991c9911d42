# planning_engine/features/risk/schemas.py
from datetime import date
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from planning_engine.schemas.common import EventProfile

Level = Literal["low", "medium", "high"]


class RiskCategory(str, Enum):
    WEATHER = "weather"
    SAFETY = "safety"
    SECURITY = "security"
    FINANCIAL = "financial"
    OPERATIONAL = "operational"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RiskAssessmentRequest(BaseModel):
    event: Optional[EventProfile] = None
    categories: List[RiskCategory] = Field(default_factory=lambda: list(RiskCategory))
    as_of: Optional[date] = Field(None, description="Defaults to today")


class CategoryAssessment(BaseModel):
    risk_score: float = Field(..., ge=0, le=1)
    factors: List[str] = []
    mitigation_priority: Level


class CriticalRisk(BaseModel):
    category: RiskCategory
    risk_score: float = Field(..., ge=0, le=1)
    priority: Level
    factors: List[str] = []


class MitigationStrategy(BaseModel):
    strategy: str
    implementation: str
    cost_estimate: Level
    effectiveness: Level


class MonitoringRecommendation(BaseModel):
    area: str
    frequency: str
    tools: str
    triggers: str


class RiskContingencyPlan(BaseModel):
    trigger_conditions: List[str]
    immediate_actions: List[str]
    escalation_procedures: List[str]
    resource_requirements: List[str]


class RiskResult(BaseModel):
    success: bool = True
    overall_risk_score: float = Field(..., ge=0, le=1)
    risk_level: RiskLevel
    category_assessments: Dict[RiskCategory, CategoryAssessment]
    critical_risks: List[CriticalRisk] = []
    mitigation_strategies: Dict[RiskCategory, List[MitigationStrategy]] = {}
    monitoring_recommendations: List[MonitoringRecommendation] = []
    contingency_plans: Dict[RiskCategory, RiskContingencyPlan] = {}
