# planning_engine/features/budget/schemas.py
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from planning_engine.schemas.common import EventProfile


class BudgetCategory(str, Enum):
    VENUE_COSTS = "venue_costs"
    MARKETING_PROMOTION = "marketing_promotion"
    SECURITY_SAFETY = "security_safety"
    INFRASTRUCTURE = "infrastructure"
    ENTERTAINMENT = "entertainment"
    FOOD_BEVERAGE = "food_beverage"
    LOGISTICS = "logistics"
    CONTINGENCY = "contingency"


class HistoricalPerformanceRecord(BaseModel):
    """How efficiently a spending category was used at a past event."""

    model_config = ConfigDict(frozen=True)

    # Free-form on purpose: records for unknown categories are ignored
    category: Optional[str] = None
    efficiency_score: Optional[float] = Field(None, ge=0, le=1)


class BudgetAllocationRequest(BaseModel):
    event: Optional[EventProfile] = None
    total_budget: Optional[Decimal] = None
    historical_performance: List[HistoricalPerformanceRecord] = []
    as_of: Optional[date] = Field(None, description="Defaults to today")


class EventBudgetProfile(BaseModel):
    size: Literal["small", "medium", "large", "mega"]
    type: str
    duration: int
    outdoor: bool
    expected_attendance: int
    risk_level: Literal["low", "medium", "high"]


class BudgetRisk(BaseModel):
    type: str
    severity: Literal["low", "medium", "high"]
    description: str


class OptimizationOpportunity(BaseModel):
    type: str
    description: str
    potential_savings: Optional[float] = None
    potential_revenue: Optional[float] = None


class ContingencyBudgetPlan(BaseModel):
    total_contingency: float
    allocation_breakdown: Dict[str, float]
    approval_thresholds: Dict[str, float]
    usage_guidelines: List[str]


class AllocationResult(BaseModel):
    success: bool = True
    total_budget: float
    profile: EventBudgetProfile
    recommended_allocation: Dict[BudgetCategory, float]
    percentages: Dict[BudgetCategory, float] = Field(
        ..., description="Normalized share of the total per category, sums to 1.0"
    )
    allocation_rationale: Dict[BudgetCategory, str]
    risk_assessment: List[BudgetRisk] = []
    optimization_opportunities: List[OptimizationOpportunity] = []
    contingency_plan: ContingencyBudgetPlan
