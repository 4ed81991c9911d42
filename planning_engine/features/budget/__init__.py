"""Budget allocation feature module."""

from planning_engine.features.budget.router import router
from planning_engine.features.budget.schemas import (
    AllocationResult,
    BudgetAllocationRequest,
    BudgetCategory,
)
from planning_engine.features.budget.service import allocate_budget, build_budget_allocation

__all__ = [
    "router",
    "AllocationResult",
    "BudgetAllocationRequest",
    "BudgetCategory",
    "allocate_budget",
    "build_budget_allocation",
]
