# planning_engine/features/budget/router.py
from typing import Union

from fastapi import APIRouter

from planning_engine.schemas.common import ErrorResponse

from . import service
from .schemas import AllocationResult, BudgetAllocationRequest

router = APIRouter()


@router.post(
    "/budget/allocate",
    response_model=Union[AllocationResult, ErrorResponse],
    tags=["Budget Allocation"],
)
def post_budget_allocation(request: BudgetAllocationRequest):
    """
    Recommends how to split the total budget, with rationale per category.
    """
    return service.allocate_budget(request)
