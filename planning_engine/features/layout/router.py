# planning_engine/features/layout/router.py
from typing import Union

from fastapi import APIRouter

from planning_engine.schemas.common import ErrorResponse

from . import service
from .schemas import LayoutOptimizationRequest, LayoutResult

router = APIRouter()


@router.post(
    "/layout/optimize",
    response_model=Union[LayoutResult, ErrorResponse],
    tags=["Vendor Layout"],
)
def post_layout_optimization(request: LayoutOptimizationRequest):
    return service.optimize_layout(request)
