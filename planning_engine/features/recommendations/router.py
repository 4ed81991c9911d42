# planning_engine/features/recommendations/router.py
from typing import Union

from fastapi import APIRouter, Depends

from planning_engine.schemas.common import ErrorResponse

from .schemas import (
    BenchmarkRequest,
    BenchmarkResult,
    DashboardRequest,
    DashboardResult,
    RevenueProjection,
    RevenueProjectionRequest,
    RoiOptimizationRequest,
    RoiOptimizationResult,
)
from .service import PlanningOrchestrator

router = APIRouter(prefix="/recommendations", tags=["Planning Recommendations"])


def get_orchestrator() -> PlanningOrchestrator:
    return PlanningOrchestrator()


@router.post("/dashboard", response_model=Union[DashboardResult, ErrorResponse])
def post_dashboard(
    request: DashboardRequest,
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    """
    Combined forecast, revenue, risk and insight view for one event.
    """
    return orchestrator.generate_dashboard(request)


@router.post("/revenue", response_model=Union[RevenueProjection, ErrorResponse])
def post_revenue_projection(
    request: RevenueProjectionRequest,
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    return orchestrator.project_revenue(request)


@router.post("/roi", response_model=Union[RoiOptimizationResult, ErrorResponse])
def post_roi_optimization(
    request: RoiOptimizationRequest,
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    return orchestrator.optimize_roi(request)


@router.post("/benchmark", response_model=Union[BenchmarkResult, ErrorResponse])
def post_benchmark(
    request: BenchmarkRequest,
    orchestrator: PlanningOrchestrator = Depends(get_orchestrator),
):
    return orchestrator.benchmark_performance(request)
