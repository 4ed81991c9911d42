# planning_engine/features/risk/router.py
from typing import Union

from fastapi import APIRouter

from planning_engine.schemas.common import ErrorResponse

from . import service
from .schemas import RiskAssessmentRequest, RiskResult

router = APIRouter()


@router.post(
    "/risk/assess",
    response_model=Union[RiskResult, ErrorResponse],
    tags=["Risk Assessment"],
)
def post_risk_assessment(request: RiskAssessmentRequest):
    return service.assess_risks(request)
