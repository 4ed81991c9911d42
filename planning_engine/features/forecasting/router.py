# planning_engine/features/forecasting/router.py
from typing import Union

from fastapi import APIRouter

from planning_engine.schemas.common import ErrorResponse

from . import service
from .schemas import AttendanceForecastRequest, ForecastResult

router = APIRouter()


@router.post(
    "/forecasting/attendance",
    response_model=Union[ForecastResult, ErrorResponse],
    tags=["Attendance Forecasting"],
)
def post_attendance_forecast(request: AttendanceForecastRequest):
    """
    Predicts attendance from historical, weather, marketing, competition and
    seasonal signals.
    """
    return service.forecast_attendance(request)
