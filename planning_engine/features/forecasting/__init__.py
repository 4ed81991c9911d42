"""Attendance forecasting feature module."""

from planning_engine.features.forecasting.router import router
from planning_engine.features.forecasting.schemas import (
    AttendanceForecastRequest,
    ForecastResult,
)
from planning_engine.features.forecasting.service import build_forecast, forecast_attendance

__all__ = [
    "router",
    "AttendanceForecastRequest",
    "ForecastResult",
    "build_forecast",
    "forecast_attendance",
]
