# planning_engine/features/forecasting/schemas.py
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from planning_engine.schemas.common import (
    CompetingEvent,
    EventProfile,
    HistoricalEventSample,
    WeatherSnapshot,
)


class AttendanceForecastRequest(BaseModel):
    event: Optional[EventProfile] = None
    historical_samples: List[HistoricalEventSample] = []
    weather: Optional[WeatherSnapshot] = None
    # Read-only snapshot of the other events on the calendar
    competing_events: List[CompetingEvent] = []
    as_of: Optional[date] = Field(None, description="Defaults to today")


class ForecastFactors(BaseModel):
    base_prediction: float
    weather_impact: float
    marketing_impact: float
    competition_factor: float
    seasonal_adjustment: float


class ConfidenceInterval(BaseModel):
    lower_bound: int
    upper_bound: int


class ConfidenceIntervals(BaseModel):
    confidence_95: ConfidenceInterval
    confidence_80: ConfidenceInterval
    confidence_50: ConfidenceInterval


class DailyForecast(BaseModel):
    class ConfidenceFactor(BaseModel):
        factor: str
        impact: Literal["positive", "negative"]
        confidence: float

    date: date
    predicted_attendance: int
    day_of_event: int
    day_of_week: str
    confidence_factors: List[ConfidenceFactor] = []


class HistoricalComparison(BaseModel):
    comparison: Literal["available", "no_historical_data"]
    historical_average: Optional[int] = None
    predicted_attendance: Optional[int] = None
    percentage_change: Optional[float] = None
    trend: Optional[Literal["increasing", "decreasing", "stable"]] = None


class Recommendation(BaseModel):
    type: str
    message: str
    priority: Literal["low", "medium", "high"]


class ForecastResult(BaseModel):
    success: bool = True
    predicted_attendance: int
    confidence_score: float = Field(..., ge=0, le=0.95)
    factors: ForecastFactors
    confidence_intervals: ConfidenceIntervals
    daily_forecast: List[DailyForecast]
    historical_comparison: HistoricalComparison
    recommendations: List[Recommendation] = []
    defaults_used: List[str] = Field(
        [], description="Optional inputs that were absent and replaced by neutral defaults"
    )
