# planning_engine/schemas/common.py
"""
Shared value inputs for every planning feature.

These are plain data snapshots handed over by the persistence layer. The
engine never mutates them, so they are frozen.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Structured failure returned instead of raising across the boundary."""

    success: bool = False
    error: str
    error_code: str
    details: Dict[str, Any] = {}


class EventProfile(BaseModel):
    """Facts about the event being planned."""

    model_config = ConfigDict(frozen=True)

    event_id: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=0, description="Venue capacity")
    start_date: date
    end_date: date
    category: Optional[str] = None
    ticket_price: Optional[Decimal] = Field(None, ge=0)
    marketing_budget: Optional[Decimal] = Field(None, ge=0)
    social_followers: Optional[int] = Field(None, ge=0)
    created_at: date
    outdoor: bool = False

    expected_attendance: Optional[int] = Field(None, ge=0)
    budget: Optional[Decimal] = Field(None, ge=0)
    is_public: bool = False
    media_attention: Optional[str] = Field(None, examples=["low", "medium", "high"])
    activities: List[str] = []
    revenue_sources: List[str] = Field([], examples=[["ticket_sales", "sponsorship"]])
    venue_count: int = Field(1, ge=0)
    vendor_count: int = Field(0, ge=0, description="Approved vendor applications")
    region: Optional[str] = None

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1


class HistoricalEventSample(BaseModel):
    """A past event used as forecasting evidence."""

    model_config = ConfigDict(frozen=True)

    attendance: int = Field(..., ge=0)
    date: date
    capacity: Optional[int] = Field(None, ge=0)
    duration_days: Optional[int] = Field(None, ge=1)
    category: Optional[str] = None
    region: Optional[str] = None


class WeatherSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature: Optional[float] = None
    precipitation_probability: Optional[float] = Field(None, ge=0, le=100)
    wind_speed: Optional[float] = Field(None, ge=0)


class CompetingEvent(BaseModel):
    """Another event on the calendar, used for the competition factor."""

    model_config = ConfigDict(frozen=True)

    event_id: Optional[str] = None
    start_date: date
    end_date: date
