# planning_engine/features/forecasting/service.py
"""
Attendance forecasting.

A deterministic, explainable estimate: a base figure (similar past events,
or venue capacity times an expected utilization rate) scaled by weather,
marketing, competition and seasonal multipliers.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple, Union

import numpy as np

from planning_engine.core.config import settings
from planning_engine.core.exceptions import structured_errors
from planning_engine.schemas.common import (
    CompetingEvent,
    ErrorResponse,
    EventProfile,
    HistoricalEventSample,
    WeatherSnapshot,
)
from planning_engine.utils.rounding import round_half_up
from planning_engine.utils.validators import days_since, resolve_as_of, validate_event_profile

from .schemas import (
    AttendanceForecastRequest,
    ConfidenceInterval,
    ConfidenceIntervals,
    DailyForecast,
    ForecastFactors,
    ForecastResult,
    HistoricalComparison,
    Recommendation,
)

logger = logging.getLogger(__name__)

# Typical attendance pattern by month of the event start
SEASONAL_FACTORS = {
    1: 0.85,
    2: 0.9,
    3: 1.0,
    4: 1.15,  # Spring events popular
    5: 1.2,  # Peak season
    6: 1.1,
    7: 1.0,  # Summer vacation conflicts
    8: 0.95,
    9: 1.1,
    10: 1.15,  # Fall events popular
    11: 1.0,
    12: 0.9,  # Holiday conflicts
}

SUMMER_MONTHS = (6, 7, 8)
WINTER_MONTHS = (12, 1, 2)

MAX_CONFIDENCE = 0.95
NEW_EVENT_DAYS = 30
COMPETITION_WINDOW = timedelta(days=7)

INTERVAL_Z_SCORES = {
    "confidence_95": 1.96,
    "confidence_80": 1.28,
    "confidence_50": 0.67,
}


# ===========================================
# Base estimate
# ===========================================


def _ratio(a: float, b: float) -> float:
    larger = max(a, b)
    return min(a, b) / larger if larger > 0 else 0.0


def similarity_score(event: EventProfile, sample: HistoricalEventSample) -> float:
    """
    Closeness of a past event to this one, in [0, 1].

    The mean of the weighted components that can be computed: capacity
    (x0.3), duration (x0.2), category (x0.3) and season (x0.2).
    """
    scores = []

    if event.capacity is not None and sample.capacity is not None:
        scores.append(_ratio(event.capacity, sample.capacity) * 0.3)

    sample_duration = sample.duration_days or 1
    scores.append(_ratio(event.duration_days, sample_duration) * 0.2)

    if event.category and sample.category:
        scores.append((1.0 if event.category == sample.category else 0.3) * 0.3)

    month_difference = abs(event.start_date.month - sample.date.month)
    month_difference = min(month_difference, 12 - month_difference)
    scores.append((1.0 - month_difference / 6.0) * 0.2)

    return sum(scores) / len(scores)


def calculate_utilization_rate(event: EventProfile) -> float:
    """Fraction of capacity expected to attend before external adjustments."""
    rate = 0.7

    if event.ticket_price is not None:
        if event.ticket_price == 0:
            rate += 0.15  # Free events draw more
        elif event.ticket_price > 5000:
            rate -= 0.2

    duration = event.duration_days
    if duration > 3:
        rate -= 0.1
    elif duration == 1:
        rate += 0.05

    return max(rate, 0.3)


def estimate_from_capacity(event: EventProfile) -> float:
    capacity = (
        event.capacity if event.capacity is not None else settings.DEFAULT_VENUE_CAPACITY
    )
    return float(round_half_up(capacity * calculate_utilization_rate(event)))


def calculate_base_attendance(
    event: EventProfile, samples: List[HistoricalEventSample]
) -> Tuple[float, bool]:
    """
    Returns the base attendance and whether similar past events were used.
    """
    if not samples:
        return estimate_from_capacity(event), False

    scored = [(sample, similarity_score(event, sample)) for sample in samples]
    similar = [(s, score) for s, score in scored if score > settings.SIMILARITY_THRESHOLD]
    if not similar:
        return estimate_from_capacity(event), False

    total_weight = sum(score for _, score in similar)
    if total_weight <= 0:
        return estimate_from_capacity(event), False

    weighted_sum = sum(sample.attendance * score for sample, score in similar)
    return weighted_sum / total_weight, True


# ===========================================
# Adjustment multipliers
# ===========================================


def calculate_weather_impact(weather: Optional[WeatherSnapshot]) -> float:
    if weather is None:
        return 1.0

    impact = 1.0

    if weather.temperature is not None:
        temperature = weather.temperature
        if temperature < 5 or temperature > 35:
            impact *= 0.8
        elif 15 <= temperature <= 25:
            impact *= 1.1

    if weather.precipitation_probability is not None:
        if weather.precipitation_probability > 70:
            impact *= 0.6
        elif weather.precipitation_probability > 30:
            impact *= 0.85

    if weather.wind_speed is not None and weather.wind_speed > 20:
        impact *= 0.9

    return impact


def calculate_marketing_impact(event: EventProfile) -> float:
    impact = 1.0

    if event.social_followers is not None:
        if event.social_followers > 10000:
            impact += 0.2
        elif event.social_followers > 1000:
            impact += 0.1

    if event.marketing_budget is not None:
        budget = event.marketing_budget
        if budget > 100000:
            impact += 0.15
        elif budget > 50000:
            impact += 0.1
        elif budget > 10000:
            impact += 0.05

    return impact


def calculate_competition_factor(
    event: EventProfile, competing_events: List[CompetingEvent]
) -> float:
    """Each event overlapping the +/- 7 day window costs 5%, down to 70%."""
    window_start = event.start_date - COMPETITION_WINDOW
    window_end = event.end_date + COMPETITION_WINDOW

    competitors = 0
    for other in competing_events:
        if event.event_id is not None and other.event_id == event.event_id:
            continue
        if other.start_date <= window_end and other.end_date >= window_start:
            competitors += 1

    if competitors == 0:
        return 1.0
    return max(1.0 - competitors * 0.05, 0.7)


def calculate_seasonal_adjustment(event: EventProfile) -> float:
    return SEASONAL_FACTORS.get(event.start_date.month, 1.0)


# ===========================================
# Confidence
# ===========================================


def calculate_confidence_score(
    event: EventProfile, samples: List[HistoricalEventSample], as_of: date
) -> float:
    confidence = 0.5
    confidence += min(len(samples) * 0.1, 0.3)

    if event.capacity is not None:
        confidence += 0.1
    if event.marketing_budget is not None:
        confidence += 0.05
    if days_since(event.created_at, as_of) < NEW_EVENT_DAYS:
        confidence -= 0.1

    return round(min(max(confidence, 0.0), MAX_CONFIDENCE), 4)


def historical_std_dev(samples: List[HistoricalEventSample]) -> float:
    if not samples:
        return settings.DEFAULT_ATTENDANCE_STD_DEV
    return float(np.std([s.attendance for s in samples]))


def calculate_confidence_intervals(
    prediction: int, confidence: float, samples: List[HistoricalEventSample]
) -> ConfidenceIntervals:
    margin = historical_std_dev(samples) * (1 - confidence)

    intervals = {}
    for name, z_score in INTERVAL_Z_SCORES.items():
        intervals[name] = ConfidenceInterval(
            lower_bound=max(round_half_up(prediction - margin * z_score), 0),
            upper_bound=round_half_up(prediction + margin * z_score),
        )
    return ConfidenceIntervals(**intervals)


# ===========================================
# Breakdown and comparison
# ===========================================


def calculate_daily_multiplier(day: date, duration: int, day_index: int) -> float:
    multiplier = 1.0

    if day.weekday() >= 5:
        multiplier *= 1.3

    if day_index == 0:
        multiplier *= 0.8  # Opening day
    elif day_index == duration - 1:
        multiplier *= 0.9
    elif duration > 2 and day_index == 1:
        multiplier *= 1.2  # Peak day

    return multiplier


def _daily_confidence_factors(day: date) -> List[DailyForecast.ConfidenceFactor]:
    factors = []
    if day.weekday() >= 5:
        factors.append(
            DailyForecast.ConfidenceFactor(factor="weekend", impact="positive", confidence=0.8)
        )
    if day.month in SUMMER_MONTHS:
        factors.append(
            DailyForecast.ConfidenceFactor(
                factor="summer_season", impact="positive", confidence=0.6
            )
        )
    elif day.month in WINTER_MONTHS:
        factors.append(
            DailyForecast.ConfidenceFactor(
                factor="winter_season", impact="negative", confidence=0.7
            )
        )
    return factors


def generate_daily_forecast(event: EventProfile, total_attendance: int) -> List[DailyForecast]:
    duration = event.duration_days
    daily = []

    for day_index in range(duration):
        day = event.start_date + timedelta(days=day_index)
        multiplier = calculate_daily_multiplier(day, duration, day_index)
        daily.append(
            DailyForecast(
                date=day,
                predicted_attendance=round_half_up(total_attendance * multiplier / duration),
                day_of_event=day_index + 1,
                day_of_week=day.strftime("%A"),
                confidence_factors=_daily_confidence_factors(day),
            )
        )

    return daily


def compare_with_historical_average(
    prediction: int, samples: List[HistoricalEventSample]
) -> HistoricalComparison:
    if not samples:
        return HistoricalComparison(comparison="no_historical_data")

    historical_average = float(np.mean([s.attendance for s in samples]))
    if historical_average == 0:
        return HistoricalComparison(comparison="no_historical_data")

    percentage_change = round((prediction - historical_average) / historical_average * 100, 1)
    if percentage_change > 5:
        trend = "increasing"
    elif percentage_change < -5:
        trend = "decreasing"
    else:
        trend = "stable"

    return HistoricalComparison(
        comparison="available",
        historical_average=round_half_up(historical_average),
        predicted_attendance=prediction,
        percentage_change=percentage_change,
        trend=trend,
    )


def generate_recommendations(prediction: int, event: EventProfile) -> List[Recommendation]:
    recommendations = []

    if event.capacity:
        utilization = prediction / event.capacity
        if utilization > 0.9:
            recommendations.append(
                Recommendation(
                    type="capacity_warning",
                    message="Predicted attendance is near venue capacity. Consider additional crowd control measures.",
                    priority="high",
                )
            )
        elif utilization < 0.3:
            recommendations.append(
                Recommendation(
                    type="marketing_boost",
                    message="Predicted attendance is low. Consider increasing marketing efforts.",
                    priority="medium",
                )
            )

    if prediction > 5000:
        recommendations.append(
            Recommendation(
                type="logistics",
                message="Large attendance predicted. Ensure adequate parking, restrooms, and food vendors.",
                priority="high",
            )
        )

    return recommendations


# ===========================================
# Public operation
# ===========================================


def build_forecast(request: AttendanceForecastRequest) -> ForecastResult:
    """
    Computes the forecast, raising engine errors for invalid input.
    Used directly by the recommendation orchestrator.
    """
    event = validate_event_profile(request.event)
    samples = request.historical_samples
    as_of = resolve_as_of(request.as_of)

    base_prediction, used_similar_events = calculate_base_attendance(event, samples)
    factors = ForecastFactors(
        base_prediction=base_prediction,
        weather_impact=calculate_weather_impact(request.weather),
        marketing_impact=calculate_marketing_impact(event),
        competition_factor=calculate_competition_factor(event, request.competing_events),
        seasonal_adjustment=calculate_seasonal_adjustment(event),
    )

    predicted_attendance = round_half_up(
        factors.base_prediction
        * factors.weather_impact
        * factors.marketing_impact
        * factors.competition_factor
        * factors.seasonal_adjustment
    )
    confidence = calculate_confidence_score(event, samples, as_of)

    defaults_used = []
    if request.weather is None:
        defaults_used.append("weather")
    if not samples:
        defaults_used.append("historical_samples")
    elif not used_similar_events:
        defaults_used.append("similar_events")
    if event.capacity is None:
        defaults_used.append("capacity")

    logger.info(
        f"Forecast for event {event.event_id}: {predicted_attendance} "
        f"(confidence {confidence}, defaults {defaults_used})"
    )

    return ForecastResult(
        predicted_attendance=predicted_attendance,
        confidence_score=confidence,
        factors=factors,
        confidence_intervals=calculate_confidence_intervals(
            predicted_attendance, confidence, samples
        ),
        daily_forecast=generate_daily_forecast(event, predicted_attendance),
        historical_comparison=compare_with_historical_average(predicted_attendance, samples),
        recommendations=generate_recommendations(predicted_attendance, event),
        defaults_used=defaults_used,
    )


@structured_errors("Attendance prediction")
def forecast_attendance(
    request: AttendanceForecastRequest,
) -> Union[ForecastResult, ErrorResponse]:
    """
    Predicts event attendance with a confidence score, confidence intervals
    and a per-day breakdown.
    """
    return build_forecast(request)
