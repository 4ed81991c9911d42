# planning_engine/utils/validators.py
"""
Input validation shared by the planning features.
"""

from datetime import date
from typing import Optional

from planning_engine.core.exceptions import InvalidDateRangeError, MissingInputError
from planning_engine.schemas.common import EventProfile


def validate_event_profile(event: Optional[EventProfile]) -> EventProfile:
    """
    Ensure an event profile is present and its dates are ordered.

    Args:
        event: Event profile supplied by the caller

    Returns:
        The validated event profile

    Raises:
        MissingInputError: If the profile is absent
        InvalidDateRangeError: If end_date is before start_date
    """
    if event is None:
        raise MissingInputError("Event profile is required", field="event")

    if event.end_date < event.start_date:
        raise InvalidDateRangeError(event.start_date, event.end_date)

    return event


def resolve_as_of(as_of: Optional[date]) -> date:
    """Reference date for age-based rules. Callers should pass it explicitly."""
    return as_of if as_of is not None else date.today()


def days_since(earlier: date, as_of: date) -> int:
    return (as_of - earlier).days
