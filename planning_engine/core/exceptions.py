"""
Custom exception hierarchy for the planning engine.
All exceptions inherit from PlanningEngineError for consistent handling.

Engine errors never cross the public boundary as exceptions: operations
decorated with ``structured_errors`` convert them into an ``ErrorResponse``.
"""

import functools
import logging
from typing import Callable, List, Optional

from planning_engine.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


class PlanningEngineError(Exception):
    """Base exception for all planning engine errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "PLANNING_ERROR",
        details: Optional[dict] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ===========================================
# Input Exceptions
# ===========================================


class MissingInputError(PlanningEngineError):
    """A required input is absent or malformed."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(
            message=message,
            error_code="MISSING_INPUT",
            details={"field": field} if field else {},
        )


class InvalidDateRangeError(MissingInputError):
    """The event ends before it starts."""

    def __init__(self, start_date, end_date):
        super().__init__(
            message=f"End date {end_date} is before start date {start_date}",
            field="end_date",
        )
        self.details = {
            "field": "end_date",
            "start_date": str(start_date),
            "end_date": str(end_date),
        }


# ===========================================
# Validation Exceptions
# ===========================================


class ValidationFailure(PlanningEngineError):
    """A computed result violates one or more hard invariants."""

    def __init__(self, subject: str, violations: List[str]):
        self.subject = subject
        self.violations = list(violations)
        super().__init__(
            message=f"{subject} validation failed: {', '.join(self.violations)}",
            error_code="VALIDATION_FAILED",
            details={"violations": self.violations},
        )


# ===========================================
# Boundary
# ===========================================


def structured_errors(operation: str) -> Callable:
    """
    Wrap a public engine operation so that failures come back as an
    ``ErrorResponse`` instead of an exception.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except PlanningEngineError as e:
                logger.warning(f"{operation} rejected: {e.message}")
                return ErrorResponse(
                    error=e.message, error_code=e.error_code, details=e.details
                )
            except Exception as e:
                logger.exception(f"{operation} error: {e}")
                return ErrorResponse(
                    error=f"{operation} failed: {e}", error_code="INTERNAL_ERROR"
                )

        return wrapper

    return decorator
