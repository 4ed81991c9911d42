from datetime import date

import pytest
from fastapi.testclient import TestClient

from planning_engine.main import app  # Import our main FastAPI app
from planning_engine.schemas.common import EventProfile

AS_OF = date(2025, 1, 15)


@pytest.fixture(scope="module")
def client() -> TestClient:
    """
    A fixture that provides a test client for the FastAPI application.
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def make_event():
    """
    Builds an EventProfile with sensible defaults. The event was created
    well before AS_OF so it does not count as new unless overridden.
    """

    def _make(**overrides) -> EventProfile:
        values = {
            "event_id": "evt_1",
            "capacity": 2000,
            "start_date": date(2025, 5, 10),
            "end_date": date(2025, 5, 10),
            "created_at": date(2024, 1, 1),
        }
        values.update(overrides)
        return EventProfile(**values)

    return _make
