# planning_engine/features/api.py
from fastapi import APIRouter

from planning_engine.features import (
    budget,
    forecasting,
    layout,
    recommendations,
    risk,
)

api_router = APIRouter()

api_router.include_router(forecasting.router)
api_router.include_router(layout.router)
api_router.include_router(budget.router)
api_router.include_router(risk.router)
api_router.include_router(recommendations.router)
