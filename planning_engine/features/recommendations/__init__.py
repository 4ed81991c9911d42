"""Composite planning recommendations feature module."""

from planning_engine.features.recommendations.router import get_orchestrator, router
from planning_engine.features.recommendations.service import PlanningOrchestrator

__all__ = ["router", "get_orchestrator", "PlanningOrchestrator"]
