"""Vendor layout optimization feature module."""

from planning_engine.features.layout.router import router
from planning_engine.features.layout.schemas import (
    LayoutOptimizationRequest,
    LayoutResult,
)
from planning_engine.features.layout.service import build_layout, optimize_layout

__all__ = [
    "router",
    "LayoutOptimizationRequest",
    "LayoutResult",
    "build_layout",
    "optimize_layout",
]
