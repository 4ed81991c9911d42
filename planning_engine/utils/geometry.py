# planning_engine/utils/geometry.py
"""
2-D primitives shared by layout planning and venue analysis.

Points and rectangles may be pydantic models, plain objects or mappings,
as long as they expose ``x``/``y`` (and ``width``/``height`` for rectangles).
"""

import math
from typing import Any, Sequence, Tuple


def _coord(item: Any, name: str) -> float:
    if isinstance(item, dict):
        return float(item[name])
    return float(getattr(item, name))


def distance(a: Any, b: Any) -> float:
    """Euclidean distance between two points."""
    dx = _coord(a, "x") - _coord(b, "x")
    dy = _coord(a, "y") - _coord(b, "y")
    return math.sqrt(dx**2 + dy**2)


def rectangles_overlap(r1: Any, r2: Any) -> bool:
    """
    True when two axis-aligned rectangles share interior area.
    Rectangles that only touch along an edge or corner do not overlap.
    """
    x1, y1 = _coord(r1, "x"), _coord(r1, "y")
    x2, y2 = _coord(r2, "x"), _coord(r2, "y")
    return (
        x1 < x2 + _coord(r2, "width")
        and x2 < x1 + _coord(r1, "width")
        and y1 < y2 + _coord(r2, "height")
        and y2 < y1 + _coord(r1, "height")
    )


def polyline_length(points: Sequence[Tuple[float, float]]) -> float:
    """Total length of the segments joining consecutive points."""
    if len(points) < 2:
        return 0.0

    total_length = 0.0
    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        total_length += math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)
    return total_length
