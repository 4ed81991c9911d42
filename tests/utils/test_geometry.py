# tests/utils/test_geometry.py
import math

import pytest

from planning_engine.features.layout.schemas import VendorCategory, VendorPlacement
from planning_engine.utils.geometry import distance, polyline_length, rectangles_overlap


def test_distance_accepts_mappings_and_models():
    placement = VendorPlacement(x=3, y=4, width=1, height=1, category=VendorCategory.FOOD)

    assert distance({"x": 0, "y": 0}, placement) == pytest.approx(5.0)
    assert distance(placement, placement) == 0.0


@pytest.mark.parametrize(
    "r1, r2, expected",
    [
        # Partial overlap
        ({"x": 0, "y": 0, "width": 10, "height": 10}, {"x": 5, "y": 5, "width": 10, "height": 10}, True),
        # Shared edge only
        ({"x": 0, "y": 0, "width": 10, "height": 10}, {"x": 10, "y": 0, "width": 10, "height": 10}, False),
        # Shared corner only
        ({"x": 0, "y": 0, "width": 10, "height": 10}, {"x": 10, "y": 10, "width": 5, "height": 5}, False),
        # One inside the other
        ({"x": 0, "y": 0, "width": 10, "height": 10}, {"x": 2, "y": 2, "width": 1, "height": 1}, True),
        # Apart
        ({"x": 0, "y": 0, "width": 1, "height": 1}, {"x": 5, "y": 5, "width": 1, "height": 1}, False),
    ],
)
def test_rectangles_overlap(r1, r2, expected):
    assert rectangles_overlap(r1, r2) is expected
    assert rectangles_overlap(r2, r1) is expected


def test_polyline_length():
    assert polyline_length([]) == 0.0
    assert polyline_length([(1, 1)]) == 0.0
    assert polyline_length([(0, 0), (100, 0)]) == pytest.approx(100.0)
    assert polyline_length([(0, 0), (3, 4), (3, 10)]) == pytest.approx(11.0)
    assert polyline_length([(0, 0), (1, 1)]) == pytest.approx(math.sqrt(2))
