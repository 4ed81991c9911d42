# planning_engine/features/layout/service.py
"""
Vendor layout optimization.

Vendors are grouped by category and placed on a square grid sized from the
venue's usable area, food vendors first so they end up nearest the entrance.
The plan is validated against spacing and emergency-access rules and then
scored for efficiency, crowd flow and accessibility.
"""

import logging
import math
from itertools import combinations
from typing import Dict, List, Optional, Tuple, Union

from planning_engine.core.config import settings
from planning_engine.core.exceptions import (
    MissingInputError,
    ValidationFailure,
    structured_errors,
)
from planning_engine.schemas.common import ErrorResponse
from planning_engine.utils.geometry import distance, polyline_length, rectangles_overlap
from planning_engine.utils.rounding import round_half_up

from .schemas import (
    AlternativeLayout,
    EmergencyExit,
    FacilityLocations,
    FacilityPoint,
    LayoutConstraints,
    LayoutOptimizationRequest,
    LayoutPlan,
    LayoutRecommendation,
    LayoutResult,
    OptimizationPriority,
    Pathway,
    Vendor,
    VendorCategory,
    VendorPlacement,
    VenueAnalysis,
    VenueSpace,
)

logger = logging.getLogger(__name__)

# Checked in order, first match wins
CATEGORY_KEYWORDS = (
    (VendorCategory.FOOD, ("food", "restaurant", "catering", "beverage")),
    (VendorCategory.RETAIL, ("retail", "shop", "merchandise", "craft")),
    (VendorCategory.SERVICE, ("service", "consultation", "repair")),
    (VendorCategory.ENTERTAINMENT, ("entertainment", "music", "performance")),
)

PLACEMENT_ORDER = (
    VendorCategory.FOOD,
    VendorCategory.RETAIL,
    VendorCategory.SERVICE,
    VendorCategory.ENTERTAINMENT,
)

VENUE_TYPE_MULTIPLIERS = {"outdoor_park": 1.2, "indoor_hall": 0.8, "mixed": 1.0}

FOOTPRINT_RATIO = 0.8  # 20% of each cell is left for circulation
BOUNDARY_CELLS = math.sqrt(1000)
SECONDARY_PATHWAY_WIDTH = 3.0
MIN_PATHWAY_WIDTH = 2.0
ACCESSIBLE_PATHWAY_WIDTH = 3.0
MIN_EMERGENCY_EXITS = 2
OPTIMAL_VENDOR_SPACING = 20.0  # meters
PATHWAY_LENGTH_PER_VENDOR = 10.0  # meters
CROWD_FLOW_WIDENING = 1.2


# ===========================================
# Venue and vendor analysis
# ===========================================


def determine_vendor_category(vendor: Vendor) -> VendorCategory:
    business_type = (vendor.business_type or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in business_type for keyword in keywords):
            return category
    return VendorCategory.RETAIL


def categorize_vendors(vendors: List[Vendor]) -> Dict[VendorCategory, List[Vendor]]:
    categories = {category: [] for category in PLACEMENT_ORDER}
    for vendor in vendors:
        categories[determine_vendor_category(vendor)].append(vendor)
    return categories


def resolve_constraints(
    venue: VenueSpace, overrides: Optional[LayoutConstraints] = None
) -> LayoutConstraints:
    """Defaults, widened for outdoor venues, then any caller-set values."""
    values = LayoutConstraints().model_dump()
    if venue.outdoor:
        values["min_distance_between_vendors"] = 4.0
        values["emergency_access_width"] = 5.0
    if overrides is not None:
        values.update(overrides.model_dump(exclude_unset=True))
    return LayoutConstraints(**values)


def calculate_recommended_vendor_count(venue: VenueSpace) -> int:
    # One vendor per ~125 people
    base_count = (venue.capacity // 125) * VENUE_TYPE_MULTIPLIERS.get(venue.venue_type, 1.0)
    return max(round_half_up(base_count), 5)


def analyze_venue_space(
    venue: Optional[VenueSpace], overrides: Optional[LayoutConstraints] = None
) -> VenueAnalysis:
    if venue is None:
        raise MissingInputError("Venue is required", field="venue")
    if venue.capacity is None or venue.capacity <= 0:
        raise MissingInputError("Venue capacity not specified", field="venue.capacity")

    return VenueAnalysis(
        total_area=venue.capacity * 2,  # ~2 m2 per person
        usable_area=venue.capacity * 1.5,  # Net of pathways and facilities
        recommended_vendor_count=calculate_recommended_vendor_count(venue),
        layout_constraints=resolve_constraints(venue, overrides),
    )


# ===========================================
# Layout generation
# ===========================================


def advance_position(x: float, y: float, grid_size: float) -> Tuple[float, float]:
    """Next raster cell, wrapping to a new row at the venue boundary."""
    max_x = BOUNDARY_CELLS * grid_size
    if x + grid_size < max_x:
        return x + grid_size, y
    return 0.0, y + grid_size


def place_vendors(
    analysis: VenueAnalysis, categories: Dict[VendorCategory, List[Vendor]]
) -> Dict[str, VendorPlacement]:
    total_vendors = sum(len(vendors) for vendors in categories.values())
    grid_size = math.sqrt(analysis.usable_area / total_vendors)
    footprint = grid_size * FOOTPRINT_RATIO

    positions = {}
    x, y = 0.0, 0.0
    for category in PLACEMENT_ORDER:
        for vendor in categories[category]:
            positions[vendor.id] = VendorPlacement(
                x=x, y=y, width=footprint, height=footprint, category=category
            )
            x, y = advance_position(x, y, grid_size)

    return positions


def build_pathways_and_exits(
    constraints: LayoutConstraints,
) -> Tuple[List[Pathway], List[EmergencyExit]]:
    pathways = [
        Pathway(
            type="main",
            width=constraints.emergency_access_width,
            coordinates=[(0, 0), (100, 0)],
        ),
        Pathway(type="secondary", width=SECONDARY_PATHWAY_WIDTH, coordinates=[(0, 0), (0, 100)]),
    ]
    exits = [
        EmergencyExit(location="north", width=constraints.emergency_access_width),
        EmergencyExit(location="south", width=constraints.emergency_access_width),
    ]
    return pathways, exits


def position_facilities() -> FacilityLocations:
    return FacilityLocations(
        restrooms=[
            FacilityPoint(x=20, y=20, type="public"),
            FacilityPoint(x=80, y=80, type="public"),
        ],
        info_booth=FacilityPoint(x=10, y=10),  # Near the entrance
        first_aid=FacilityPoint(x=50, y=50),
        security=FacilityPoint(x=5, y=5),
    )


def generate_layout(
    analysis: VenueAnalysis, categories: Dict[VendorCategory, List[Vendor]]
) -> LayoutPlan:
    pathways, exits = build_pathways_and_exits(analysis.layout_constraints)
    return LayoutPlan(
        vendor_positions=place_vendors(analysis, categories),
        pathways=pathways,
        emergency_exits=exits,
        facility_locations=position_facilities(),
    )


def validate_layout(layout: LayoutPlan, constraints: LayoutConstraints) -> List[str]:
    """Returns every violated constraint, empty when the layout is valid."""
    errors = []
    min_distance = constraints.min_distance_between_vendors

    # O(n^2) on purpose: violations are reported in pair order
    for (id_a, pos_a), (id_b, pos_b) in combinations(layout.vendor_positions.items(), 2):
        gap = distance(pos_a, pos_b)
        if gap < min_distance:
            errors.append(f"Vendors {id_a} and {id_b} too close: {gap:.2f}m < {min_distance}m")
        if rectangles_overlap(pos_a, pos_b):
            errors.append(f"Vendor footprints overlap: {id_a} and {id_b}")

    if len(layout.emergency_exits) < MIN_EMERGENCY_EXITS:
        errors.append("Insufficient emergency exits")

    for pathway in layout.pathways:
        if pathway.width < MIN_PATHWAY_WIDTH:
            errors.append(f"Pathway too narrow: {pathway.width}m")

    return errors


# ===========================================
# Scoring
# ===========================================


def vendor_distribution_score(layout: LayoutPlan) -> float:
    positions = list(layout.vendor_positions.values())
    if len(positions) < 2:
        return 0.5

    total_distance = sum(distance(a, b) for a, b in combinations(positions, 2))
    pair_count = len(positions) * (len(positions) - 1) / 2
    return min((total_distance / pair_count) / OPTIMAL_VENDOR_SPACING, 1.0)


def pathway_efficiency_score(layout: LayoutPlan) -> float:
    vendor_count = len(layout.vendor_positions)
    if vendor_count == 0:
        ratio_score = 0.0
    else:
        ratio_score = min(len(layout.pathways) / vendor_count * 5, 1.0)

    all_accessible = all(p.width >= ACCESSIBLE_PATHWAY_WIDTH for p in layout.pathways)
    width_score = 1.0 if all_accessible else 0.8

    return (ratio_score + width_score) / 2


def facility_placement_score(layout: LayoutPlan) -> float:
    facilities = layout.facility_locations
    if not facilities.restrooms and facilities.info_booth is None:
        return 0.5

    info_score = 1.0 if facilities.info_booth and facilities.info_booth.x < 20 else 0.5
    restroom_score = 1.0 if len(facilities.restrooms) >= 2 else 0.5
    return (info_score + restroom_score) / 2


def calculate_layout_efficiency(layout: LayoutPlan) -> float:
    score = 0.7
    if vendor_distribution_score(layout) > 0.8:
        score += 0.15
    if pathway_efficiency_score(layout) > 0.8:
        score += 0.1
    if facility_placement_score(layout) > 0.8:
        score += 0.05
    return round(min(score, 1.0), 4)


def calculate_pathway_coverage(layout: LayoutPlan) -> float:
    vendor_count = len(layout.vendor_positions)
    if vendor_count == 0:
        return 0.0
    total_length = sum(polyline_length(p.coordinates) for p in layout.pathways)
    return min(total_length / (vendor_count * PATHWAY_LENGTH_PER_VENDOR), 1.0)


def calculate_bottleneck_score(layout: LayoutPlan) -> float:
    min_width = min((p.width for p in layout.pathways), default=0.0)
    if min_width >= 4.0:
        return 1.0
    if min_width >= 3.0:
        return 0.8
    if min_width >= 2.0:
        return 0.6
    return 0.4


def calculate_accessibility_score(layout: LayoutPlan) -> float:
    score = 0.4 if len(layout.emergency_exits) >= MIN_EMERGENCY_EXITS else 0.2

    if layout.pathways:
        accessible = sum(1 for p in layout.pathways if p.width >= ACCESSIBLE_PATHWAY_WIDTH)
        score += accessible / len(layout.pathways) * 0.4

    if layout.facility_locations.restrooms:
        score += 0.2

    return round(score, 4)


def calculate_crowd_flow_score(layout: LayoutPlan) -> float:
    total = (
        calculate_pathway_coverage(layout)
        + calculate_bottleneck_score(layout)
        + calculate_accessibility_score(layout)
    )
    return round(total / 3, 4)


# ===========================================
# Recommendations and alternatives
# ===========================================


def generate_layout_recommendations(
    layout: LayoutPlan, vendors: List[Vendor]
) -> List[LayoutRecommendation]:
    recommendations = []
    vendor_count = len(layout.vendor_positions)

    if vendor_count > 50:
        recommendations.append(
            LayoutRecommendation(
                type="density_warning",
                message="High vendor density detected. Consider expanding venue or reducing vendor count.",
                priority="medium",
            )
        )

    min_width = min((p.width for p in layout.pathways), default=None)
    if min_width is not None and min_width < ACCESSIBLE_PATHWAY_WIDTH:
        recommendations.append(
            LayoutRecommendation(
                type="pathway_width",
                message="Some pathways are narrow. Consider widening for better crowd flow.",
                priority="high",
            )
        )

    if len(layout.emergency_exits) < 3 and vendor_count > 30:
        recommendations.append(
            LayoutRecommendation(
                type="emergency_access",
                message="Large vendor count requires additional emergency exits.",
                priority="high",
            )
        )

    oversized = [
        vendor.id
        for vendor in vendors
        if (vendor.width and vendor.width > layout.vendor_positions[vendor.id].width)
        or (vendor.height and vendor.height > layout.vendor_positions[vendor.id].height)
    ]
    if oversized:
        recommendations.append(
            LayoutRecommendation(
                type="footprint_exceeded",
                message=f"Requested booth size exceeds the allocated cell for: {', '.join(oversized)}.",
                priority="medium",
            )
        )

    return recommendations


def generate_layout_variant(
    analysis: VenueAnalysis,
    categories: Dict[VendorCategory, List[Vendor]],
    priority: OptimizationPriority,
) -> LayoutPlan:
    layout = generate_layout(analysis, categories)

    if priority == OptimizationPriority.CROWD_FLOW:
        layout.pathways = [
            p.model_copy(update={"width": p.width * CROWD_FLOW_WIDENING}) for p in layout.pathways
        ]
    # TODO: reorder high-revenue categories into prime cells for VENDOR_REVENUE

    return layout


def generate_alternative_layouts(
    analysis: VenueAnalysis,
    categories: Dict[VendorCategory, List[Vendor]],
    count: int,
) -> List[AlternativeLayout]:
    alternatives = []
    for i in range(count):
        priority = (
            OptimizationPriority.CROWD_FLOW if i % 2 == 0 else OptimizationPriority.VENDOR_REVENUE
        )
        variant = generate_layout_variant(analysis, categories, priority)
        alternatives.append(
            AlternativeLayout(
                id=i + 1,
                optimization_priority=priority,
                layout=variant,
                efficiency_score=calculate_layout_efficiency(variant),
                crowd_flow_score=calculate_crowd_flow_score(variant),
                accessibility_score=calculate_accessibility_score(variant),
            )
        )
    return alternatives


# ===========================================
# Public operation
# ===========================================


def build_layout(request: LayoutOptimizationRequest) -> LayoutResult:
    if not request.vendors:
        raise MissingInputError("Venue and vendors are required", field="vendors")

    vendor_ids = [vendor.id for vendor in request.vendors]
    duplicates = sorted({vid for vid in vendor_ids if vendor_ids.count(vid) > 1})
    if duplicates:
        raise MissingInputError(
            f"Duplicate vendor ids: {', '.join(duplicates)}", field="vendors"
        )

    analysis = analyze_venue_space(request.venue, request.constraints)
    constraints = analysis.layout_constraints
    categories = categorize_vendors(request.vendors)

    layout = generate_layout(analysis, categories)

    errors = validate_layout(layout, constraints)
    if errors:
        raise ValidationFailure("Layout", errors)

    alternative_count = (
        request.alternative_count
        if request.alternative_count is not None
        else settings.ALTERNATIVE_LAYOUT_COUNT
    )

    logger.info(
        f"Placed {len(layout.vendor_positions)} vendors on "
        f"{analysis.usable_area}m2 usable area"
    )

    return LayoutResult(
        venue_analysis=analysis,
        layout=layout,
        efficiency_score=calculate_layout_efficiency(layout),
        crowd_flow_score=calculate_crowd_flow_score(layout),
        accessibility_score=calculate_accessibility_score(layout),
        recommendations=generate_layout_recommendations(layout, request.vendors),
        alternative_layouts=generate_alternative_layouts(analysis, categories, alternative_count),
    )


@structured_errors("Layout optimization")
def optimize_layout(
    request: LayoutOptimizationRequest,
) -> Union[LayoutResult, ErrorResponse]:
    """
    Places vendors on the venue grid, validates spacing and emergency access,
    and scores the resulting plan.
    """
    return build_layout(request)
