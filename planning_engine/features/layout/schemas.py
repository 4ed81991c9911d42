# planning_engine/features/layout/schemas.py
"""
Pydantic schemas for vendor layout optimization.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class VendorCategory(str, Enum):
    """Vendor grouping used for placement priority."""

    FOOD = "food"
    RETAIL = "retail"
    SERVICE = "service"
    ENTERTAINMENT = "entertainment"


class OptimizationPriority(str, Enum):
    CROWD_FLOW = "crowd_flow"
    VENDOR_REVENUE = "vendor_revenue"


class Vendor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    business_type: str = ""
    width: Optional[float] = Field(None, gt=0, description="Requested booth width (m)")
    height: Optional[float] = Field(None, gt=0, description="Requested booth depth (m)")


class VenueSpace(BaseModel):
    model_config = ConfigDict(frozen=True)

    capacity: Optional[int] = None
    outdoor: bool = False
    venue_type: Optional[str] = Field(None, examples=["outdoor_park", "indoor_hall", "mixed"])


class LayoutConstraints(BaseModel):
    """All distances in meters. Fields set explicitly override venue defaults."""

    model_config = ConfigDict(frozen=True)

    min_distance_between_vendors: float = 3.0
    max_walking_distance: float = 50.0
    crowd_flow_efficiency: float = 0.8
    emergency_access_width: float = 4.0


class LayoutOptimizationRequest(BaseModel):
    venue: Optional[VenueSpace] = None
    vendors: List[Vendor] = []
    constraints: Optional[LayoutConstraints] = None
    alternative_count: Optional[int] = Field(None, ge=0, le=10)


class VenueAnalysis(BaseModel):
    total_area: float
    usable_area: float
    recommended_vendor_count: int
    layout_constraints: LayoutConstraints


class VendorPlacement(BaseModel):
    x: float
    y: float
    width: float
    height: float
    orientation: str = "facing_pathway"
    category: VendorCategory


class Pathway(BaseModel):
    type: str
    width: float
    coordinates: List[Tuple[float, float]]


class EmergencyExit(BaseModel):
    location: str
    width: float


class FacilityPoint(BaseModel):
    x: float
    y: float
    type: Optional[str] = None


class FacilityLocations(BaseModel):
    restrooms: List[FacilityPoint] = []
    info_booth: Optional[FacilityPoint] = None
    first_aid: Optional[FacilityPoint] = None
    security: Optional[FacilityPoint] = None


class LayoutPlan(BaseModel):
    # Insertion order is placement order
    vendor_positions: Dict[str, VendorPlacement] = {}
    pathways: List[Pathway] = []
    emergency_exits: List[EmergencyExit] = []
    facility_locations: FacilityLocations = Field(default_factory=FacilityLocations)


class LayoutRecommendation(BaseModel):
    type: str
    message: str
    priority: str


class AlternativeLayout(BaseModel):
    id: int
    optimization_priority: OptimizationPriority
    layout: LayoutPlan
    efficiency_score: float = Field(..., ge=0, le=1)
    crowd_flow_score: float = Field(..., ge=0, le=1)
    accessibility_score: float = Field(..., ge=0, le=1)


class LayoutResult(BaseModel):
    success: bool = True
    venue_analysis: VenueAnalysis
    layout: LayoutPlan
    efficiency_score: float = Field(..., ge=0, le=1)
    crowd_flow_score: float = Field(..., ge=0, le=1)
    accessibility_score: float = Field(..., ge=0, le=1)
    recommendations: List[LayoutRecommendation] = []
    alternative_layouts: List[AlternativeLayout] = []
