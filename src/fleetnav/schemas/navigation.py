"""Navigation optimisation request/response schemas."""

from __future__ import annotations

from typing import Annotated, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

LonLat = Tuple[float, float]
CongestionLevel = Annotated[float, Field(ge=0.0, le=1.0)]


class RouteConstraints(BaseModel):
    max_distance: Optional[float] = Field(None, gt=0, description="Maximum route length in meters.")
    max_duration: Optional[float] = Field(None, gt=0, description="Maximum route duration in seconds.")
    avoid_congestion: Optional[bool] = None
    prefer_emergency_routes: Optional[bool] = None
    avoid_tolls: Optional[bool] = None
    avoid_highways: Optional[bool] = None


class TrafficData(BaseModel):
    congestion_levels: Dict[str, CongestionLevel] = Field(
        default_factory=dict,
        description='Congestion in [0, 1] keyed by "lon,lat" rounded to 4 decimals.',
    )
    incident_locations: List[LonLat] = Field(default_factory=list)
    road_works: List[LonLat] = Field(default_factory=list)


class OptimizeRequest(BaseModel):
    waypoints: List[LonLat] = Field(..., description="Ordered [longitude, latitude] pairs.")
    vehicle_type: str = Field(default="car", description="ambulance, fire, police, bus, car or motorcycle.")
    constraints: RouteConstraints = Field(default_factory=RouteConstraints)
    traffic_data: Optional[TrafficData] = None


class OptimizationFactorsModel(BaseModel):
    traffic_avoidance: float
    distance_optimization: float
    time_optimization: float
    safety_optimization: float


class RouteSegmentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: LonLat = Field(..., alias="from")
    to: LonLat
    distance: float
    duration: float
    road_type: str
    traffic_level: float
    safety_score: float
    emergency_access: bool


class OptimizedRouteModel(BaseModel):
    route_id: str
    waypoints: List[LonLat]
    total_distance: float
    total_duration: float
    traffic_delay: float
    fuel_efficiency: float
    safety_score: float
    emergency_priority: bool
    optimization_factors: OptimizationFactorsModel
    segments: List[RouteSegmentModel]


class RouteStepModel(BaseModel):
    instruction: str
    distance: int
    duration: int
    maneuver: str
    bearing_before: float
    bearing_after: float
    road_type: str
    emergency_access: bool


class OptimizationMetadata(BaseModel):
    algorithm: str
    factors_considered: List[str]
    vehicle_type: str
    constraints_applied: List[str]
    generated_at: str


class EmergencyOptimizationModel(BaseModel):
    type: str
    description: str
    estimated_time_saved: float = Field(..., description="Advisory saving in seconds; not subtracted from the route duration.")
    affected_intersections: List[str] = Field(default_factory=list)


class TrafficSummaryModel(BaseModel):
    total_congestion: float
    average_speed: float = Field(..., description="Average speed in km/h.")
    total_delay: float
    incident_count: int
    road_works_count: int


class OptimizeResult(BaseModel):
    optimized_route: OptimizedRouteModel
    steps: List[RouteStepModel]
    emergency_optimizations: List[EmergencyOptimizationModel] = Field(default_factory=list)
    traffic_summary: TrafficSummaryModel
    optimization_metadata: OptimizationMetadata


class OptimizeResponse(BaseModel):
    success: bool = True
    data: OptimizeResult
