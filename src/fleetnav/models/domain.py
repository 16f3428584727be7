"""Domain models for waypoints, traffic context and computed route metrics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Sequence, Tuple

# (longitude, latitude) in decimal degrees, WGS84.
Coordinate = Tuple[float, float]


@dataclass(frozen=True, slots=True)
class TrafficContext:
    """Caller-supplied traffic conditions for a single computation."""

    congestion_levels: Mapping[str, float] = field(default_factory=dict)
    incident_locations: Sequence[Coordinate] = ()
    road_works: Sequence[Coordinate] = ()

    def congestion_at(self, key: str, default: float = 0.0) -> float:
        level = self.congestion_levels.get(key)
        return default if level is None else float(level)


@dataclass(frozen=True, slots=True)
class RouteSegment:
    """Leg between two consecutive waypoints."""

    start: Coordinate
    end: Coordinate
    distance: float
    duration: float
    road_type: str
    traffic_level: float
    safety_score: float
    emergency_access: bool


@dataclass(frozen=True, slots=True)
class OptimizationFactors:
    traffic_avoidance: float
    distance_optimization: float
    time_optimization: float
    safety_optimization: float


@dataclass(frozen=True, slots=True)
class RouteMetrics:
    """Composite result of a route evaluation."""

    waypoints: Tuple[Coordinate, ...]
    vehicle_type: str
    total_distance: float
    total_duration: float
    traffic_delay: float
    fuel_efficiency: float
    safety_score: float
    emergency_priority: bool
    optimization_factors: OptimizationFactors
    segments: Tuple[RouteSegment, ...]
