"""Route metrics engine.

Pure functions that turn an ordered list of (lon, lat) waypoints, a vehicle
type and optional traffic context into distance, duration, delay, fuel,
safety and normalised optimisation scores. Nothing here performs I/O or keeps
state between calls.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from ...config import Settings, settings
from ...models.domain import (
    Coordinate,
    OptimizationFactors,
    RouteMetrics,
    RouteSegment,
    TrafficContext,
)
from ...models.vehicles import VehicleProfile, resolve_vehicle_profile
from ..geospatial import congestion_key, haversine_m, midpoint, validate_coordinate
from ..errors import InvalidInputError

logger = logging.getLogger(__name__)

CONGESTION_DELAY_FACTOR = 0.5
HIGH_CONGESTION = 0.7
MEDIUM_CONGESTION = 0.4
HIGH_CONGESTION_PENALTY = 10
MEDIUM_CONGESTION_PENALTY = 5
INCIDENT_ROUTE_PENALTY = 5
ROAD_WORK_ROUTE_PENALTY = 3
INTERMEDIATE_WAYPOINT_FUEL_FACTOR = 0.9
EMERGENCY_FUEL_FACTOR = 1.2
PRIMARY_ROAD_MIN_M = 1000.0
SECONDARY_ROAD_MIN_M = 500.0
DISTANCE_REFERENCE_M = 10_000.0
DURATION_REFERENCE_S = 1_800.0


@dataclass(frozen=True, slots=True)
class EngineParameters:
    """Tunable constants of the metrics model."""

    average_speed_mps: float = 8.33
    hospital_landmark: Coordinate = (75.7804, 11.2588)
    hospital_radius_m: float = 500.0
    incident_radius_m: float = 200.0
    incident_penalty: float = 20.0
    road_work_radius_m: float = 100.0
    road_work_penalty: float = 10.0
    default_traffic_level: float = 0.2

    def __post_init__(self) -> None:
        if self.average_speed_mps <= 0:
            raise ValueError("average_speed_mps must be positive")

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "EngineParameters":
        config = config or settings
        return cls(
            average_speed_mps=config.average_speed_mps,
            hospital_landmark=tuple(config.hospital_landmark),
            hospital_radius_m=config.hospital_radius_m,
            incident_radius_m=config.incident_radius_m,
            incident_penalty=config.incident_penalty,
            road_work_radius_m=config.road_work_radius_m,
            road_work_penalty=config.road_work_penalty,
            default_traffic_level=config.default_traffic_level,
        )


def _resolve_params(params: EngineParameters | None) -> EngineParameters:
    return params if params is not None else EngineParameters.from_settings()


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def validate_waypoints(waypoints: Sequence[Sequence[float]]) -> tuple[Coordinate, ...]:
    """Normalise waypoints to (lon, lat) tuples; at least two are required."""

    if waypoints is None or len(waypoints) < 2:
        raise InvalidInputError(
            "At least 2 waypoints are required for route optimization",
            waypoint_count=0 if waypoints is None else len(waypoints),
        )
    return tuple(validate_coordinate(point, index) for index, point in enumerate(waypoints))


def compute_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Haversine distance in meters between two coordinates."""

    return haversine_m(validate_coordinate(a), validate_coordinate(b))


def compute_total_distance(waypoints: Sequence[Sequence[float]]) -> float:
    points = validate_waypoints(waypoints)
    return sum(haversine_m(points[i], points[i + 1]) for i in range(len(points) - 1))


def estimate_base_duration(distance_m: float, params: EngineParameters | None = None) -> float:
    """Seconds needed to cover ``distance_m`` at the configured average speed."""

    if distance_m < 0:
        raise InvalidInputError("Distance must be non-negative", distance=distance_m)
    return distance_m / _resolve_params(params).average_speed_mps



def validate_traffic_context(traffic: TrafficContext | None) -> TrafficContext | None:
    """Check congestion levels and hazard coordinates before any computation.

    Congestion levels must be finite and within [0, 1]; incident and road-work
    locations must be valid coordinates.
    """

    if traffic is None:
        return None

    levels: dict[str, float] = {}
    for key, level in traffic.congestion_levels.items():
        try:
            value = float(level)
        except (TypeError, ValueError) as exc:
            raise InvalidInputError("Congestion level must be a number", key=key, level=repr(level)) from exc
        if not math.isfinite(value) or not 0.0 <= value <= 1.0:
            raise InvalidInputError("Congestion level must be within [0, 1]", key=key, level=repr(level))
        levels[key] = value

    return TrafficContext(
        congestion_levels=levels,
        incident_locations=tuple(
            validate_coordinate(point, index, "incident_locations")
            for index, point in enumerate(traffic.incident_locations)
        ),
        road_works=tuple(
            validate_coordinate(point, index, "road_works") for index, point in enumerate(traffic.road_works)
        ),
    )


def _traffic_delay(points: Sequence[Coordinate], traffic: TrafficContext | None, params: EngineParameters) -> float:
    if traffic is None:
        return 0.0
    total_delay = 0.0
    for index in range(1, len(points)):
        congestion = traffic.congestion_at(congestion_key(points[index]), 0.0)
        base_time = estimate_base_duration(haversine_m(points[index - 1], points[index]), params)
        total_delay += base_time * (1 + congestion * CONGESTION_DELAY_FACTOR) - base_time
    return total_delay


def compute_traffic_delay(
    waypoints: Sequence[Sequence[float]],
    traffic: TrafficContext | None = None,
    params: EngineParameters | None = None,
) -> float:
    """Extra seconds caused by congestion at each waypoint after the first.

    A fully congested waypoint (level 1.0) adds 50% to the time of the segment
    that ends there.
    """

    points = validate_waypoints(waypoints)
    return _traffic_delay(points, validate_traffic_context(traffic), _resolve_params(params))


def _fuel_efficiency(points: Sequence[Coordinate], profile: VehicleProfile) -> float:
    total_km = sum(haversine_m(start, end) for start, end in zip(points, points[1:])) / 1000
    consumption = total_km * (profile.fuel_rate_l_per_100km / 100)

    multiplier = 1.0
    if len(points) > 2:
        multiplier *= INTERMEDIATE_WAYPOINT_FUEL_FACTOR
    if profile.emergency:
        multiplier *= EMERGENCY_FUEL_FACTOR
    return consumption * multiplier


def compute_fuel_efficiency(waypoints: Sequence[Sequence[float]], vehicle_type: str | None) -> float:
    """Estimated fuel use in liters for the whole route."""

    points = validate_waypoints(waypoints)
    return _fuel_efficiency(points, resolve_vehicle_profile(vehicle_type))


def _safety_score(points: Sequence[Coordinate], traffic: TrafficContext | None) -> float:
    score = 100.0
    if traffic is None:
        return score

    for point in points:
        congestion = traffic.congestion_at(congestion_key(point), 0.0)
        if congestion >= HIGH_CONGESTION:
            score -= HIGH_CONGESTION_PENALTY
        elif congestion >= MEDIUM_CONGESTION:
            score -= MEDIUM_CONGESTION_PENALTY

    score -= len(traffic.incident_locations) * INCIDENT_ROUTE_PENALTY
    score -= len(traffic.road_works) * ROAD_WORK_ROUTE_PENALTY
    return max(score, 0.0)


def compute_safety_score(
    waypoints: Sequence[Sequence[float]],
    traffic: TrafficContext | None = None,
) -> float:
    """Route-wide safety score in [0, 100].

    Each congested waypoint is penalised on its own; incidents and road works
    are penalised per occurrence regardless of where they are.
    """

    points = validate_waypoints(waypoints)
    return _safety_score(points, validate_traffic_context(traffic))


def classify_road_type(
    start: Coordinate,
    end: Coordinate,
    distance_m: float,
    params: EngineParameters | None = None,
) -> str:
    params = _resolve_params(params)
    if distance_m > PRIMARY_ROAD_MIN_M:
        return "primary"
    if distance_m > SECONDARY_ROAD_MIN_M:
        return "secondary"
    landmark = params.hospital_landmark
    if haversine_m(start, landmark) < params.hospital_radius_m or haversine_m(end, landmark) < params.hospital_radius_m:
        return "emergency"
    return "local"


def _segment_safety(start: Coordinate, traffic: TrafficContext | None, params: EngineParameters) -> float:
    score = 100.0
    if traffic is None:
        return score
    if any(haversine_m(start, incident) < params.incident_radius_m for incident in traffic.incident_locations):
        score -= params.incident_penalty
    if any(haversine_m(start, work) < params.road_work_radius_m for work in traffic.road_works):
        score -= params.road_work_penalty
    return max(score, 0.0)


def _segments(
    points: Sequence[Coordinate],
    profile: VehicleProfile,
    traffic: TrafficContext | None,
    params: EngineParameters,
) -> list[RouteSegment]:
    segments: list[RouteSegment] = []
    for start, end in zip(points, points[1:]):
        distance = haversine_m(start, end)
        road_type = classify_road_type(start, end, distance, params)
        if traffic is None:
            traffic_level = params.default_traffic_level
        else:
            traffic_level = traffic.congestion_at(congestion_key(midpoint(start, end)), params.default_traffic_level)
        segments.append(
            RouteSegment(
                start=start,
                end=end,
                distance=distance,
                duration=estimate_base_duration(distance, params),
                road_type=road_type,
                traffic_level=traffic_level,
                safety_score=_segment_safety(start, traffic, params),
                emergency_access=road_type in ("emergency", "primary") or profile.emergency,
            )
        )
    return segments


def generate_segments(
    waypoints: Sequence[Sequence[float]],
    vehicle_type: str | None,
    traffic: TrafficContext | None = None,
    params: EngineParameters | None = None,
) -> list[RouteSegment]:
    points = validate_waypoints(waypoints)
    return _segments(
        points,
        resolve_vehicle_profile(vehicle_type),
        validate_traffic_context(traffic),
        _resolve_params(params),
    )


def compute_optimization_factors(segments: Sequence[RouteSegment]) -> OptimizationFactors:
    """Normalised [0, 1] quality scores, higher is better."""

    if not segments:
        raise InvalidInputError("At least one segment is required to score a route")

    count = len(segments)
    mean_traffic = sum(segment.traffic_level for segment in segments) / count
    total_distance = sum(segment.distance for segment in segments)
    total_duration = sum(segment.duration for segment in segments)
    mean_safety = sum(segment.safety_score for segment in segments) / count

    return OptimizationFactors(
        traffic_avoidance=_clamp(1 - mean_traffic, 0.0, 1.0),
        distance_optimization=_clamp(1 - total_distance / DISTANCE_REFERENCE_M, 0.0, 1.0),
        time_optimization=_clamp(1 - total_duration / DURATION_REFERENCE_S, 0.0, 1.0),
        safety_optimization=_clamp(mean_safety / 100, 0.0, 1.0),
    )


def optimize_route(
    waypoints: Sequence[Sequence[float]],
    vehicle_type: str | None,
    traffic: TrafficContext | None = None,
    params: EngineParameters | None = None,
) -> RouteMetrics:
    """Evaluate a waypoint sequence and return the composite metrics."""

    points = validate_waypoints(waypoints)
    traffic = validate_traffic_context(traffic)
    params = _resolve_params(params)
    profile = resolve_vehicle_profile(vehicle_type)

    segments = _segments(points, profile, traffic, params)
    total_distance = sum(segment.distance for segment in segments)
    traffic_delay = _traffic_delay(points, traffic, params)

    metrics = RouteMetrics(
        waypoints=points,
        vehicle_type=profile.name,
        total_distance=total_distance,
        total_duration=estimate_base_duration(total_distance, params) + traffic_delay,
        traffic_delay=traffic_delay,
        fuel_efficiency=_fuel_efficiency(points, profile),
        safety_score=_safety_score(points, traffic),
        emergency_priority=profile.emergency,
        optimization_factors=compute_optimization_factors(segments),
        segments=tuple(segments),
    )
    logger.debug(
        "Evaluated %d waypoints for %s: %.1f m, %.1f s (delay %.1f s), safety %.0f",
        len(points),
        profile.name,
        metrics.total_distance,
        metrics.total_duration,
        metrics.traffic_delay,
        metrics.safety_score,
    )
    return metrics
