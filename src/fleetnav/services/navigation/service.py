"""Navigation optimisation orchestration service."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Callable

from ...config import Settings, settings
from ...models.domain import RouteMetrics, TrafficContext
from ...models.vehicles import SUPPORTED_VEHICLE_TYPES
from ...schemas.navigation import (
    EmergencyOptimizationModel,
    OptimizationFactorsModel,
    OptimizationMetadata,
    OptimizedRouteModel,
    OptimizeRequest,
    OptimizeResponse,
    OptimizeResult,
    RouteConstraints,
    RouteSegmentModel,
    RouteStepModel,
    TrafficData,
    TrafficSummaryModel,
)
from ..errors import ConstraintViolationError, OutOfBoundsError
from ..geospatial import within_bounds
from ..metrics.engine import EngineParameters, optimize_route, validate_waypoints
from .steps import build_steps
from .summary import emergency_optimizations, summarize_traffic

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

ALGORITHM_NAME = "multi-factor optimization"
FACTORS_CONSIDERED = [
    "traffic avoidance",
    "distance optimization",
    "time optimization",
    "safety optimization",
    "fuel efficiency",
    "emergency access",
]
SUPPORTED_CONSTRAINTS = [
    "max_distance",
    "max_duration",
    "avoid_congestion",
    "prefer_emergency_routes",
    "avoid_tolls",
    "avoid_highways",
]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _traffic_context(traffic_data: TrafficData | None) -> TrafficContext | None:
    if traffic_data is None:
        return None
    return TrafficContext(
        congestion_levels=dict(traffic_data.congestion_levels),
        incident_locations=tuple(tuple(point) for point in traffic_data.incident_locations),
        road_works=tuple(tuple(point) for point in traffic_data.road_works),
    )


def check_operating_bounds(
    waypoints,
    bounds: tuple[float, float, float, float],
    area: str = "operating area",
) -> None:
    """Raise ``OutOfBoundsError`` for the first waypoint outside ``bounds``."""

    for index, waypoint in enumerate(waypoints):
        if not within_bounds(waypoint, bounds):
            min_lon, min_lat, max_lon, max_lat = bounds
            raise OutOfBoundsError(
                f"All waypoints must be within the operating area ({area})",
                bounds={"min": [min_lon, min_lat], "max": [max_lon, max_lat]},
                invalid_waypoint=list(waypoint),
                index=index,
            )


def check_constraints(metrics: RouteMetrics, constraints: RouteConstraints | None) -> None:
    if constraints is None:
        return
    if constraints.max_distance is not None and metrics.total_distance > constraints.max_distance:
        raise ConstraintViolationError(
            "Route exceeds maximum distance constraint",
            max_distance=constraints.max_distance,
            route_distance=metrics.total_distance,
        )
    if constraints.max_duration is not None and metrics.total_duration > constraints.max_duration:
        raise ConstraintViolationError(
            "Route exceeds maximum duration constraint",
            max_duration=constraints.max_duration,
            route_duration=metrics.total_duration,
        )


def _route_model(route_id: str, metrics: RouteMetrics) -> OptimizedRouteModel:
    return OptimizedRouteModel(
        route_id=route_id,
        waypoints=list(metrics.waypoints),
        total_distance=metrics.total_distance,
        total_duration=metrics.total_duration,
        traffic_delay=metrics.traffic_delay,
        fuel_efficiency=metrics.fuel_efficiency,
        safety_score=metrics.safety_score,
        emergency_priority=metrics.emergency_priority,
        optimization_factors=OptimizationFactorsModel(**asdict(metrics.optimization_factors)),
        segments=[
            RouteSegmentModel(
                from_=segment.start,
                to=segment.end,
                distance=segment.distance,
                duration=segment.duration,
                road_type=segment.road_type,
                traffic_level=segment.traffic_level,
                safety_score=segment.safety_score,
                emergency_access=segment.emergency_access,
            )
            for segment in metrics.segments
        ],
    )


def compute_route_metrics(
    payload: OptimizeRequest,
    *,
    params: EngineParameters | None = None,
    config: Settings | None = None,
) -> RouteMetrics:
    """Validate the request, evaluate the waypoints and apply the constraints.

    Raises ``InvalidInputError`` (including ``OutOfBoundsError``) for bad
    waypoints and ``ConstraintViolationError`` when the computed route exceeds
    the requested limits.
    """

    config = config or settings
    waypoints = validate_waypoints(payload.waypoints)
    if config.enforce_operating_bounds:
        check_operating_bounds(waypoints, config.operating_bounds, config.area_coverage)

    metrics = optimize_route(
        waypoints,
        payload.vehicle_type,
        _traffic_context(payload.traffic_data),
        params or EngineParameters.from_settings(config),
    )
    check_constraints(metrics, payload.constraints)
    return metrics


def make_route_id(clock: Clock | None = None) -> str:
    return f"opt_{int((clock or _utc_now)().timestamp() * 1000)}"


def plan_optimized_route(
    payload: OptimizeRequest,
    *,
    params: EngineParameters | None = None,
    config: Settings | None = None,
    clock: Clock | None = None,
) -> OptimizeResponse:
    """Evaluate the requested waypoints and build the API response."""

    now = (clock or _utc_now)()
    metrics = compute_route_metrics(payload, params=params, config=config)
    route_id = make_route_id(lambda: now)
    logger.info(
        "Route %s: %d waypoints, vehicle=%s, distance=%.0f m, duration=%.0f s, safety=%.0f",
        route_id,
        len(metrics.waypoints),
        payload.vehicle_type,
        metrics.total_distance,
        metrics.total_duration,
        metrics.safety_score,
    )

    constraints_applied = sorted(payload.constraints.model_dump(exclude_none=True)) if payload.constraints else []
    return OptimizeResponse(
        data=OptimizeResult(
            optimized_route=_route_model(route_id, metrics),
            steps=[RouteStepModel(**asdict(step)) for step in build_steps(metrics.segments)],
            emergency_optimizations=[
                EmergencyOptimizationModel(**asdict(optimization)) for optimization in emergency_optimizations(metrics)
            ],
            traffic_summary=TrafficSummaryModel(
                **asdict(summarize_traffic(metrics, _traffic_context(payload.traffic_data)))
            ),
            optimization_metadata=OptimizationMetadata(
                algorithm=ALGORITHM_NAME,
                factors_considered=list(FACTORS_CONSIDERED),
                vehicle_type=payload.vehicle_type,
                constraints_applied=constraints_applied,
                generated_at=now.isoformat(),
            ),
        )
    )


def describe_capabilities(config: Settings | None = None) -> dict:
    config = config or settings
    return {
        "success": True,
        "data": {
            "endpoint": f"POST {config.api_prefix}/navigation/optimize",
            "description": "Route evaluation with multi-factor scoring",
            "supported_vehicle_types": list(SUPPORTED_VEHICLE_TYPES),
            "optimization_factors": [factor.capitalize() for factor in FACTORS_CONSIDERED],
            "constraints_supported": list(SUPPORTED_CONSTRAINTS),
            "area_coverage": config.area_coverage,
        },
    }
