"""Emergency handling hints and traffic roll-ups attached to an evaluated route."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from ...models.domain import Coordinate, RouteMetrics, TrafficContext
from ..geospatial import haversine_m

logger = logging.getLogger(__name__)

SIGNAL_RADIUS_M = 200.0
SIGNAL_TIME_SAVED_S = 30.0
LANE_ASSIGNMENT_TIME_SAVED_S = 60.0


@dataclass(frozen=True, slots=True)
class Intersection:
    id: str
    name: str
    location: Coordinate
    signals: bool = True


SIGNALISED_INTERSECTIONS: tuple[Intersection, ...] = (
    Intersection("int_1", "Main Road - Temple Street Junction", (75.7814, 11.2598)),
    Intersection("int_2", "Hospital Road Junction", (75.7824, 11.2608)),
)


@dataclass(frozen=True, slots=True)
class EmergencyOptimization:
    type: str
    description: str
    estimated_time_saved: float
    affected_intersections: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class TrafficSummary:
    total_congestion: float
    average_speed: float
    total_delay: float
    incident_count: int
    road_works_count: int


def signals_on_route(
    waypoints: Sequence[Coordinate],
    intersections: Sequence[Intersection] = SIGNALISED_INTERSECTIONS,
    radius_m: float = SIGNAL_RADIUS_M,
) -> list[Intersection]:
    """Signalised intersections lying within ``radius_m`` of any waypoint, in table order."""

    return [
        intersection
        for intersection in intersections
        if intersection.signals
        and any(haversine_m(point, intersection.location) < radius_m for point in waypoints)
    ]


def emergency_optimizations(
    metrics: RouteMetrics,
    intersections: Sequence[Intersection] = SIGNALISED_INTERSECTIONS,
) -> list[EmergencyOptimization]:
    """Signal priority and lane access granted to emergency vehicles.

    The savings are advisory: ``metrics.total_duration`` is left untouched.
    """

    if not metrics.emergency_priority:
        return []

    optimizations: list[EmergencyOptimization] = []
    signals = signals_on_route(metrics.waypoints, intersections)
    if signals:
        optimizations.append(
            EmergencyOptimization(
                type="traffic_signal_priority",
                description=f"Traffic signals will be coordinated for {metrics.vehicle_type}",
                estimated_time_saved=len(signals) * SIGNAL_TIME_SAVED_S,
                affected_intersections=[intersection.id for intersection in signals],
            )
        )
    optimizations.append(
        EmergencyOptimization(
            type="lane_assignment",
            description="Emergency lane access granted",
            estimated_time_saved=LANE_ASSIGNMENT_TIME_SAVED_S,
        )
    )
    logger.debug("%s: %d signalised intersections on route", metrics.vehicle_type, len(signals))
    return optimizations


def summarize_traffic(metrics: RouteMetrics, traffic: TrafficContext | None = None) -> TrafficSummary:
    count = len(metrics.segments)
    return TrafficSummary(
        total_congestion=sum(segment.traffic_level for segment in metrics.segments) / count if count else 0.0,
        average_speed=metrics.total_distance / metrics.total_duration * 3.6 if metrics.total_duration > 0 else 0.0,
        total_delay=metrics.traffic_delay,
        incident_count=len(traffic.incident_locations) if traffic else 0,
        road_works_count=len(traffic.road_works) if traffic else 0,
    )
