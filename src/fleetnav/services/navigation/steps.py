"""Turn-by-turn instructions derived from computed route segments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ...models.domain import RouteSegment
from ..geospatial import bearing_degrees, compass_direction

TURN_THRESHOLD_DEGREES = 45.0


@dataclass(frozen=True, slots=True)
class RouteStep:
    instruction: str
    distance: int
    duration: int
    maneuver: str
    bearing_before: float
    bearing_after: float
    road_type: str
    emergency_access: bool


def _turn_angle(bearing_before: float, bearing_after: float) -> float:
    """Signed heading change in (-180, 180]; positive turns clockwise (right)."""

    delta = (bearing_after - bearing_before) % 360
    return delta - 360 if delta > 180 else delta


def build_steps(segments: Sequence[RouteSegment]) -> list[RouteStep]:
    steps: list[RouteStep] = []
    last_index = len(segments) - 1
    previous_bearing = 0.0

    for index, segment in enumerate(segments):
        bearing = round(bearing_degrees(segment.start, segment.end), 1)
        if index == 0:
            instruction = f"Head {compass_direction(bearing)}"
            maneuver = "depart"
            bearing_before = 0.0
        else:
            bearing_before = previous_bearing
            angle = _turn_angle(previous_bearing, bearing)
            if index == last_index:
                instruction = "Continue straight to destination"
                maneuver = "arrive"
            elif angle > TURN_THRESHOLD_DEGREES:
                instruction = "Turn right"
                maneuver = "turn"
            elif angle < -TURN_THRESHOLD_DEGREES:
                instruction = "Turn left"
                maneuver = "turn"
            else:
                instruction = "Continue straight"
                maneuver = "continue"

        steps.append(
            RouteStep(
                instruction=instruction,
                distance=round(segment.distance),
                duration=round(segment.duration),
                maneuver=maneuver,
                bearing_before=bearing_before,
                bearing_after=bearing,
                road_type=segment.road_type,
                emergency_access=segment.emergency_access,
            )
        )
        previous_bearing = bearing
    return steps
