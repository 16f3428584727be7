"""GeoJSON export utilities for evaluated routes."""

from __future__ import annotations

from typing import Any, Dict, List

from ...models.domain import RouteMetrics, RouteSegment

ROAD_TYPE_COLORS = {
    "primary": "#e0003e",
    "secondary": "#e0af00",
    "emergency": "#38e000",
    "local": "#13aae0",
}


def segment_to_feature(index: int, segment: RouteSegment) -> Dict[str, Any]:
    """Convert a route segment into a GeoJSON LineString feature.

    Args:
        index: Position of the segment along the route
        segment: Segment to convert

    Returns:
        GeoJSON feature with segment metrics as properties
    """
    return {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": [list(segment.start), list(segment.end)],
        },
        "properties": {
            "kind": "segment",
            "index": index,
            "distance": segment.distance,
            "duration": segment.duration,
            "road_type": segment.road_type,
            "traffic_level": segment.traffic_level,
            "safety_score": segment.safety_score,
            "emergency_access": segment.emergency_access,
            "stroke": ROAD_TYPE_COLORS.get(segment.road_type, "#000000"),
        },
    }


def route_to_geojson(metrics: RouteMetrics, route_id: str) -> Dict[str, Any]:
    """Convert evaluated route metrics to a GeoJSON FeatureCollection.

    The first feature is the whole route, followed by one feature per segment.
    Coordinates are kept in [longitude, latitude] order as GeoJSON requires.

    Args:
        metrics: Result of the route evaluation
        route_id: Identifier stored on the route feature

    Returns:
        GeoJSON FeatureCollection dictionary
    """
    features: List[Dict[str, Any]] = [
        {
            "type": "Feature",
            "geometry": {
                "type": "LineString",
                "coordinates": [list(point) for point in metrics.waypoints],
            },
            "properties": {
                "kind": "route",
                "route_id": route_id,
                "vehicle_type": metrics.vehicle_type,
                "total_distance": metrics.total_distance,
                "total_duration": metrics.total_duration,
                "traffic_delay": metrics.traffic_delay,
                "fuel_efficiency": metrics.fuel_efficiency,
                "safety_score": metrics.safety_score,
                "emergency_priority": metrics.emergency_priority,
            },
        }
    ]
    features.extend(segment_to_feature(index, segment) for index, segment in enumerate(metrics.segments))
    return {"type": "FeatureCollection", "features": features}
