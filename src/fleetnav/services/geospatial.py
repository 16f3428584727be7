"""Geospatial helper functions.

All coordinates are (longitude, latitude) pairs in decimal degrees.
"""

from __future__ import annotations

import math
from typing import Sequence

from shapely.geometry import Point, box

from ..models.domain import Coordinate
from .errors import InvalidInputError

EARTH_RADIUS_M = 6_371_000.0

COMPASS_POINTS = ("north", "northeast", "east", "southeast", "south", "southwest", "west", "northwest")


def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two (lon, lat) coordinates."""

    phi1, phi2 = math.radians(a[1]), math.radians(b[1])
    d_phi = math.radians(b[1] - a[1])
    d_lambda = math.radians(b[0] - a[0])

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def bearing_degrees(a: Coordinate, b: Coordinate) -> float:
    """Calculate the initial bearing from ``a`` to ``b``."""

    phi1 = math.radians(a[1])
    phi2 = math.radians(b[1])
    delta_lambda = math.radians(b[0] - a[0])
    y = math.sin(delta_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)
    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360) % 360


def compass_direction(bearing: float) -> str:
    return COMPASS_POINTS[int(((bearing % 360) + 22.5) // 45) % 8]


def midpoint(a: Coordinate, b: Coordinate) -> Coordinate:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def congestion_key(coord: Coordinate) -> str:
    """Lookup key for congestion maps, rounded to 4 decimal places (~11 m at the equator)."""

    return f"{coord[0]:.4f},{coord[1]:.4f}"


def validate_coordinate(
    coord: Sequence[float],
    index: int | None = None,
    field: str = "waypoints",
) -> Coordinate:
    """Return ``coord`` as a (lon, lat) tuple or raise ``InvalidInputError``."""

    try:
        size = len(coord)
    except TypeError as exc:
        raise InvalidInputError(
            "Coordinates must be [longitude, latitude] pairs", field=field, index=index, waypoint=repr(coord)
        ) from exc
    if size != 2:
        raise InvalidInputError(
            "Coordinates must be [longitude, latitude] pairs", field=field, index=index, waypoint=repr(coord)
        )
    try:
        lon, lat = float(coord[0]), float(coord[1])
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(
            "Coordinate values must be numbers", field=field, index=index, waypoint=repr(coord)
        ) from exc
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise InvalidInputError(
            "Coordinate values must be finite numbers", field=field, index=index, waypoint=repr(coord)
        )
    if not -180.0 <= lon <= 180.0 or not -90.0 <= lat <= 90.0:
        raise InvalidInputError(
            "Coordinate outside valid longitude/latitude range",
            field=field,
            index=index,
            waypoint=[lon, lat],
        )
    return lon, lat


def within_bounds(coord: Coordinate, bounds: tuple[float, float, float, float]) -> bool:
    """Return True if the coordinate lies inside (or on the edge of) the bounding box."""

    return box(*bounds).covers(Point(coord[0], coord[1]))
