"""Export services."""

from .geojson import route_to_geojson, segment_to_feature

__all__ = ["route_to_geojson", "segment_to_feature"]
