"""Route metrics computation."""

from .engine import (
    EngineParameters,
    compute_distance,
    compute_fuel_efficiency,
    compute_optimization_factors,
    compute_safety_score,
    compute_total_distance,
    compute_traffic_delay,
    estimate_base_duration,
    generate_segments,
    optimize_route,
    validate_traffic_context,
)
from ..errors import ConstraintViolationError, InvalidInputError, OutOfBoundsError

__all__ = [
    "EngineParameters",
    "compute_distance",
    "compute_total_distance",
    "estimate_base_duration",
    "compute_traffic_delay",
    "compute_fuel_efficiency",
    "compute_safety_score",
    "generate_segments",
    "compute_optimization_factors",
    "optimize_route",
    "validate_traffic_context",
    "InvalidInputError",
    "OutOfBoundsError",
    "ConstraintViolationError",
]
