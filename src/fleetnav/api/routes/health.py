"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ... import __version__
from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/config", status_code=status.HTTP_200_OK)
def health_config() -> dict:
    """Report the metrics model parameters the service is running with."""
    return {
        "version": __version__,
        "average_speed_mps": settings.average_speed_mps,
        "enforce_operating_bounds": settings.enforce_operating_bounds,
        "operating_bounds": list(settings.operating_bounds),
        "area_coverage": settings.area_coverage,
    }
