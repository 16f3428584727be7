"""Navigation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.navigation import OptimizeRequest, OptimizeResponse
from ...services.errors import ConstraintViolationError, InvalidInputError
from ...services.export.geojson import route_to_geojson
from ...services.navigation.service import (
    compute_route_metrics,
    describe_capabilities,
    make_route_id,
    plan_optimized_route,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/navigation", tags=["navigation"])


def _bad_request(exc: InvalidInputError | ConstraintViolationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"error": str(exc), **exc.context},
    )


@router.post("/optimize", response_model=OptimizeResponse, status_code=status.HTTP_200_OK)
def optimize(payload: OptimizeRequest) -> OptimizeResponse:
    try:
        return plan_optimized_route(payload)
    except (InvalidInputError, ConstraintViolationError) as exc:
        raise _bad_request(exc) from exc
    except Exception as exc:
        logger.exception("Route optimization error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to optimize route", "details": str(exc)},
        ) from exc


@router.get("/optimize", status_code=status.HTTP_200_OK)
def capabilities() -> dict:
    """Describe the optimisation endpoint and what it accepts."""
    return describe_capabilities()


@router.post("/optimize/geojson", status_code=status.HTTP_200_OK)
def optimize_geojson(payload: OptimizeRequest) -> dict:
    """Evaluate the route and return it as a GeoJSON FeatureCollection."""
    try:
        metrics = compute_route_metrics(payload)
    except (InvalidInputError, ConstraintViolationError) as exc:
        raise _bad_request(exc) from exc
    except Exception as exc:
        logger.exception("GeoJSON export error: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to export route", "details": str(exc)},
        ) from exc
    return route_to_geojson(metrics, make_route_id())
