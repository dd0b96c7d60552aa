"""Route travel-time endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...schemas.routing import (
    RouteEstimateRequest,
    RouteEstimateResponse,
    RouteSegmentsRequest,
    RouteSegmentsResponse,
)
from ...services.routing.service import compute_route_segments, estimate_route

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post("/estimate", response_model=RouteEstimateResponse, status_code=status.HTTP_200_OK)
def estimate(payload: RouteEstimateRequest) -> RouteEstimateResponse:
    try:
        return estimate_route(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/segments", response_model=RouteSegmentsResponse, status_code=status.HTTP_200_OK)
def segments(payload: RouteSegmentsRequest) -> RouteSegmentsResponse:
    try:
        return compute_route_segments(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error computing route segments: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compute route segments: {str(exc)}",
        ) from exc
