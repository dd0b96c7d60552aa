"""Route travel-time orchestration service."""

from __future__ import annotations

import logging
import math
from typing import Sequence

from ...models.domain import AddressInfo
from ...schemas.routing import (
    EstimatedSegmentModel,
    RouteEstimateRequest,
    RouteEstimateResponse,
    RouteSegmentModel,
    RouteSegmentsRequest,
    RouteSegmentsResponse,
    StopModel,
)
from .estimator import estimate_route_time
from .formatting import format_distance, format_duration
from .maps_client import MapsClient
from .models import RouteEstimate, RouteTravelTime, TravelSegment
from .travel_time import DirectionsProvider, calculate_route_travel_time

logger = logging.getLogger(__name__)

NO_VALID_ADDRESSES_ERROR = "No hay direcciones válidas para calcular la ruta"


def _to_address(stop: StopModel) -> AddressInfo:
    return AddressInfo(address=stop.address, postal_code=stop.postal_code, city=stop.city)


def _has_address(stop: StopModel | None) -> bool:
    return stop is not None and bool(stop.address and stop.address.strip())


def _build_provider() -> DirectionsProvider | None:
    try:
        return MapsClient()
    except ValueError as exc:
        logger.info(f"Directions service unavailable, using local estimates only: {exc}")
        return None


def estimate_route(payload: RouteEstimateRequest) -> RouteEstimateResponse:
    """Heuristic estimate over every stop as given, no filtering."""
    worker_start = _to_address(payload.worker_start) if payload.worker_start else None
    estimate = estimate_route_time(
        [_to_address(stop) for stop in payload.stops],
        travel_mode=payload.travel_mode,
        worker_start=worker_start,
    )
    return RouteEstimateResponse(
        segments=[
            EstimatedSegmentModel(
                from_index=segment.from_index,
                to_index=segment.to_index,
                estimated_duration=segment.estimated_duration,
                estimated_distance=segment.estimated_distance,
                confidence=segment.confidence,
                method=segment.method,
                billable=segment.billable,
            )
            for segment in estimate.segments
        ],
        total_duration=estimate.total_duration,
        total_distance=estimate.total_distance,
        average_confidence=estimate.average_confidence,
        error=estimate.error,
    )


def _estimate_as_travel(estimate: RouteEstimate) -> RouteTravelTime:
    segments = [
        TravelSegment(
            from_index=s.from_index,
            to_index=s.to_index,
            duration=s.estimated_duration,
            distance=s.estimated_distance,
            success=True,
            is_estimated=True,
            confidence=s.confidence,
            billable=s.billable,
        )
        for s in estimate.segments
    ]
    return RouteTravelTime(
        segments=segments,
        total_duration=estimate.total_duration,
        total_distance=estimate.total_distance,
        successful_segments=len(segments),
        total_segments=len(segments),
        confidence=estimate.average_confidence,
        error=estimate.error,
    )


def _stop_label(stops: Sequence[StopModel], index: int, has_worker_start: bool) -> str:
    stop = stops[index]
    if stop.label:
        return stop.label
    if has_worker_start and index == 0:
        return "Inicio"
    return f"Parada {index + 1}"


def compute_route_segments(payload: RouteSegmentsRequest) -> RouteSegmentsResponse:
    """Travel segments between consecutive stops with billable totals and confidence.

    Stops without an address are skipped. The worker's start leg, when given,
    is reported but never billed.
    """
    stops = [stop for stop in payload.stops if _has_address(stop)]
    skipped = len(payload.stops) - len(stops)
    metadata = {"mode": payload.mode, "travel_mode": payload.travel_mode, "skipped_stops": skipped}

    if not stops:
        return RouteSegmentsResponse(
            segments=[],
            total_billable_minutes=0,
            total_duration=0,
            total_distance=0,
            successful_segments=0,
            total_segments=0,
            confidence="low",
            error=NO_VALID_ADDRESSES_ERROR,
            metadata=metadata,
        )

    worker_start = payload.worker_start if _has_address(payload.worker_start) else None
    addresses = [_to_address(stop) for stop in stops]
    worker_address = _to_address(worker_start) if worker_start else None

    if payload.mode == "estimate":
        route = _estimate_as_travel(
            estimate_route_time(addresses, travel_mode=payload.travel_mode, worker_start=worker_address)
        )
    else:
        provider = _build_provider()
        metadata["directions_service"] = provider is not None
        route = calculate_route_travel_time(
            addresses,
            worker_start=worker_address,
            travel_mode=payload.travel_mode,
            provider=provider,
            fallback_to_estimate=payload.mode == "auto",
        )

    all_stops = [worker_start, *stops] if worker_start else stops
    segments: list[RouteSegmentModel] = []
    for position, segment in enumerate(route.segments):
        segments.append(
            RouteSegmentModel(
                id=f"segment-{position}",
                from_label=_stop_label(all_stops, segment.from_index, worker_start is not None),
                to_label=_stop_label(all_stops, segment.to_index, worker_start is not None),
                from_address=all_stops[segment.from_index].address or "",
                to_address=all_stops[segment.to_index].address or "",
                duration=segment.duration,
                distance=segment.distance,
                success=segment.success,
                error_message=segment.error_message,
                is_estimated=segment.is_estimated,
                confidence=segment.confidence,
                billable=segment.billable,
                billable_minutes=math.ceil(segment.duration / 60),
                duration_text=format_duration(segment.duration),
                distance_text=format_distance(segment.distance),
                travel_mode=payload.travel_mode,
            )
        )

    return RouteSegmentsResponse(
        segments=segments,
        total_billable_minutes=sum(s.billable_minutes for s in segments if s.billable),
        total_duration_text=format_duration(route.total_duration),
        total_duration=route.total_duration,
        total_distance=route.total_distance,
        successful_segments=route.successful_segments,
        total_segments=route.total_segments,
        confidence=route.confidence,
        error=route.error,
        metadata=metadata,
    )
