"""Exact travel times from the directions service, one leg at a time."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ...config import settings
from ...models.domain import AddressInfo
from .estimator import CONFIDENCE_SCORES, average_confidence, estimate_travel_time
from .models import DirectionsResult, RouteTravelTime, TravelMode, TravelSegment, TravelTimeResult

logger = logging.getLogger(__name__)

SUCCESS_SCORE = 3
FAILURE_SCORE = 1
ALL_FAILED_ERROR = "Todos los cálculos de tiempo fallaron"


class DirectionsProvider(Protocol):
    def directions(self, origin: str, destination: str, travel_mode: TravelMode = "DRIVING") -> DirectionsResult:
        ...


def fallback_address(city: str | None = None, country: str | None = None) -> str:
    return f"{city or settings.default_city}, {country or settings.default_country}"


def build_full_address(info: AddressInfo, city: str | None = None, country: str | None = None) -> str:
    """Join address, postal code and city into one geocodable line.

    With no fields at all the default city is used. The country is appended
    unless the text already mentions it.
    """
    country = country or settings.default_country
    parts = [
        value.strip()
        for value in (info.address, info.postal_code, info.city)
        if value is not None and value.strip()
    ]
    if not parts:
        return fallback_address(city, country)

    full_address = ", ".join(parts)
    if country.lower() not in full_address.lower():
        return f"{full_address}, {country}"
    return full_address


def _failure(message: str) -> TravelTimeResult:
    return TravelTimeResult(duration=0, distance=0, success=False, error_message=message, confidence="low")


def calculate_local_estimate(
    from_address: AddressInfo,
    to_address: AddressInfo,
    travel_mode: TravelMode = "DRIVING",
) -> TravelTimeResult:
    estimate = estimate_travel_time(from_address, to_address, travel_mode)
    return TravelTimeResult(
        duration=estimate.estimated_duration,
        distance=estimate.estimated_distance,
        success=True,
        is_estimated=True,
        confidence=estimate.confidence,
    )


def calculate_real_travel_time(
    from_address: AddressInfo,
    to_address: AddressInfo,
    travel_mode: TravelMode = "DRIVING",
    provider: DirectionsProvider | None = None,
) -> TravelTimeResult:
    """Ask the directions service for one leg.

    Never raises: an unavailable service, an incomplete address, a non-OK
    status or any error during the call all produce ``success=False`` with
    zero duration and distance.
    """
    if provider is None:
        return _failure("Servicio de mapas no disponible")

    origin = build_full_address(from_address)
    destination = build_full_address(to_address)
    if origin == fallback_address():
        return _failure("Dirección de origen incompleta")
    if destination == fallback_address():
        return _failure("Dirección de destino incompleta")

    try:
        result = provider.directions(origin, destination, travel_mode)
    except Exception as e:
        logger.warning(f"Directions request failed for '{origin}' -> '{destination}': {e}")
        return _failure(f"Error del servicio de mapas: {e}")

    if result.status != "OK" or result.duration is None or result.distance is None:
        message = result.error_message or f"Estado del servicio de mapas: {result.status}"
        logger.warning(f"Directions service returned {result.status} for '{origin}' -> '{destination}'")
        return _failure(message)

    return TravelTimeResult(
        duration=result.duration,
        distance=result.distance,
        success=True,
        confidence="high",
    )


def segment_score(segment: TravelSegment) -> int:
    if not segment.success:
        return FAILURE_SCORE
    if segment.is_estimated and segment.confidence is not None:
        return CONFIDENCE_SCORES[segment.confidence]
    return SUCCESS_SCORE


def calculate_route_travel_time(
    stops: Sequence[AddressInfo],
    worker_start: AddressInfo | None = None,
    travel_mode: TravelMode = "DRIVING",
    provider: DirectionsProvider | None = None,
    fallback_to_estimate: bool = False,
) -> RouteTravelTime:
    """Compute every consecutive leg of a route, sequentially.

    A failed leg never stops the remaining ones. With ``fallback_to_estimate``
    failed legs are replaced by a local estimate flagged ``is_estimated``.
    The worker's leg to the first service is computed but not billed.
    """
    all_stops = [worker_start, *stops] if worker_start is not None else list(stops)
    route = RouteTravelTime()

    for index in range(len(all_stops) - 1):
        origin, destination = all_stops[index], all_stops[index + 1]
        if origin is None or destination is None:
            continue

        try:
            result = calculate_real_travel_time(origin, destination, travel_mode, provider)
        except Exception as e:
            logger.exception("Unexpected error computing leg %d -> %d", index, index + 1)
            result = _failure(str(e))

        if not result.success and fallback_to_estimate:
            result = calculate_local_estimate(origin, destination, travel_mode)

        billable = not (worker_start is not None and index == 0)
        segment = TravelSegment(
            from_index=index,
            to_index=index + 1,
            duration=result.duration,
            distance=result.distance,
            success=result.success,
            error_message=result.error_message,
            is_estimated=result.is_estimated,
            confidence=result.confidence,
            billable=billable,
        )
        route.segments.append(segment)

        if segment.success:
            route.successful_segments += 1
            if billable:
                route.total_duration += segment.duration
                route.total_distance += segment.distance

    route.total_segments = len(route.segments)
    if route.segments:
        route.confidence = average_confidence(segment_score(s) for s in route.segments)
    if route.segments and route.successful_segments == 0:
        route.error = ALL_FAILED_ERROR
    elif not route.segments:
        route.error = "Se necesitan al menos dos direcciones para calcular la ruta"
    return route
