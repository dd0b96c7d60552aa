"""Travel time estimation without geocoding.

Distances are inferred from postal codes or city names and converted to
durations with per-mode average speeds. The results are deterministic and
need no external service, at the cost of precision (see ``confidence``).
"""

from __future__ import annotations

import math
import re
from typing import Iterable, Sequence

from ...models.domain import AddressInfo
from .models import Confidence, EstimatedSegment, EstimateMethod, RouteEstimate, TravelEstimate, TravelMode

# km/h
AVERAGE_SPEEDS: dict[str, float] = {
    "DRIVING": 30,
    "WALKING": 5,
    "TRANSIT": 20,
}

# Minimum minutes per leg so short hops never look implausibly fast.
BASE_TIME_MINUTES: dict[str, float] = {
    "DRIVING": 5,
    "WALKING": 10,
    "TRANSIT": 15,
}

DEFAULT_DISTANCE_METERS = 5000
SAME_CITY_DISTANCE_METERS = 3000
UNKNOWN_CITY_PAIR_DISTANCE_METERS = 20000
MAX_POSTAL_CODE_DISTANCE_METERS = 50000

# Known road distances (meters) between the main towns of the service area.
CITY_DISTANCES: dict[str, dict[str, int]] = {
    "barcelona": {
        "mataró": 30000,
        "badalona": 10000,
        "sabadell": 25000,
        "terrassa": 30000,
        "girona": 100000,
        "lleida": 160000,
        "tarragona": 100000,
    },
    "mataró": {
        "barcelona": 30000,
        "badalona": 20000,
        "girona": 70000,
    },
    "badalona": {
        "barcelona": 10000,
        "mataró": 20000,
    },
}

CONFIDENCE_SCORES: dict[str, int] = {"high": 3, "medium": 2, "low": 1}

_POSTAL_CODE_PATTERN = re.compile(r"\b(\d{5})\b")
_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def extract_postal_code(address: str | None) -> str | None:
    """First standalone five digit group of a free-text address."""
    if not address:
        return None
    match = _POSTAL_CODE_PATTERN.search(address)
    return match.group(1) if match else None


def extract_city(address: str | None) -> str | None:
    """Second-to-last comma separated part of a free-text address."""
    if not address:
        return None
    parts = [part.strip() for part in address.split(",")]
    if len(parts) >= 2:
        return parts[-2] or None
    return None


def resolve_postal_code(info: AddressInfo) -> str | None:
    return _clean(info.postal_code) or extract_postal_code(info.address)


def resolve_city(info: AddressInfo) -> str | None:
    return _clean(info.city) or extract_city(info.address)


def _postal_number(value: str) -> int | None:
    match = _LEADING_DIGITS.match(value)
    return int(match.group(1)) if match else None


def estimate_distance_by_postal_code(from_postal: str, to_postal: str) -> int:
    from_number = _postal_number(from_postal)
    to_number = _postal_number(to_postal)
    if from_number is None or to_number is None:
        return DEFAULT_DISTANCE_METERS

    delta = abs(from_number - to_number)
    if delta == 0:
        return 1000
    if delta < 10:
        return 2000
    if delta < 100:
        return 5000
    if delta < 1000:
        return 15000
    return min(delta * 100, MAX_POSTAL_CODE_DISTANCE_METERS)


def estimate_distance_by_cities(from_city: str, to_city: str) -> int:
    city1 = from_city.strip().lower()
    city2 = to_city.strip().lower()
    if city1 == city2:
        return SAME_CITY_DISTANCE_METERS

    known = CITY_DISTANCES.get(city1, {}).get(city2)
    if known is None:
        known = CITY_DISTANCES.get(city2, {}).get(city1)
    return known if known is not None else UNKNOWN_CITY_PAIR_DISTANCE_METERS


def duration_for_distance(distance_meters: float, travel_mode: TravelMode = "DRIVING") -> int:
    """Seconds needed to cover ``distance_meters``, never below the mode's base time."""
    speed = AVERAGE_SPEEDS[travel_mode]
    minutes = max(distance_meters / 1000 / speed * 60, BASE_TIME_MINUTES[travel_mode])
    return int(math.floor(minutes * 60 + 0.5))


def estimate_travel_time(
    from_address: AddressInfo,
    to_address: AddressInfo,
    travel_mode: TravelMode = "DRIVING",
) -> TravelEstimate:
    """Estimate one leg, preferring postal codes, then cities, then a flat default."""
    if travel_mode not in AVERAGE_SPEEDS:
        raise ValueError(f"Unsupported travel mode '{travel_mode}'")

    distance = DEFAULT_DISTANCE_METERS
    confidence: Confidence = "low"
    method: EstimateMethod = "default"

    from_postal = resolve_postal_code(from_address)
    to_postal = resolve_postal_code(to_address)
    from_city = resolve_city(from_address)
    to_city = resolve_city(to_address)

    if from_postal and to_postal:
        distance = estimate_distance_by_postal_code(from_postal, to_postal)
        confidence = "high"
        method = "postal_code"
    elif from_city and to_city:
        distance = estimate_distance_by_cities(from_city, to_city)
        confidence = "medium"
        method = "city_distance"

    return TravelEstimate(
        estimated_duration=duration_for_distance(distance, travel_mode),
        estimated_distance=distance,
        confidence=confidence,
        method=method,
    )


def bucket_confidence(average_score: float) -> Confidence:
    if average_score >= 2.5:
        return "high"
    if average_score >= 1.5:
        return "medium"
    return "low"


def average_confidence(scores: Iterable[int]) -> Confidence:
    """Average numeric scores (high=3, medium=2, low=1) into a confidence bucket."""
    values = list(scores)
    if not values:
        return "low"
    return bucket_confidence(sum(values) / len(values))


def estimate_route_time(
    stops: Sequence[AddressInfo | None],
    travel_mode: TravelMode = "DRIVING",
    worker_start: AddressInfo | None = None,
) -> RouteEstimate:
    """Estimate every consecutive leg of a route.

    When ``worker_start`` is given it becomes stop 0. Its leg to the first
    service is estimated but left out of the totals.
    """
    all_stops = [worker_start, *stops] if worker_start is not None else list(stops)

    segments: list[EstimatedSegment] = []
    for index in range(len(all_stops) - 1):
        origin, destination = all_stops[index], all_stops[index + 1]
        if origin is None or destination is None:
            continue
        estimate = estimate_travel_time(origin, destination, travel_mode)
        segments.append(
            EstimatedSegment(
                from_index=index,
                to_index=index + 1,
                estimated_duration=estimate.estimated_duration,
                estimated_distance=estimate.estimated_distance,
                confidence=estimate.confidence,
                method=estimate.method,
                billable=not (worker_start is not None and index == 0),
            )
        )

    billable = [segment for segment in segments if segment.billable]
    error = None
    if not segments:
        error = "Se necesitan al menos dos direcciones para estimar la ruta"

    return RouteEstimate(
        segments=segments,
        total_duration=sum(segment.estimated_duration for segment in billable),
        total_distance=sum(segment.estimated_distance for segment in billable),
        average_confidence=average_confidence(CONFIDENCE_SCORES[s.confidence] for s in segments),
        error=error,
    )
