"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

TravelMode = Literal["DRIVING", "WALKING", "TRANSIT"]
Confidence = Literal["high", "medium", "low"]
EstimateMethod = Literal["postal_code", "city_distance", "default"]


@dataclass(slots=True)
class TravelEstimate:
    estimated_duration: int  # seconds
    estimated_distance: int  # meters
    confidence: Confidence
    method: EstimateMethod


@dataclass(slots=True)
class EstimatedSegment:
    from_index: int
    to_index: int
    estimated_duration: int
    estimated_distance: int
    confidence: Confidence
    method: EstimateMethod
    billable: bool = True


@dataclass(slots=True)
class RouteEstimate:
    segments: List[EstimatedSegment]
    total_duration: int
    total_distance: int
    average_confidence: Confidence
    error: Optional[str] = None


@dataclass(slots=True)
class DirectionsResult:
    """Answer of the mapping service for one origin/destination pair."""

    status: str
    duration: Optional[int] = None
    distance: Optional[int] = None
    error_message: Optional[str] = None


@dataclass(slots=True)
class TravelTimeResult:
    duration: int
    distance: int
    success: bool
    error_message: Optional[str] = None
    is_estimated: bool = False
    confidence: Optional[Confidence] = None


@dataclass(slots=True)
class TravelSegment:
    from_index: int
    to_index: int
    duration: int
    distance: int
    success: bool
    error_message: Optional[str] = None
    is_estimated: bool = False
    confidence: Optional[Confidence] = None
    billable: bool = True


@dataclass(slots=True)
class RouteTravelTime:
    segments: List[TravelSegment] = field(default_factory=list)
    total_duration: int = 0
    total_distance: int = 0
    successful_segments: int = 0
    total_segments: int = 0
    confidence: Confidence = "low"
    error: Optional[str] = None
