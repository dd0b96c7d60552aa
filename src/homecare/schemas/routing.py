"""Route estimation request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import settings

TravelModeField = Literal["DRIVING", "WALKING", "TRANSIT"]
ConfidenceField = Literal["high", "medium", "low"]


class StopModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="postalCode")
    city: Optional[str] = None
    label: Optional[str] = Field(default=None, description="Display label, usually the client's name.")
    assignment_id: Optional[str] = Field(default=None, alias="assignmentId")


class RouteEstimateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    stops: List[StopModel]
    travel_mode: TravelModeField = Field(default_factory=lambda: settings.default_travel_mode, alias="travelMode")
    worker_start: Optional[StopModel] = Field(
        default=None,
        alias="workerStart",
        description="Worker's home address. Its leg to the first stop is not billable.",
    )


class EstimatedSegmentModel(BaseModel):
    from_index: int
    to_index: int
    estimated_duration: int
    estimated_distance: int
    confidence: ConfidenceField
    method: Literal["postal_code", "city_distance", "default"]
    billable: bool


class RouteEstimateResponse(BaseModel):
    segments: List[EstimatedSegmentModel]
    total_duration: int
    total_distance: int
    average_confidence: ConfidenceField
    error: Optional[str] = None


class RouteSegmentsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    stops: List[StopModel]
    travel_mode: TravelModeField = Field(default_factory=lambda: settings.default_travel_mode, alias="travelMode")
    worker_start: Optional[StopModel] = Field(default=None, alias="workerStart")
    mode: Literal["auto", "exact", "estimate"] = Field(
        default="auto",
        description=(
            "'exact' only uses the directions service, 'estimate' only local estimates, "
            "'auto' uses the service and estimates the legs it cannot answer."
        ),
    )


class RouteSegmentModel(BaseModel):
    id: str
    from_label: str
    to_label: str
    from_address: str
    to_address: str
    duration: int
    distance: int
    success: bool
    error_message: Optional[str] = None
    is_estimated: bool = False
    confidence: Optional[ConfidenceField] = None
    billable: bool = True
    billable_minutes: int
    duration_text: str
    distance_text: str
    travel_mode: TravelModeField


class RouteSegmentsResponse(BaseModel):
    segments: List[RouteSegmentModel]
    total_billable_minutes: int
    total_duration_text: str = "0s"
    total_duration: int
    total_distance: int
    successful_segments: int
    total_segments: int
    confidence: ConfidenceField
    error: Optional[str] = None
    metadata: dict = Field(default_factory=dict)
