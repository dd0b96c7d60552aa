"""Holiday request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class HolidayModel(BaseModel):
    day: int = Field(..., ge=1, le=31)
    month: int = Field(..., ge=1, le=12)
    year: int
    name: str = ""
    type: Optional[Literal["national", "regional", "local"]] = Field(
        default=None,
        description="Inferred from the name when omitted.",
    )
    id: Optional[str] = None


class HolidayValidationRequest(BaseModel):
    year: int = Field(..., ge=1900, le=2200)
    holidays: Optional[List[HolidayModel]] = Field(
        default=None,
        description="Holidays to check. When omitted the stored calendar for the year is used.",
    )


class HolidaySummaryModel(BaseModel):
    total_holidays: int
    national_holidays: int
    regional_holidays: int
    local_holidays: int
    months_with_holidays: List[int]


class HolidayValidationResponse(BaseModel):
    is_valid: bool
    errors: List[str]
    warnings: List[str]
    summary: HolidaySummaryModel
    holidays: List[HolidayModel]
