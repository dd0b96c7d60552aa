"""Holiday calendar endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from ...data.holidays_repository import SupabaseHolidayLookup
from ...schemas.holidays import (
    HolidayModel,
    HolidaySummaryModel,
    HolidayValidationRequest,
    HolidayValidationResponse,
)
from ...services.holidays.validation import validate_holidays
from ...services.schedule.service import holidays_from_models, holidays_to_models

router = APIRouter(prefix="/holidays", tags=["holidays"])


@router.get("", response_model=List[HolidayModel], status_code=status.HTTP_200_OK)
def list_holidays(
    year: int = Query(..., ge=1900, le=2200),
    month: Optional[int] = Query(default=None, ge=1, le=12),
) -> List[HolidayModel]:
    lookup = SupabaseHolidayLookup()
    if month is not None:
        return holidays_to_models(lookup.get_holidays_for_month(month, year))
    return holidays_to_models(lookup.get_holidays_for_year(year))


@router.post("/validate", response_model=HolidayValidationResponse, status_code=status.HTTP_200_OK)
def validate(payload: HolidayValidationRequest) -> HolidayValidationResponse:
    if payload.holidays is not None:
        holidays = holidays_from_models(payload.holidays)
    else:
        holidays = SupabaseHolidayLookup().get_holidays_for_year(payload.year)

    result = validate_holidays(holidays, payload.year)
    summary = result.summary
    return HolidayValidationResponse(
        is_valid=result.is_valid,
        errors=result.errors,
        warnings=result.warnings,
        summary=HolidaySummaryModel(
            total_holidays=summary.total_holidays,
            national_holidays=summary.national_holidays,
            regional_holidays=summary.regional_holidays,
            local_holidays=summary.local_holidays,
            months_with_holidays=summary.months_with_holidays,
        ),
        holidays=holidays_to_models(holidays),
    )
