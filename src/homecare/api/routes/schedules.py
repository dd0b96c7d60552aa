"""Weekly schedule and monthly hours endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.schedule import (
    MonthDaysResponse,
    MonthlyCalculationModel,
    MonthlyHoursRequest,
    TimeSlotOperationRequest,
    WeeklyScheduleModel,
)
from ...services.schedule.service import (
    apply_time_slot_operation,
    calculate_monthly_hours_for_request,
    month_days,
    normalize_schedule,
)

router = APIRouter(prefix="/schedules", tags=["schedules"])


@router.post("/monthly-hours", response_model=MonthlyCalculationModel, status_code=status.HTTP_200_OK)
def monthly_hours(payload: MonthlyHoursRequest) -> MonthlyCalculationModel:
    try:
        return calculate_monthly_hours_for_request(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error calculating monthly hours: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to calculate monthly hours: {str(exc)}",
        ) from exc


@router.post("/time-slots", response_model=WeeklyScheduleModel, status_code=status.HTTP_200_OK)
def time_slots(payload: TimeSlotOperationRequest) -> WeeklyScheduleModel:
    """Add, remove or edit a slot, or toggle a day, returning the recomputed schedule."""
    try:
        return apply_time_slot_operation(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.post("/normalize", response_model=WeeklyScheduleModel, status_code=status.HTTP_200_OK)
def normalize(payload: Dict[str, Any]) -> WeeklyScheduleModel:
    """Parse a persisted schedule, zero-padding times and recomputing totals."""
    return normalize_schedule(payload)


@router.get("/month-days", response_model=MonthDaysResponse, status_code=status.HTTP_200_OK)
def get_month_days(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(..., ge=1900, le=2200),
) -> MonthDaysResponse:
    return month_days(month, year)
