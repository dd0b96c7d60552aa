"""Schedule and monthly hours request/response schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .holidays import HolidayModel


class TimeSlotModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    start_time: str = Field(..., alias="startTime")
    end_time: str = Field(..., alias="endTime")
    hours: float = 0.0


class DayScheduleModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = False
    time_slots: List[TimeSlotModel] = Field(default_factory=list, alias="timeSlots")
    total_hours: float = Field(0.0, alias="totalHours")


class WeeklyScheduleModel(BaseModel):
    monday: DayScheduleModel = Field(default_factory=DayScheduleModel)
    tuesday: DayScheduleModel = Field(default_factory=DayScheduleModel)
    wednesday: DayScheduleModel = Field(default_factory=DayScheduleModel)
    thursday: DayScheduleModel = Field(default_factory=DayScheduleModel)
    friday: DayScheduleModel = Field(default_factory=DayScheduleModel)
    saturday: DayScheduleModel = Field(default_factory=DayScheduleModel)
    sunday: DayScheduleModel = Field(default_factory=DayScheduleModel)


class MonthlyHoursRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schedule: Dict[str, Any] = Field(..., description="Weekly schedule in its persisted shape.")
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=2200)
    assigned_hours: float = Field(0.0, ge=0.0, alias="assignedHours")
    holidays: Optional[List[HolidayModel]] = Field(
        default=None,
        description="Holidays of the month. When omitted they are looked up in the database.",
    )


class DaysBreakdownModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    laborables: int
    festivos: int
    fines_de_semana: int = Field(..., alias="finesDeSemana")


class MonthlyCalculationModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_calculated_hours: float = Field(..., alias="totalCalculatedHours")
    assigned_hours: float = Field(..., alias="assignedHours")
    difference: float
    days_breakdown: DaysBreakdownModel = Field(..., alias="daysBreakdown")
    variance: Literal["exact", "surplus", "deficit"]
    variance_label: str = Field(..., alias="varianceLabel")


HHMM_PATTERN = r"^\s*(([0-1]?[0-9]|2[0-3]):[0-5][0-9]|24:00)\s*$"


class TimeSlotOperationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    schedule: Dict[str, Any]
    day: str
    action: Literal["add", "remove", "update", "enable", "disable"]
    slot_id: Optional[str] = Field(default=None, alias="slotId")
    start_time: Optional[str] = Field(default=None, alias="startTime", pattern=HHMM_PATTERN)
    end_time: Optional[str] = Field(default=None, alias="endTime", pattern=HHMM_PATTERN)


class MonthDaysResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    month: int
    year: int
    laborables: int
    festivos: int
    fines_de_semana: int = Field(..., alias="finesDeSemana")
    holidays: List[HolidayModel]


class MonthlyBalanceResponse(BaseModel):
    user_id: str
    month: int
    year: int
    assigned_monthly_hours: float
    theoretical_monthly_hours: float
    difference: float
    laborables_monthly_hours: float
    holidays_monthly_hours: float
    variance: Literal["exact", "surplus", "deficit"]
    metadata: dict = Field(default_factory=dict)
