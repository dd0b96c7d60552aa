"""Schedule orchestration: request models in, response models out."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from ...data.assignments_repository import (
    AssignmentsUnavailable,
    get_active_assignments_for_month,
    get_user_assigned_hours,
)
from ...data.holidays_repository import HolidayLookup, SupabaseHolidayLookup, load_holidays_safely
from ...models.domain import Holiday, WeeklySchedule
from ...schemas.holidays import HolidayModel
from ..holidays.validation import determine_holiday_type
from ...schemas.schedule import (
    DaysBreakdownModel,
    MonthDaysResponse,
    MonthlyBalanceResponse,
    MonthlyCalculationModel,
    MonthlyHoursRequest,
    TimeSlotOperationRequest,
    WeeklyScheduleModel,
)
from .balance import compute_assignments_balance, unavailable_balance
from .day_types import month_days_breakdown
from .reconciler import MonthlyHoursReconciler, describe_variance, variance_kind
from .time_slots import (
    add_time_slot,
    parse_weekly_schedule,
    remove_time_slot,
    schedule_to_dict,
    set_day_enabled,
    update_time_slot,
)


def holidays_from_models(models: Iterable[HolidayModel]) -> list[Holiday]:
    return [
        Holiday(
            day=m.day,
            month=m.month,
            year=m.year,
            name=m.name,
            type=m.type or determine_holiday_type(m.name),  # type: ignore[arg-type]
            id=m.id,
        )
        for m in models
    ]


def holidays_to_models(holidays: Sequence[Holiday]) -> list[HolidayModel]:
    return [
        HolidayModel(day=h.day, month=h.month, year=h.year, name=h.name, type=h.type, id=h.id)
        for h in holidays
    ]


def schedule_to_model(schedule: WeeklySchedule) -> WeeklyScheduleModel:
    return WeeklyScheduleModel.model_validate(schedule_to_dict(schedule))


def normalize_schedule(raw: Any) -> WeeklyScheduleModel:
    return schedule_to_model(parse_weekly_schedule(raw))


def calculate_monthly_hours_for_request(
    payload: MonthlyHoursRequest,
    holiday_lookup: HolidayLookup | None = None,
) -> MonthlyCalculationModel:
    reconciler = MonthlyHoursReconciler(holiday_lookup or SupabaseHolidayLookup())
    holidays = holidays_from_models(payload.holidays) if payload.holidays is not None else None
    result = reconciler.calculate(
        parse_weekly_schedule(payload.schedule),
        month=payload.month,
        year=payload.year,
        assigned_hours=payload.assigned_hours,
        holidays=holidays,
    )
    breakdown = result.days_breakdown
    return MonthlyCalculationModel(
        total_calculated_hours=result.total_calculated_hours,
        assigned_hours=result.assigned_hours,
        difference=result.difference,
        days_breakdown=DaysBreakdownModel(
            laborables=breakdown.laborables,
            festivos=breakdown.festivos,
            fines_de_semana=breakdown.fines_de_semana,
        ),
        variance=variance_kind(result.difference),
        variance_label=describe_variance(result.difference),
    )


def apply_time_slot_operation(payload: TimeSlotOperationRequest) -> WeeklyScheduleModel:
    """Apply one slot mutation; the returned schedule carries recomputed totals.

    Raises:
        ValueError: unknown weekday or missing ``slot_id`` for remove/update.
    """
    schedule = parse_weekly_schedule(payload.schedule)
    if payload.action == "add":
        updated = add_time_slot(
            schedule,
            payload.day,
            start_time=payload.start_time or "08:00",
            end_time=payload.end_time or "09:00",
            slot_id=payload.slot_id,
        )
    elif payload.action in ("remove", "update"):
        if not payload.slot_id:
            raise ValueError(f"slot_id is required to {payload.action} a time slot")
        if payload.action == "remove":
            updated = remove_time_slot(schedule, payload.day, payload.slot_id)
        else:
            updated = update_time_slot(
                schedule,
                payload.day,
                payload.slot_id,
                start_time=payload.start_time,
                end_time=payload.end_time,
            )
    else:
        updated = set_day_enabled(schedule, payload.day, payload.action == "enable")
    return schedule_to_model(updated)


def month_days(month: int, year: int, holiday_lookup: HolidayLookup | None = None) -> MonthDaysResponse:
    holidays = load_holidays_safely(holiday_lookup or SupabaseHolidayLookup(), month, year)
    breakdown = month_days_breakdown(month, year, holidays)
    return MonthDaysResponse(
        month=month,
        year=year,
        laborables=breakdown.laborables,
        festivos=breakdown.festivos,
        fines_de_semana=breakdown.fines_de_semana,
        holidays=holidays_to_models(holidays),
    )


def compute_user_monthly_balance(
    user_id: str,
    month: int,
    year: int,
    holiday_lookup: HolidayLookup | None = None,
) -> MonthlyBalanceResponse | None:
    """Theoretical hours of the user's active assignments against their assigned hours.

    Returns None when the user cannot be found.

    Raises:
        AssignmentsUnavailable: the user's assigned hours could not be read.
    """
    assigned = get_user_assigned_hours(user_id)
    if assigned is None:
        return None

    metadata: dict[str, Any] = {"source": "database"}
    try:
        assignments = get_active_assignments_for_month(user_id, month, year)
    except AssignmentsUnavailable as exc:
        balance = unavailable_balance(month, year, assigned, user_id=user_id)
        metadata = {"source": "unavailable", "error": str(exc)}
    else:
        holidays = load_holidays_safely(holiday_lookup or SupabaseHolidayLookup(), month, year)
        balance = compute_assignments_balance(assignments, month, year, assigned, holidays, user_id=user_id)
        metadata["assignments"] = len(assignments)
        metadata["holidays"] = len(holidays)

    return MonthlyBalanceResponse(
        user_id=user_id,
        month=balance.month,
        year=balance.year,
        assigned_monthly_hours=balance.assigned_monthly_hours,
        theoretical_monthly_hours=balance.theoretical_monthly_hours,
        difference=balance.difference,
        laborables_monthly_hours=balance.laborables_monthly_hours,
        holidays_monthly_hours=balance.holidays_monthly_hours,
        variance=variance_kind(balance.difference),
        metadata=metadata,
    )
