"""Monthly hours projection of a weekly schedule and variance against assigned hours."""

from __future__ import annotations

import logging
from typing import Iterable, Literal

from ...data.holidays_repository import HolidayLookup, load_holidays_safely
from ...models.domain import DaysBreakdown, Holiday, MonthlyCalculation, WeeklySchedule
from .day_types import month_days_breakdown
from .time_slots import effective_day_hours

logger = logging.getLogger(__name__)

VarianceKind = Literal["exact", "surplus", "deficit"]

# Differences smaller than this are float noise from summing slot fractions.
_EXACT_TOLERANCE = 1e-9


def calculate_monthly_hours(
    schedule: WeeklySchedule,
    month: int,
    year: int,
    assigned_hours: float,
    holidays: Iterable[Holiday] = (),
) -> MonthlyCalculation:
    """Project a weekly schedule over one month.

    Monday's hours stand in for every workday and Sunday's hours for every
    weekend day and holiday. Tuesday..Saturday hours are not consulted: this
    is the long-standing projection rule and changing it changes totals.
    """
    breakdown = month_days_breakdown(month, year, holidays)
    monday_hours = effective_day_hours(schedule.get("monday"))
    sunday_hours = effective_day_hours(schedule.get("sunday"))

    total = (
        breakdown.laborables * monday_hours
        + breakdown.festivos * sunday_hours
        + breakdown.fines_de_semana * sunday_hours
    )
    return MonthlyCalculation(
        total_calculated_hours=total,
        assigned_hours=assigned_hours,
        difference=total - assigned_hours,
        days_breakdown=breakdown,
    )


def variance_kind(difference: float) -> VarianceKind:
    if abs(difference) < _EXACT_TOLERANCE:
        return "exact"
    return "surplus" if difference > 0 else "deficit"


def describe_variance(difference: float) -> str:
    """Human readable label: surplus is "exceso", deficit is "defecto"."""
    kind = variance_kind(difference)
    if kind == "surplus":
        return f"Exceso de {difference:.1f} horas"
    if kind == "deficit":
        return f"Defecto de {abs(difference):.1f} horas"
    return "Horas exactas"


class MonthlyHoursReconciler:
    """Computes monthly projections, fetching holidays from an injected lookup."""

    def __init__(self, holiday_lookup: HolidayLookup | None = None) -> None:
        self.holiday_lookup = holiday_lookup

    def holidays_for(self, month: int, year: int) -> list[Holiday]:
        return load_holidays_safely(self.holiday_lookup, month, year)

    def month_days(self, month: int, year: int) -> DaysBreakdown:
        return month_days_breakdown(month, year, self.holidays_for(month, year))

    def calculate(
        self,
        schedule: WeeklySchedule,
        month: int,
        year: int,
        assigned_hours: float,
        holidays: Iterable[Holiday] | None = None,
    ) -> MonthlyCalculation:
        if holidays is None:
            holidays = self.holidays_for(month, year)
        result = calculate_monthly_hours(schedule, month, year, assigned_hours, holidays)
        logger.debug(
            "Monthly hours %02d/%d: %.2f calculated vs %.2f assigned (%s)",
            month,
            year,
            result.total_calculated_hours,
            assigned_hours,
            variance_kind(result.difference),
        )
        return result
