import pytest

from src.homecare.data.holidays_repository import StaticHolidayLookup
from src.homecare.models.domain import DaySchedule, Holiday, TimeSlot
from src.homecare.services.schedule.day_types import (
    classify_day,
    days_in_month,
    month_days_breakdown,
)
from src.homecare.services.schedule.reconciler import (
    MonthlyHoursReconciler,
    calculate_monthly_hours,
    describe_variance,
    variance_kind,
)
from src.homecare.services.schedule.time_slots import empty_weekly_schedule, slot_hours


def _day(hours_range, enabled=True):
    start, end = hours_range
    hours = slot_hours(start, end)
    return DaySchedule(
        enabled=enabled,
        time_slots=[TimeSlot(id="1", start_time=start, end_time=end, hours=hours)],
        total_hours=hours,
    )


def _schedule(monday=("08:00", "16:00"), sunday=None, monday_enabled=True):
    schedule = empty_weekly_schedule()
    if monday:
        schedule["monday"] = _day(monday, enabled=monday_enabled)
    if sunday:
        schedule["sunday"] = _day(sunday)
    return schedule


def _holiday(day, month=2, year=2026, name="Festa"):
    return Holiday(day=day, month=month, year=year, name=name, type="local")


def test_february_2026_breakdown_without_holidays():
    breakdown = month_days_breakdown(2, 2026)
    assert breakdown.laborables == 20
    assert breakdown.fines_de_semana == 8
    assert breakdown.festivos == 0


def test_eight_hour_mondays_project_to_160_hours():
    result = calculate_monthly_hours(_schedule(), month=2, year=2026, assigned_hours=160)
    assert result.total_calculated_hours == 160
    assert result.difference == 0
    assert variance_kind(result.difference) == "exact"


def test_holiday_on_sunday_counts_only_as_holiday():
    # 1 Feb 2026 is a Sunday
    breakdown = month_days_breakdown(2, 2026, [_holiday(1)])
    assert breakdown.festivos == 1
    assert breakdown.fines_de_semana == 7
    assert breakdown.laborables == 20


def test_holiday_on_workday_uses_sunday_hours():
    schedule = _schedule(sunday=("09:00", "13:00"))
    result = calculate_monthly_hours(schedule, 2, 2026, assigned_hours=200, holidays=[_holiday(2)])

    assert result.days_breakdown.laborables == 19
    assert result.days_breakdown.festivos == 1
    assert result.days_breakdown.fines_de_semana == 8
    assert result.total_calculated_hours == 19 * 8 + 9 * 4
    assert result.difference == pytest.approx(-12)
    assert variance_kind(result.difference) == "deficit"


def test_holidays_of_other_months_are_ignored():
    breakdown = month_days_breakdown(2, 2026, [_holiday(2, month=3), _holiday(2, year=2025)])
    assert breakdown.festivos == 0


@pytest.mark.parametrize("month", range(1, 13))
def test_breakdown_covers_every_day_of_the_month(month):
    holidays = [_holiday(1, month=month, year=2024), _holiday(15, month=month, year=2024)]
    breakdown = month_days_breakdown(month, 2024, holidays)
    assert breakdown.total == days_in_month(2024, month)


def test_days_in_month_handles_leap_years_and_rejects_bad_months():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2026, 2) == 28
    with pytest.raises(ValueError):
        days_in_month(2026, 13)


def test_classify_day_precedence():
    assert classify_day(2026, 2, 1, {1}) == "holiday"
    assert classify_day(2026, 2, 1, set()) == "weekend"
    assert classify_day(2026, 2, 2, set()) == "workday"


def test_only_monday_and_sunday_are_consulted():
    schedule = _schedule()
    schedule["tuesday"] = _day(("08:00", "20:00"))
    schedule["saturday"] = _day(("08:00", "20:00"))
    result = calculate_monthly_hours(schedule, 2, 2026, assigned_hours=0)
    assert result.total_calculated_hours == 160


def test_disabled_monday_contributes_zero():
    schedule = _schedule(monday_enabled=False, sunday=("10:00", "12:00"))
    result = calculate_monthly_hours(schedule, 2, 2026, assigned_hours=10)
    assert result.total_calculated_hours == 16
    assert result.difference == 6
    assert variance_kind(result.difference) == "surplus"


def test_describe_variance_labels():
    assert describe_variance(12.5) == "Exceso de 12.5 horas"
    assert describe_variance(-3) == "Defecto de 3.0 horas"
    assert describe_variance(0.0) == "Horas exactas"
    assert describe_variance(1e-12) == "Horas exactas"


def test_reconciler_uses_lookup_when_holidays_not_given():
    lookup = StaticHolidayLookup([_holiday(2), _holiday(3, month=3)])
    reconciler = MonthlyHoursReconciler(lookup)

    result = reconciler.calculate(_schedule(), 2, 2026, assigned_hours=152)
    assert result.days_breakdown.festivos == 1
    assert result.total_calculated_hours == 152
    assert reconciler.month_days(3, 2026).festivos == 1


def test_reconciler_prefers_explicit_holidays():
    class ExplodingLookup:
        def get_holidays_for_month(self, month, year):
            raise AssertionError("lookup should not be called")

    reconciler = MonthlyHoursReconciler(ExplodingLookup())
    result = reconciler.calculate(_schedule(), 2, 2026, assigned_hours=0, holidays=[])
    assert result.days_breakdown.festivos == 0


def test_failing_lookup_degrades_to_no_holidays():
    class BrokenLookup:
        def get_holidays_for_month(self, month, year):
            raise RuntimeError("database down")

    reconciler = MonthlyHoursReconciler(BrokenLookup())
    result = reconciler.calculate(_schedule(), 2, 2026, assigned_hours=160)
    assert result.days_breakdown.festivos == 0
    assert result.total_calculated_hours == 160


def test_reconciler_without_lookup_assumes_no_holidays():
    result = MonthlyHoursReconciler().calculate(_schedule(), 2, 2026, assigned_hours=0)
    assert result.days_breakdown.laborables == 20
