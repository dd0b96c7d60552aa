"""Weekly schedule and monthly hours helpers."""

from .reconciler import MonthlyHoursReconciler, calculate_monthly_hours, describe_variance, variance_kind
from .time_slots import (
    add_time_slot,
    parse_weekly_schedule,
    remove_time_slot,
    set_day_enabled,
    update_time_slot,
)

__all__ = [
    "MonthlyHoursReconciler",
    "calculate_monthly_hours",
    "describe_variance",
    "variance_kind",
    "add_time_slot",
    "remove_time_slot",
    "update_time_slot",
    "set_day_enabled",
    "parse_weekly_schedule",
]
