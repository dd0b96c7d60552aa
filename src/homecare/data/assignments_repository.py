"""Read access to users' assigned hours and their active assignments."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from ..db.supabase import get_supabase_client
from ..models.domain import AssignmentRecord
from ..services.schedule.day_types import days_in_month

logger = logging.getLogger(__name__)


class AssignmentsUnavailable(RuntimeError):
    """Raised when the assignments table could not be queried."""


def _parse_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def get_user_assigned_hours(user_id: str, client: Any | None = None) -> float | None:
    """Return the user's ``monthly_assigned_hours`` or None when the user is unknown.

    Raises:
        AssignmentsUnavailable: when the backend is not configured or the query fails.
    """
    supabase = client if client is not None else get_supabase_client()
    if not supabase:
        raise AssignmentsUnavailable("Supabase not configured")
    try:
        response = (
            supabase.table("users")
            .select("id, monthly_assigned_hours")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to load user {user_id}: {e}")
        raise AssignmentsUnavailable(f"Failed to load user {user_id}: {e}") from e
    rows = response.data or []
    if not rows:
        return None
    return float(rows[0].get("monthly_assigned_hours") or 0.0)


def get_active_assignments_for_month(
    user_id: str,
    month: int,
    year: int,
    client: Any | None = None,
) -> list[AssignmentRecord]:
    """Active assignments of ``user_id`` overlapping the given month.

    Raises:
        AssignmentsUnavailable: when the backend is not configured or the query fails.
    """
    supabase = client if client is not None else get_supabase_client()
    if not supabase:
        raise AssignmentsUnavailable("Supabase not configured")

    start = date(year, month, 1).isoformat()
    end = date(year, month, days_in_month(year, month)).isoformat()
    try:
        response = (
            supabase.table("assignments")
            .select("user_id, assignment_type, schedule, start_date, end_date, status")
            .eq("user_id", user_id)
            .eq("status", "active")
            .lte("start_date", end)
            .or_(f"end_date.is.null,end_date.gte.{start}")
            .execute()
        )
    except Exception as e:
        raise AssignmentsUnavailable(f"Failed to load assignments for user {user_id}: {e}") from e

    assignments: list[AssignmentRecord] = []
    for row in response.data or []:
        assignments.append(
            AssignmentRecord(
                assignment_type=str(row.get("assignment_type") or ""),
                schedule=row.get("schedule"),
                start_date=_parse_date(row.get("start_date")),
                end_date=_parse_date(row.get("end_date")),
                status=str(row.get("status") or "active"),
                user_id=str(row.get("user_id") or user_id),
            )
        )
    return assignments
