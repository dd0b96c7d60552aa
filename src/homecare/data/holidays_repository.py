"""Holiday lookups backed by Supabase, with an in-memory variant for offline use."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol, Sequence

from ..db.supabase import get_supabase_client
from ..models.domain import HOLIDAY_TYPES, Holiday
from ..services.holidays.validation import determine_holiday_type

logger = logging.getLogger(__name__)


class HolidayLookup(Protocol):
    """Source of the holidays falling in a given month."""

    def get_holidays_for_month(self, month: int, year: int) -> Sequence[Holiday]:
        ...


def _row_to_holiday(row: dict[str, Any]) -> Holiday:
    holiday_type = str(row.get("type") or determine_holiday_type(str(row.get("name") or "")))
    if holiday_type not in HOLIDAY_TYPES:
        raise ValueError(f"Unknown holiday type '{holiday_type}'")
    return Holiday(
        day=int(row["day"]),
        month=int(row["month"]),
        year=int(row["year"]),
        name=str(row.get("name") or ""),
        type=holiday_type,  # type: ignore[arg-type]
        id=str(row["id"]) if row.get("id") is not None else None,
    )


def _rows_to_holidays(rows: Iterable[dict[str, Any]]) -> list[Holiday]:
    holidays: list[Holiday] = []
    for row in rows:
        try:
            holidays.append(_row_to_holiday(row))
        except (KeyError, ValueError, TypeError) as e:
            # Skip invalid rows but continue processing
            logger.warning(f"Skipping invalid holiday row: {e}")
    return holidays


class SupabaseHolidayLookup:
    """Reads the ``holidays`` table.

    Every failure (client not configured, query error, network error) is
    logged and reported as "no holidays" so callers can keep computing.
    """

    table_name = "holidays"

    def __init__(self, client: Any | None = None) -> None:
        self._client = client

    def _get_client(self) -> Any | None:
        return self._client if self._client is not None else get_supabase_client()

    def get_holidays_for_month(self, month: int, year: int) -> list[Holiday]:
        supabase = self._get_client()
        if not supabase:
            logger.warning("Supabase not configured - assuming no holidays for %02d/%d", month, year)
            return []
        try:
            response = (
                supabase.table(self.table_name)
                .select("*")
                .eq("month", month)
                .eq("year", year)
                .order("day")
                .execute()
            )
        except Exception as e:
            logger.error(f"Error loading holidays for {month:02d}/{year}: {e}")
            return []
        return _rows_to_holidays(response.data or [])

    def get_holidays_for_year(self, year: int) -> list[Holiday]:
        supabase = self._get_client()
        if not supabase:
            logger.warning("Supabase not configured - assuming no holidays for %d", year)
            return []
        try:
            response = (
                supabase.table(self.table_name)
                .select("*")
                .eq("year", year)
                .order("month")
                .order("day")
                .execute()
            )
        except Exception as e:
            logger.error(f"Error loading holidays for {year}: {e}")
            return []
        return _rows_to_holidays(response.data or [])


class StaticHolidayLookup:
    """Holiday lookup over a fixed list, filtered per month."""

    def __init__(self, holidays: Iterable[Holiday] = ()) -> None:
        self._holidays = list(holidays)

    def get_holidays_for_month(self, month: int, year: int) -> list[Holiday]:
        return sorted(
            (h for h in self._holidays if h.month == month and h.year == year),
            key=lambda h: h.day,
        )

    def get_holidays_for_year(self, year: int) -> list[Holiday]:
        return sorted(
            (h for h in self._holidays if h.year == year),
            key=lambda h: (h.month, h.day),
        )


def load_holidays_safely(lookup: HolidayLookup | None, month: int, year: int) -> list[Holiday]:
    """Ask ``lookup`` for a month's holidays, degrading to an empty list on any failure."""
    if lookup is None:
        return []
    try:
        return list(lookup.get_holidays_for_month(month, year))
    except Exception:
        logger.exception("Holiday lookup failed for %02d/%d; continuing without holidays", month, year)
        return []
