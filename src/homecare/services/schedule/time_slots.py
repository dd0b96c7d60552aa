"""Time slot parsing and weekly schedule mutation helpers.

Every helper that changes the slots of a day returns a new schedule whose
``total_hours`` has already been recomputed; callers never see a stale total.
"""

from __future__ import annotations

import json
import logging
import math
import re
import uuid
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping

from ...models.domain import WEEKDAYS, DaySchedule, TimeSlot, WeeklySchedule

logger = logging.getLogger(__name__)

# Slots are wall-clock times; they are anchored on a fixed date so that
# subtraction never crosses a daylight-saving boundary.
REFERENCE_DATE = date(2000, 1, 1)
DEFAULT_SLOT_START = "08:00"
DEFAULT_SLOT_END = "09:00"
END_OF_DAY = "24:00"

# Key order when reading slot times from persisted rows.
SCHEDULE_TIME_KEYS = (("startTime", "start"), ("endTime", "end"))
ASSIGNMENT_TIME_KEYS = (("start", "startTime"), ("end", "endTime"))

_TIME_PATTERN = re.compile(r"^\s*(?:([0-1]?[0-9]|2[0-3]):([0-5][0-9])|(24):(00))\s*$")


def normalize_time(value: Any) -> str | None:
    """Return ``value`` as a zero-padded ``HH:MM`` string, or None when malformed.

    Single-digit hours are accepted ("8:00" -> "08:00"). "24:00" is kept as
    the end of the day.
    """
    if not isinstance(value, str):
        return None
    match = _TIME_PATTERN.match(value)
    if not match:
        return None
    if match.group(3):
        return END_OF_DAY
    hour, minute = int(match.group(1)), int(match.group(2))
    return f"{hour:02d}:{minute:02d}"


def _to_datetime(value: Any) -> datetime | None:
    normalized = normalize_time(value)
    if normalized is None:
        return None
    if normalized == END_OF_DAY:
        return datetime.combine(REFERENCE_DATE + timedelta(days=1), time(0, 0))
    hour, minute = (int(part) for part in normalized.split(":"))
    return datetime.combine(REFERENCE_DATE, time(hour, minute))


def slot_hours(start_time: Any, end_time: Any) -> float:
    """Decimal hours between two ``HH:MM`` strings.

    Malformed times and ranges that do not end after they start yield 0.0.
    """
    start = _to_datetime(start_time)
    end = _to_datetime(end_time)
    if start is None or end is None:
        logger.debug("Ignoring slot with malformed times %r-%r", start_time, end_time)
        return 0.0
    hours = (end - start).total_seconds() / 3600
    if hours <= 0:
        logger.debug("Ignoring slot %s-%s that does not end after it starts", start_time, end_time)
        return 0.0
    return hours


def _refreshed_hours(slot: TimeSlot) -> float:
    # Slots without times carry their hours directly.
    if not slot.start_time and not slot.end_time:
        return slot.hours if slot.hours > 0 else 0.0
    return slot_hours(slot.start_time, slot.end_time)


def recompute_day(day: DaySchedule) -> DaySchedule:
    """Return a copy of ``day`` with slot hours and ``total_hours`` refreshed."""
    slots = [
        TimeSlot(
            id=slot.id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            hours=_refreshed_hours(slot),
        )
        for slot in day.time_slots
    ]
    return DaySchedule(
        enabled=day.enabled,
        time_slots=slots,
        total_hours=sum(slot.hours for slot in slots),
    )


def effective_day_hours(day: DaySchedule | None) -> float:
    """Hours a day contributes to projections; disabled days contribute nothing."""
    if day is None or not day.enabled:
        return 0.0
    return day.total_hours


def empty_weekly_schedule() -> WeeklySchedule:
    return {weekday: DaySchedule() for weekday in WEEKDAYS}


def copy_schedule(schedule: WeeklySchedule) -> WeeklySchedule:
    copied: WeeklySchedule = {}
    for weekday in WEEKDAYS:
        day = schedule.get(weekday) or DaySchedule()
        copied[weekday] = DaySchedule(
            enabled=day.enabled,
            time_slots=[
                TimeSlot(id=s.id, start_time=s.start_time, end_time=s.end_time, hours=s.hours)
                for s in day.time_slots
            ],
            total_hours=day.total_hours,
        )
    return copied


def _check_day(day_key: str) -> str:
    key = day_key.strip().lower()
    if key not in WEEKDAYS:
        raise ValueError(f"Unknown weekday '{day_key}'. Expected one of: {', '.join(WEEKDAYS)}")
    return key


def add_time_slot(
    schedule: WeeklySchedule,
    day_key: str,
    start_time: str = DEFAULT_SLOT_START,
    end_time: str = DEFAULT_SLOT_END,
    slot_id: str | None = None,
) -> WeeklySchedule:
    """Append a slot to one day.

    Raises:
        ValueError: unknown weekday, or ``slot_id`` already used in that day.
    """
    key = _check_day(day_key)
    updated = copy_schedule(schedule)
    day = updated[key]
    if slot_id is not None and any(slot.id == slot_id for slot in day.time_slots):
        raise ValueError(f"Time slot '{slot_id}' already exists on {key}")
    new_slot = TimeSlot(
        id=slot_id or uuid.uuid4().hex,
        start_time=normalize_time(start_time) or start_time,
        end_time=normalize_time(end_time) or end_time,
    )
    updated[key] = recompute_day(
        DaySchedule(enabled=day.enabled, time_slots=[*day.time_slots, new_slot])
    )
    return updated


def remove_time_slot(schedule: WeeklySchedule, day_key: str, slot_id: str) -> WeeklySchedule:
    key = _check_day(day_key)
    updated = copy_schedule(schedule)
    day = updated[key]
    remaining = [slot for slot in day.time_slots if slot.id != slot_id]
    updated[key] = recompute_day(DaySchedule(enabled=day.enabled, time_slots=remaining))
    return updated


def update_time_slot(
    schedule: WeeklySchedule,
    day_key: str,
    slot_id: str,
    *,
    start_time: str | None = None,
    end_time: str | None = None,
) -> WeeklySchedule:
    """Change the start and/or end of one slot; unknown slot ids leave the day as is."""
    key = _check_day(day_key)
    updated = copy_schedule(schedule)
    day = updated[key]
    slots: list[TimeSlot] = []
    for slot in day.time_slots:
        if slot.id == slot_id:
            slot = TimeSlot(
                id=slot.id,
                start_time=(normalize_time(start_time) or start_time) if start_time is not None else slot.start_time,
                end_time=(normalize_time(end_time) or end_time) if end_time is not None else slot.end_time,
            )
        slots.append(slot)
    updated[key] = recompute_day(DaySchedule(enabled=day.enabled, time_slots=slots))
    return updated


def set_day_enabled(schedule: WeeklySchedule, day_key: str, enabled: bool) -> WeeklySchedule:
    key = _check_day(day_key)
    updated = copy_schedule(schedule)
    day = updated[key]
    updated[key] = recompute_day(DaySchedule(enabled=enabled, time_slots=day.time_slots))
    return updated


def _first_str(raw: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if isinstance(raw.get(key), str):
            return raw[key]
    return None


def parse_slot(
    raw: Mapping[str, Any],
    fallback_id: str,
    time_keys: tuple[tuple[str, ...], tuple[str, ...]] = SCHEDULE_TIME_KEYS,
) -> TimeSlot | None:
    """Parse one persisted slot.

    ``time_keys`` gives the start and end keys in lookup order; the first
    string value wins.
    """
    start = _first_str(raw, time_keys[0])
    end = _first_str(raw, time_keys[1])
    slot_id = raw.get("id")
    slot_id = str(slot_id) if slot_id is not None else fallback_id

    if isinstance(start, str) and isinstance(end, str) and start and end:
        return TimeSlot(
            id=slot_id,
            start_time=normalize_time(start) or start,
            end_time=normalize_time(end) or end,
            hours=slot_hours(start, end),
        )

    # Legacy rows sometimes only carry the number of hours.
    direct = raw.get("hours")
    if isinstance(direct, (int, float)) and not isinstance(direct, bool):
        if math.isfinite(direct) and direct > 0:
            return TimeSlot(id=slot_id, start_time="", end_time="", hours=float(direct))
    return None


def parse_weekly_schedule(
    raw: Any,
    time_keys: tuple[tuple[str, ...], tuple[str, ...]] = SCHEDULE_TIME_KEYS,
) -> WeeklySchedule:
    """Build a weekly schedule from its persisted JSON shape.

    Accepts a JSON string or a mapping keyed by lowercase weekday names.
    Missing or malformed days become disabled empty days; slot times are
    normalised to ``HH:MM``. A slot id repeated within a day gets a fresh id.
    """
    data: Any = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError, ValueError):
            logger.warning("Weekly schedule is not valid JSON; using an empty schedule")
            data = {}
    if not isinstance(data, Mapping):
        data = {}

    schedule = empty_weekly_schedule()
    for weekday in WEEKDAYS:
        day_raw = data.get(weekday)
        if not isinstance(day_raw, Mapping):
            continue
        enabled = day_raw.get("enabled")
        slots_raw = day_raw.get("timeSlots")
        if not isinstance(slots_raw, list):
            slots_raw = []

        slots: list[TimeSlot] = []
        seen_ids: set[str] = set()
        for index, slot_raw in enumerate(slots_raw):
            if not isinstance(slot_raw, Mapping):
                continue
            slot = parse_slot(slot_raw, fallback_id=f"{weekday}-{index + 1}", time_keys=time_keys)
            if slot is None:
                continue
            if slot.id in seen_ids:
                fresh_id = uuid.uuid4().hex
                logger.warning(f"Duplicate time slot id '{slot.id}' on {weekday}; renamed to '{fresh_id}'")
                slot.id = fresh_id
            seen_ids.add(slot.id)
            slots.append(slot)

        schedule[weekday] = DaySchedule(
            enabled=enabled if isinstance(enabled, bool) else False,
            time_slots=slots,
            total_hours=sum(slot.hours for slot in slots),
        )
    return schedule


def schedule_to_dict(schedule: WeeklySchedule) -> dict[str, Any]:
    """Serialise a weekly schedule to its persisted camelCase shape."""
    result: dict[str, Any] = {}
    for weekday in WEEKDAYS:
        day = schedule.get(weekday) or DaySchedule()
        result[weekday] = {
            "enabled": day.enabled,
            "timeSlots": [
                {"id": s.id, "startTime": s.start_time, "endTime": s.end_time, "hours": s.hours}
                for s in day.time_slots
            ],
            "totalHours": day.total_hours,
        }
    return result
