"""Domain models for schedules, holidays and stop addresses."""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Literal, Optional

WEEKDAYS: tuple[str, ...] = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

HolidayType = Literal["national", "regional", "local"]
HOLIDAY_TYPES: tuple[str, ...] = ("national", "regional", "local")


@dataclass(slots=True)
class TimeSlot:
    """A contiguous wall-clock range inside one day of a weekly schedule."""

    id: str
    start_time: str
    end_time: str
    hours: float = 0.0


@dataclass(slots=True)
class DaySchedule:
    """Slots configured for one weekday; ``total_hours`` is derived from them."""

    enabled: bool = False
    time_slots: List[TimeSlot] = field(default_factory=list)
    total_hours: float = 0.0


WeeklySchedule = Dict[str, DaySchedule]


@dataclass(slots=True)
class Holiday:
    day: int
    month: int
    year: int
    name: str
    type: HolidayType = "national"
    id: Optional[str] = None


@dataclass(slots=True)
class DaysBreakdown:
    laborables: int = 0
    festivos: int = 0
    fines_de_semana: int = 0

    @property
    def total(self) -> int:
        return self.laborables + self.festivos + self.fines_de_semana


@dataclass(slots=True)
class MonthlyCalculation:
    """Projection of a weekly schedule over one month against the assigned hours."""

    total_calculated_hours: float
    assigned_hours: float
    difference: float
    days_breakdown: DaysBreakdown


@dataclass(slots=True, frozen=True)
class AddressInfo:
    """Address fields of one route stop as stored on the client record."""

    address: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None


@dataclass(slots=True)
class AssignmentRecord:
    """Active assignment row used for monthly balance calculations."""

    assignment_type: str
    schedule: object
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str = "active"
    user_id: Optional[str] = None
