"""Integrity checks over a year's holiday calendar."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from ...models.domain import Holiday

NATIONAL_HOLIDAY_NAMES: frozenset[str] = frozenset(
    {
        "Cap d'Any",
        "Reis",
        "Divendres Sant",
        "Dilluns de Pasqua Florida",
        "Festa del Treball",
        "Sant Joan",
        "L'Assumpció",
        "Diada Nacional de Catalunya",
        "Tots Sants",
        "Dia de la Constitució",
        "La Immaculada",
        "Nadal",
        "Sant Esteve",
    }
)
LOCAL_HOLIDAY_NAMES: frozenset[str] = frozenset({"Fira a Mataró", "Festa major de Les Santes"})

# (day, month, name, type) of holidays every yearly calendar is expected to contain.
EXPECTED_HOLIDAYS: tuple[tuple[int, int, str, str], ...] = (
    (1, 1, "Cap d'Any", "national"),
    (6, 1, "Reis", "national"),
    (9, 6, "Fira a Mataró", "local"),
    (28, 7, "Festa major de Les Santes", "local"),
    (15, 8, "L'Assumpció", "national"),
    (25, 12, "Nadal", "national"),
)

MIN_MONTHS_WITH_HOLIDAYS = 6
MIN_NATIONAL_HOLIDAYS = 8
MIN_LOCAL_HOLIDAYS = 2


@dataclass(slots=True)
class HolidaySummary:
    total_holidays: int = 0
    national_holidays: int = 0
    regional_holidays: int = 0
    local_holidays: int = 0
    months_with_holidays: list[int] = field(default_factory=list)


@dataclass(slots=True)
class HolidayValidation:
    is_valid: bool
    errors: list[str]
    warnings: list[str]
    summary: HolidaySummary


def determine_holiday_type(name: str) -> str:
    if name in NATIONAL_HOLIDAY_NAMES:
        return "national"
    if name in LOCAL_HOLIDAY_NAMES:
        return "local"
    return "regional"


def validate_holidays(holidays: Sequence[Holiday], year: int) -> HolidayValidation:
    """Check a year's holidays for duplicates, bad fields and missing expected dates."""
    errors: list[str] = []
    warnings: list[str] = []
    summary = HolidaySummary(total_holidays=len(holidays))

    if not holidays:
        errors.append(f"No hay festivos registrados para el año {year}")
        return HolidayValidation(is_valid=False, errors=errors, warnings=warnings, summary=summary)

    seen: set[tuple[int, int, int]] = set()
    for holiday in holidays:
        key = (holiday.year, holiday.month, holiday.day)
        if key in seen:
            errors.append(f"Festivo duplicado: {holiday.name} ({holiday.day}/{holiday.month}/{holiday.year})")
        seen.add(key)

        if holiday.type == "national":
            summary.national_holidays += 1
        elif holiday.type == "regional":
            summary.regional_holidays += 1
        elif holiday.type == "local":
            summary.local_holidays += 1
        else:
            errors.append(f"Tipo de festivo inválido: {holiday.type} para {holiday.name}")

        if not 1 <= holiday.day <= 31:
            errors.append(f"Día inválido: {holiday.day} para {holiday.name}")
        if not 1 <= holiday.month <= 12:
            errors.append(f"Mes inválido: {holiday.month} para {holiday.name}")
        if holiday.year != year:
            errors.append(f"Año incorrecto: {holiday.year} para {holiday.name} (esperado: {year})")
        if not holiday.name.strip():
            errors.append(f"Nombre de festivo vacío para {holiday.day}/{holiday.month}/{holiday.year}")

        if holiday.month not in summary.months_with_holidays:
            summary.months_with_holidays.append(holiday.month)

    for day, month, name, expected_type in EXPECTED_HOLIDAYS:
        found = next((h for h in holidays if h.day == day and h.month == month), None)
        if found is None:
            warnings.append(f"Festivo esperado no encontrado: {name} ({day}/{month})")
        elif found.type != expected_type:
            warnings.append(f"Tipo incorrecto para {name}: esperado {expected_type}, encontrado {found.type}")

    if len(summary.months_with_holidays) < MIN_MONTHS_WITH_HOLIDAYS:
        warnings.append(
            f"Pocos meses con festivos: {len(summary.months_with_holidays)} "
            f"(esperado al menos {MIN_MONTHS_WITH_HOLIDAYS})"
        )
    if summary.national_holidays < MIN_NATIONAL_HOLIDAYS:
        warnings.append(
            f"Pocos festivos nacionales: {summary.national_holidays} (esperado al menos {MIN_NATIONAL_HOLIDAYS})"
        )
    if summary.local_holidays < MIN_LOCAL_HOLIDAYS:
        warnings.append(
            f"Pocos festivos locales: {summary.local_holidays} (esperado al menos {MIN_LOCAL_HOLIDAYS})"
        )

    return HolidayValidation(is_valid=not errors, errors=errors, warnings=warnings, summary=summary)
