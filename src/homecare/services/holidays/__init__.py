"""Holiday calendar services."""

from .validation import determine_holiday_type, validate_holidays

__all__ = ["determine_holiday_type", "validate_holidays"]
