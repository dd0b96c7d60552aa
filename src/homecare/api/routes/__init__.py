"""Route group exports."""

from . import health, holidays, routes, schedules, users

__all__ = ["health", "holidays", "routes", "schedules", "users"]
