"""
Pricing enumerations.
"""

import enum


class DayOfWeek(str, enum.Enum):
    """Day of week as stored in ``peak_hours.day_of_week`` (lowercase)."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        """Map ``datetime.weekday()`` (Monday == 0) to a member."""
        return list(cls)[weekday]
