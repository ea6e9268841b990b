"""
Resolve a calendar date to the opening hours of its weekday.
"""

from pendulum import Date

from .models import DayHours, WeeklyHours


class WorkingHoursResolver:
    """Maps a date to that weekday's DayHours (closed if not configured)."""

    def resolve(self, date: Date, weekly_hours: WeeklyHours) -> DayHours:
        # pendulum's day_of_week: 0=Monday, 6=Sunday
        return weekly_hours.for_weekday(int(date.day_of_week))
