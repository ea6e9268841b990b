"""
Candidate slot generation inside a day's opening window.
"""

from typing import List

from .models import DayHours, Slot


class SlotGenerator:
    """
    Enumerates fixed-width candidate slots.

    Slots start at the opening time and advance by the slot interval; a
    slot is kept while it ends no later than the closing time.

    Example:
    Open: 09:00 - 12:00, interval 60, duration 60
    Result: [09:00-10:00, 10:00-11:00, 11:00-12:00]
    """

    def generate(
        self,
        day_hours: DayHours,
        service_duration_minutes: int,
        slot_interval_minutes: int
    ) -> List[Slot]:
        if service_duration_minutes <= 0 or slot_interval_minutes <= 0:
            raise ValueError(
                "Service duration and slot interval must be greater than zero, "
                f"got {service_duration_minutes} and {slot_interval_minutes}"
            )

        window = day_hours.window()
        if window is None:
            return []

        open_minutes, close_minutes = window
        slots: List[Slot] = []

        start = open_minutes
        while start + service_duration_minutes <= close_minutes:
            slots.append(Slot(start=start, end=start + service_duration_minutes))
            start += slot_interval_minutes

        return slots
