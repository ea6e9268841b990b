"""
Domain models for business hours, bookings and candidate slots.

All clock values are opaque local "HH:mm" strings at the edges and minutes
since midnight internally.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple, Union

from pendulum import Date

_CLOCK_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


def parse_clock(value: str) -> int:
    """
    Convert an "HH:mm" string to minutes since midnight.

    "24:00" is accepted so that a business can close at midnight.

    Raises:
        ValueError: If the value is not a valid clock time
    """
    match = _CLOCK_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid clock time '{value}', expected HH:mm")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59 or hours > 24 or (hours == 24 and minutes != 0):
        raise ValueError(f"Clock time out of range: '{value}'")

    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Convert minutes since midnight back to "HH:mm"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class DayHours:
    """
    Opening hours for a single weekday.

    Instances are not validated on construction: a malformed entry simply
    has no bookable window.
    """
    is_open: bool
    open: Optional[str] = None
    close: Optional[str] = None

    @classmethod
    def closed(cls) -> "DayHours":
        return cls(is_open=False)

    def window(self) -> Optional[Tuple[int, int]]:
        """
        Return (open, close) in minutes, or None if the day is not bookable.
        """
        if not self.is_open or not self.open or not self.close:
            return None

        try:
            open_minutes = parse_clock(self.open)
            close_minutes = parse_clock(self.close)
        except ValueError:
            return None

        if open_minutes >= close_minutes:
            return None

        return open_minutes, close_minutes


@dataclass(frozen=True)
class WeeklyHours:
    """
    Opening hours keyed by lowercase weekday name ("monday" .. "sunday").
    """
    days: Mapping[str, DayHours] = field(default_factory=dict)

    @classmethod
    def default(cls) -> "WeeklyHours":
        """Hours used for a business that never configured its own."""
        weekday = DayHours(is_open=True, open="09:00", close="19:00")
        return cls(days={
            "monday": weekday,
            "tuesday": weekday,
            "wednesday": weekday,
            "thursday": weekday,
            "friday": weekday,
            "saturday": DayHours(is_open=True, open="09:00", close="18:00"),
            "sunday": DayHours.closed(),
        })

    def for_weekday(self, index: int) -> DayHours:
        """Get the hours for a weekday index (0=Monday, 6=Sunday)."""
        day = self.days.get(WEEKDAY_NAMES[index])
        if not isinstance(day, DayHours):
            return DayHours.closed()
        return day


@dataclass(frozen=True)
class BusinessSettings:
    """
    Read-only per-business settings snapshot.
    """
    weekly_hours: WeeklyHours
    slot_interval_minutes: int = 30

    def __post_init__(self):
        if self.slot_interval_minutes <= 0:
            raise ValueError(
                f"slot_interval_minutes must be greater than zero, got {self.slot_interval_minutes}"
            )


@dataclass(frozen=True)
class SpecificStaff:
    """Request (or booking) bound to one concrete staff member."""
    staff_id: str

    def __str__(self) -> str:
        return self.staff_id


@dataclass(frozen=True)
class AnyStaff:
    """Request (or booking) that accepts whichever staff member is free."""

    def __str__(self) -> str:
        return "any"


ANY_STAFF = AnyStaff()

ResourceRequest = Union[SpecificStaff, AnyStaff]


def parse_resource_request(value: Optional[str]) -> ResourceRequest:
    """Map a raw staff identifier to a resource request ("any" or empty -> any)."""
    if value is None:
        return ANY_STAFF

    value = value.strip()
    if not value or value.lower() == "any":
        return ANY_STAFF

    return SpecificStaff(staff_id=value)


@dataclass(frozen=True)
class StaffBusy:
    """A named staff member is booked during the slot."""
    staff_id: str


@dataclass(frozen=True)
class AnonymousBusy:
    """An "any"-staff booking consumes one unit of the pool during the slot."""
    appointment_id: str


BusyMarker = Union[StaffBusy, AnonymousBusy]


@dataclass(frozen=True)
class StaffMember:
    id: str
    is_active: bool = True


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    COMPLETED = "completed"


ACTIVE_STATUSES: FrozenSet[AppointmentStatus] = frozenset(
    {AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED}
)


@dataclass(frozen=True)
class Appointment:
    """
    An existing booking.

    Invariant: start_time must be before end_time.
    """
    id: str
    date: Date
    start_time: str
    end_time: str
    staff: ResourceRequest
    status: AppointmentStatus

    def __post_init__(self):
        if parse_clock(self.start_time) >= parse_clock(self.end_time):
            raise ValueError(
                f"Start time {self.start_time} must be before end time {self.end_time}"
            )

    @property
    def is_active(self) -> bool:
        """Only pending and confirmed bookings consume capacity."""
        return self.status in ACTIVE_STATUSES

    @property
    def start_minutes(self) -> int:
        return parse_clock(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_clock(self.end_time)


@dataclass(frozen=True)
class Slot:
    """
    A candidate booking window, in minutes since midnight.
    """
    start: int
    end: int

    @property
    def start_label(self) -> str:
        return format_clock(self.start)

    @property
    def end_label(self) -> str:
        return format_clock(self.end)

    def overlaps(self, start: int, end: int) -> bool:
        """Strict half-open overlap: touching boundaries do not overlap."""
        return self.start < end and self.end > start

    def __str__(self) -> str:
        return f"{self.start_label} - {self.end_label}"


class UnavailableReason(str, Enum):
    CLOSED = "closed"
    NO_ACTIVE_STAFF = "no_active_staff"


@dataclass(frozen=True)
class AvailabilityResult:
    """
    Bookable slot start times for one query, or an empty list with a reason.
    """
    slots: List[str] = field(default_factory=list)
    reason: Optional[UnavailableReason] = None

    @classmethod
    def unavailable(cls, reason: UnavailableReason) -> "AvailabilityResult":
        return cls(slots=[], reason=reason)

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"slots": list(self.slots)}
        if self.reason is not None:
            data["reason"] = self.reason.value
        return data
