"""
Domain layer - Pure business logic without external dependencies.
"""

from .busy_resolver import BusyResolver
from .capacity import CapacityEvaluator
from .models import (
    ANY_STAFF,
    AnonymousBusy,
    AnyStaff,
    Appointment,
    AppointmentStatus,
    AvailabilityResult,
    BusinessSettings,
    DayHours,
    Slot,
    SpecificStaff,
    StaffBusy,
    StaffMember,
    UnavailableReason,
    WeeklyHours,
    parse_resource_request,
)
from .slot_generator import SlotGenerator
from .working_hours import WorkingHoursResolver

__all__ = [
    "ANY_STAFF",
    "AnonymousBusy",
    "AnyStaff",
    "Appointment",
    "AppointmentStatus",
    "AvailabilityResult",
    "BusinessSettings",
    "BusyResolver",
    "CapacityEvaluator",
    "DayHours",
    "Slot",
    "SlotGenerator",
    "SpecificStaff",
    "StaffBusy",
    "StaffMember",
    "UnavailableReason",
    "WeeklyHours",
    "WorkingHoursResolver",
    "parse_resource_request",
]
