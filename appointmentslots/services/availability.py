"""
Application service for answering slot availability queries.

The service fetches read-only snapshots from three injected stores
(settings, appointments, staff) and runs them through the domain pipeline:
working hours -> candidate slots -> busy sets -> capacity. Stores are
described as protocols so that tests can pass in-memory fakes.

The answer is a point-in-time snapshot. Checking availability and writing
the booking are separate operations, so two concurrent requests can both
see a slot as free and both book it. Preventing that double booking is the
job of the booking writer (e.g. an exclusion constraint on
(staff, date, time range) or a serializable transaction), not of this
service.
"""

from __future__ import annotations

import datetime
import logging
from typing import List, Optional, Protocol, Union

import pendulum
from pendulum import Date

from ..domain.busy_resolver import BusyResolver
from ..domain.capacity import CapacityEvaluator
from ..domain.exceptions import InvalidRequestError
from ..domain.models import (
    Appointment,
    AvailabilityResult,
    BusinessSettings,
    ResourceRequest,
    SpecificStaff,
    StaffMember,
    UnavailableReason,
    parse_clock,
    parse_resource_request,
)
from ..domain.slot_generator import SlotGenerator
from ..domain.working_hours import WorkingHoursResolver

logger = logging.getLogger(__name__)


class SettingsStore(Protocol):
    """Settings lookup; defaults are applied by the store."""

    def get(self, business_id: str) -> BusinessSettings:
        """Return the settings snapshot for a business."""


class AppointmentStore(Protocol):
    def list_active_for_date(self, business_id: str, date: Date) -> List[Appointment]:
        """Return the pending/confirmed appointments of a business on a date."""


class StaffStore(Protocol):
    def list_active(self, business_id: str) -> List[StaffMember]:
        """Return the active staff roster of a business."""


class AvailabilityService:
    """
    Orchestrates the availability pipeline for one query at a time.

    Holds no mutable state; safe to share between concurrent callers.
    Store failures propagate unchanged so that missing data never reads as
    "no bookings" or "no staff".
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        appointment_store: AppointmentStore,
        staff_store: StaffStore,
        *,
        hours_resolver: Optional[WorkingHoursResolver] = None,
        slot_generator: Optional[SlotGenerator] = None,
        busy_resolver: Optional[BusyResolver] = None,
        capacity_evaluator: Optional[CapacityEvaluator] = None,
    ) -> None:
        self._settings_store = settings_store
        self._appointment_store = appointment_store
        self._staff_store = staff_store
        self._hours_resolver = hours_resolver or WorkingHoursResolver()
        self._slot_generator = slot_generator or SlotGenerator()
        self._busy_resolver = busy_resolver or BusyResolver()
        self._capacity_evaluator = capacity_evaluator or CapacityEvaluator()

    def get_available_slots(
        self,
        *,
        business_id: str,
        date: Union[str, datetime.date],
        service_duration_minutes: int,
        staff_id: Union[str, ResourceRequest, None] = "any",
        exclude_appointment_id: Optional[str] = None,
    ) -> AvailabilityResult:
        """
        Compute the bookable slot start times for a business on a date.

        Args:
            business_id: Business whose calendar is queried
            date: Calendar date ("YYYY-MM-DD" or a date object)
            service_duration_minutes: Length of the requested service
            staff_id: Specific staff id, or "any"
            exclude_appointment_id: Appointment to ignore (when rescheduling it)

        Returns:
            AvailabilityResult with "HH:mm" start times in ascending order,
            or an empty result carrying the reason (closed / no active staff)

        Raises:
            InvalidRequestError: If the query parameters are invalid
        """
        business_id = self._validate_business_id(business_id)
        day = self._parse_date(date)
        self._validate_duration(service_duration_minutes)
        requested = self._parse_request(staff_id)

        logger.debug(
            "Availability query business=%s date=%s duration=%s staff=%s",
            business_id, day.to_date_string(), service_duration_minutes, requested,
        )

        settings = self._settings_store.get(business_id)
        day_hours = self._hours_resolver.resolve(day, settings.weekly_hours)

        if day_hours.window() is None:
            logger.info("Business %s is closed on %s", business_id, day.to_date_string())
            return AvailabilityResult.unavailable(UnavailableReason.CLOSED)

        staff_ids = self._relevant_staff_ids(business_id, requested)
        if not staff_ids:
            logger.info("Business %s has no active staff", business_id)
            return AvailabilityResult.unavailable(UnavailableReason.NO_ACTIVE_STAFF)

        candidates = self._slot_generator.generate(
            day_hours,
            service_duration_minutes,
            settings.slot_interval_minutes,
        )
        appointments = self._appointment_store.list_active_for_date(business_id, day)

        available: List[str] = []
        for slot in candidates:
            busy_set = self._busy_resolver.busy_set_for_slot(
                slot,
                appointments,
                exclude_appointment_id=exclude_appointment_id,
            )
            if self._capacity_evaluator.is_available(busy_set, requested, staff_ids):
                available.append(slot.start_label)

        logger.info(
            "Business %s on %s: %d of %d candidate slots bookable",
            business_id, day.to_date_string(), len(available), len(candidates),
        )
        return AvailabilityResult(slots=available)

    def is_slot_available(
        self,
        *,
        business_id: str,
        date: Union[str, datetime.date],
        start_time: str,
        service_duration_minutes: int,
        staff_id: Union[str, ResourceRequest, None] = "any",
        exclude_appointment_id: Optional[str] = None,
    ) -> bool:
        """
        Re-check a single start time right before a booking is written.

        The start time must fall on the business's slot grid; anything else
        is reported as unavailable.
        """
        try:
            start_minutes = parse_clock(start_time)
        except ValueError as exc:
            raise InvalidRequestError(str(exc)) from exc

        result = self.get_available_slots(
            business_id=business_id,
            date=date,
            service_duration_minutes=service_duration_minutes,
            staff_id=staff_id,
            exclude_appointment_id=exclude_appointment_id,
        )
        return any(parse_clock(slot) == start_minutes for slot in result.slots)

    def _relevant_staff_ids(self, business_id: str, requested: ResourceRequest) -> List[str]:
        """
        Staff that count toward capacity.

        A specific id is trusted as given; only "any" requests need the roster.
        """
        if isinstance(requested, SpecificStaff):
            return [requested.staff_id]

        staff_ids: List[str] = []
        for member in self._staff_store.list_active(business_id):
            if member.is_active and member.id not in staff_ids:
                staff_ids.append(member.id)
        return staff_ids

    @staticmethod
    def _validate_business_id(business_id: Optional[str]) -> str:
        if not business_id or not str(business_id).strip():
            raise InvalidRequestError("business_id is required")
        return str(business_id).strip()

    @staticmethod
    def _parse_date(value: Union[str, datetime.date, None]) -> Date:
        if value is None or value == "":
            raise InvalidRequestError("date is required")

        if isinstance(value, Date):
            return value

        if isinstance(value, datetime.date):
            return pendulum.date(value.year, value.month, value.day)

        try:
            return pendulum.from_format(str(value), "YYYY-MM-DD").date()
        except ValueError as exc:
            raise InvalidRequestError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc

    @staticmethod
    def _validate_duration(value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidRequestError(
                f"service_duration_minutes must be a positive integer, got {value!r}"
            )

    @staticmethod
    def _parse_request(staff_id: Union[str, ResourceRequest, None]) -> ResourceRequest:
        if isinstance(staff_id, str) or staff_id is None:
            return parse_resource_request(staff_id)
        return staff_id
