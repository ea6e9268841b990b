"""
Tests for the AvailabilityService orchestration layer.
"""

from typing import List

import pendulum
import pytest

from appointmentslots.domain.exceptions import InvalidRequestError
from appointmentslots.domain.models import (
    ANY_STAFF,
    Appointment,
    AppointmentStatus,
    AvailabilityResult,
    BusinessSettings,
    DayHours,
    SpecificStaff,
    StaffMember,
    UnavailableReason,
    WeeklyHours,
)
from appointmentslots.services.availability import AvailabilityService

MONDAY = "2024-11-25"
SUNDAY = "2024-11-24"


class StubSettingsStore:
    """Minimal stub matching SettingsStore."""

    def __init__(self, settings: BusinessSettings):
        self._settings = settings
        self.calls: List[str] = []

    def get(self, business_id):
        self.calls.append(business_id)
        return self._settings


class StubAppointmentStore:
    """Minimal stub matching AppointmentStore."""

    def __init__(self, appointments: List[Appointment]):
        self._appointments = appointments
        self.calls: List[tuple] = []

    def list_active_for_date(self, business_id, date):
        self.calls.append((business_id, date.to_date_string()))
        return list(self._appointments)


class StubStaffStore:
    """Minimal stub matching StaffStore."""

    def __init__(self, staff: List[StaffMember]):
        self._staff = staff
        self.calls: List[str] = []

    def list_active(self, business_id):
        self.calls.append(business_id)
        return list(self._staff)


class FailingStore:
    """Store whose every lookup fails."""

    def get(self, business_id):
        raise ConnectionError("settings backend unavailable")

    def list_active_for_date(self, business_id, date):
        raise ConnectionError("appointment backend unavailable")

    def list_active(self, business_id):
        raise ConnectionError("staff backend unavailable")


def _appointment(apt_id, start, end, staff="any", status=AppointmentStatus.CONFIRMED):
    return Appointment(
        id=apt_id,
        date=pendulum.date(2024, 11, 25),
        start_time=start,
        end_time=end,
        staff=ANY_STAFF if staff == "any" else SpecificStaff(staff_id=staff),
        status=status,
    )


def _build_service(
    monday=DayHours(is_open=True, open="09:00", close="12:00"),
    slot_interval=60,
    appointments=(),
    staff=(StaffMember("staff-a"), StaffMember("staff-b")),
):
    settings = BusinessSettings(
        weekly_hours=WeeklyHours(days={"monday": monday, "sunday": DayHours.closed()}),
        slot_interval_minutes=slot_interval,
    )
    return AvailabilityService(
        settings_store=StubSettingsStore(settings),
        appointment_store=StubAppointmentStore(list(appointments)),
        staff_store=StubStaffStore(list(staff)),
    )


def _query(service, staff_id="any", date=MONDAY, duration=60, **kwargs):
    return service.get_available_slots(
        business_id="salon-1",
        date=date,
        service_duration_minutes=duration,
        staff_id=staff_id,
        **kwargs,
    )


class TestClosedAndEmptyOutcomes:
    """Closed days and empty rosters are results, not errors."""

    def test_closed_day(self):
        service = _build_service(appointments=[_appointment("apt-1", "10:00", "11:00")])

        result = _query(service, date=SUNDAY)

        assert result == AvailabilityResult(slots=[], reason=UnavailableReason.CLOSED)

    def test_closed_day_skips_staff_and_appointment_lookups(self):
        service = _build_service()

        _query(service, date=SUNDAY)

        assert service._staff_store.calls == []
        assert service._appointment_store.calls == []

    def test_malformed_day_is_closed(self):
        service = _build_service(monday=DayHours(is_open=True, open="12:00", close="09:00"))

        assert _query(service).reason is UnavailableReason.CLOSED

    def test_no_active_staff(self):
        service = _build_service(staff=[])

        result = _query(service)

        assert result.to_dict() == {"slots": [], "reason": "no_active_staff"}

    def test_inactive_roster_entries_do_not_count(self):
        service = _build_service(staff=[StaffMember("staff-a", is_active=False)])

        assert _query(service).reason is UnavailableReason.NO_ACTIVE_STAFF

    def test_specific_staff_does_not_need_roster(self):
        service = _build_service(staff=[])

        result = _query(service, staff_id="staff-a")

        assert result.slots == ["09:00", "10:00", "11:00"]
        assert service._staff_store.calls == []

    def test_service_longer_than_day_is_empty_without_reason(self):
        service = _build_service()

        result = _query(service, duration=240)

        assert result == AvailabilityResult(slots=[])


class TestSlotListing:
    """Tests for slot listing."""

    def test_full_day_without_bookings(self):
        service = _build_service(
            monday=DayHours(is_open=True, open="09:00", close="18:00"),
            slot_interval=30,
        )

        result = _query(service, duration=30)

        assert len(result.slots) == 18
        assert result.slots[0] == "09:00"
        assert result.slots[1] == "09:30"
        assert result.slots[-1] == "17:30"
        assert result.slots == sorted(result.slots)
        assert result.reason is None

    def test_concrete_scenario(self):
        """Specific and "any" queries against one specific and one anonymous booking."""
        booking_a = _appointment("apt-1", "10:00", "11:00", staff="staff-a")

        service = _build_service(appointments=[booking_a])

        assert _query(service, staff_id="staff-a").slots == ["09:00", "11:00"]
        assert _query(service, staff_id="staff-b").slots == ["09:00", "10:00", "11:00"]
        assert _query(service).slots == ["09:00", "10:00", "11:00"]

        booking_any = _appointment(
            "apt-2", "10:00", "11:00", staff="any", status=AppointmentStatus.PENDING
        )
        service = _build_service(appointments=[booking_a, booking_any])

        assert _query(service).slots == ["09:00", "11:00"]

    def test_any_staff_exhaustion_with_specific_bookings(self):
        staff = [StaffMember("staff-a"), StaffMember("staff-b"), StaffMember("staff-c")]
        two_bookings = [
            _appointment("apt-1", "10:00", "11:00", staff="staff-a"),
            _appointment("apt-2", "10:00", "11:00", staff="staff-b"),
        ]
        three_bookings = two_bookings + [_appointment("apt-3", "10:00", "11:00", staff="staff-c")]

        assert "10:00" in _query(_build_service(appointments=two_bookings, staff=staff)).slots
        assert "10:00" not in _query(_build_service(appointments=three_bookings, staff=staff)).slots

    def test_boundary_bookings(self):
        service = _build_service(
            monday=DayHours(is_open=True, open="09:00", close="12:00"),
            slot_interval=30,
            appointments=[_appointment("apt-1", "10:00", "10:30", staff="staff-a")],
        )

        result = _query(service, staff_id="staff-a", duration=30)

        assert "09:30" in result.slots
        assert "10:00" not in result.slots
        assert "10:30" in result.slots

    def test_cancelled_bookings_are_ignored(self):
        service = _build_service(
            appointments=[
                _appointment("apt-1", "10:00", "11:00", staff="staff-a", status=AppointmentStatus.CANCELLED),
            ]
        )

        assert _query(service, staff_id="staff-a").slots == ["09:00", "10:00", "11:00"]

    def test_excluded_appointment_frees_its_slot(self):
        service = _build_service(appointments=[_appointment("apt-1", "10:00", "11:00", staff="staff-a")])

        result = _query(service, staff_id="staff-a", exclude_appointment_id="apt-1")

        assert result.slots == ["09:00", "10:00", "11:00"]

    def test_identical_inputs_give_identical_output(self):
        service = _build_service(appointments=[_appointment("apt-1", "10:00", "11:00")])

        assert _query(service) == _query(service)

    def test_accepts_date_objects_and_resource_requests(self):
        service = _build_service(appointments=[_appointment("apt-1", "10:00", "11:00", staff="staff-a")])

        result = service.get_available_slots(
            business_id="salon-1",
            date=pendulum.date(2024, 11, 25),
            service_duration_minutes=60,
            staff_id=SpecificStaff("staff-a"),
        )

        assert result.slots == ["09:00", "11:00"]


class TestIsSlotAvailable:
    """Tests for the single-slot re-check."""

    def test_free_and_taken_slots(self):
        service = _build_service(appointments=[_appointment("apt-1", "10:00", "11:00", staff="staff-a")])

        def check(start, **kwargs):
            return service.is_slot_available(
                business_id="salon-1",
                date=MONDAY,
                start_time=start,
                service_duration_minutes=60,
                staff_id="staff-a",
                **kwargs,
            )

        assert check("09:00")
        assert not check("10:00")
        assert check("10:00", exclude_appointment_id="apt-1")

    def test_off_grid_start_is_unavailable(self):
        service = _build_service()

        assert not service.is_slot_available(
            business_id="salon-1",
            date=MONDAY,
            start_time="09:15",
            service_duration_minutes=60,
        )

    def test_invalid_start_time_raises_error(self):
        service = _build_service()

        with pytest.raises(InvalidRequestError):
            service.is_slot_available(
                business_id="salon-1",
                date=MONDAY,
                start_time="9am",
                service_duration_minutes=60,
            )


class TestInvalidInput:
    """Invalid queries raise InvalidRequestError before any lookup."""

    @pytest.mark.parametrize("business_id", ["", "   ", None])
    def test_missing_business_id(self, business_id):
        service = _build_service()

        with pytest.raises(InvalidRequestError, match="business_id"):
            service.get_available_slots(
                business_id=business_id, date=MONDAY, service_duration_minutes=30
            )

        assert service._settings_store.calls == []

    @pytest.mark.parametrize("date", ["", None, "25.11.2024", "2024-02-30"])
    def test_missing_or_invalid_date(self, date):
        service = _build_service()

        with pytest.raises(InvalidRequestError, match="date"):
            service.get_available_slots(
                business_id="salon-1", date=date, service_duration_minutes=30
            )

    @pytest.mark.parametrize("duration", [0, -30, True, "30"])
    def test_non_positive_duration(self, duration):
        service = _build_service()

        with pytest.raises(InvalidRequestError, match="service_duration_minutes"):
            service.get_available_slots(
                business_id="salon-1", date=MONDAY, service_duration_minutes=duration
            )


class TestStoreFailures:
    """Store failures abort the query instead of overstating availability."""

    def test_settings_failure_propagates(self):
        store = FailingStore()
        service = AvailabilityService(store, store, store)

        with pytest.raises(ConnectionError, match="settings"):
            _query(service)

    def test_appointment_failure_propagates(self):
        settings = BusinessSettings(weekly_hours=WeeklyHours.default())
        service = AvailabilityService(
            settings_store=StubSettingsStore(settings),
            appointment_store=FailingStore(),
            staff_store=StubStaffStore([StaffMember("staff-a")]),
        )

        with pytest.raises(ConnectionError, match="appointment"):
            _query(service)

    def test_staff_failure_propagates(self):
        settings = BusinessSettings(weekly_hours=WeeklyHours.default())
        service = AvailabilityService(
            settings_store=StubSettingsStore(settings),
            appointment_store=StubAppointmentStore([]),
            staff_store=FailingStore(),
        )

        with pytest.raises(ConnectionError, match="staff"):
            _query(service)
