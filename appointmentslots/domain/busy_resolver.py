"""
Projection of existing bookings onto a candidate slot.
"""

from typing import FrozenSet, Iterable, Optional, Set

from .models import AnonymousBusy, Appointment, BusyMarker, Slot, SpecificStaff, StaffBusy


class BusyResolver:
    """
    Computes which resources are taken during a slot.

    A booking for a named staff member marks that member busy. A booking
    made for "any" staff marks one anonymous unit of the pool busy, keyed
    by the appointment id so that two such bookings count twice.
    """

    def busy_set_for_slot(
        self,
        slot: Slot,
        appointments: Iterable[Appointment],
        exclude_appointment_id: Optional[str] = None
    ) -> FrozenSet[BusyMarker]:
        busy: Set[BusyMarker] = set()

        for appointment in appointments:
            if not appointment.is_active:
                continue
            if exclude_appointment_id is not None and appointment.id == exclude_appointment_id:
                continue
            if not slot.overlaps(appointment.start_minutes, appointment.end_minutes):
                continue

            if isinstance(appointment.staff, SpecificStaff):
                busy.add(StaffBusy(staff_id=appointment.staff.staff_id))
            else:
                busy.add(AnonymousBusy(appointment_id=appointment.id))

        return frozenset(busy)
