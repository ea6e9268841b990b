"""
Per-slot capacity decision for a resource request.
"""

from typing import AbstractSet, Sequence

from .models import AnonymousBusy, BusyMarker, ResourceRequest, SpecificStaff, StaffBusy


class CapacityEvaluator:
    """
    Decides whether a requested resource is free given a slot's busy set.

    For "any" requests every anonymous booking consumes one generic unit of
    the active pool, regardless of which staff member it is later assigned
    to. This can under-report availability but never over-reports it.
    """

    def is_available(
        self,
        busy_set: AbstractSet[BusyMarker],
        requested: ResourceRequest,
        active_staff_ids: Sequence[str]
    ) -> bool:
        if not active_staff_ids:
            return False

        if isinstance(requested, SpecificStaff):
            return StaffBusy(staff_id=requested.staff_id) not in busy_set

        return self.remaining_capacity(busy_set, active_staff_ids) > 0

    def remaining_capacity(
        self,
        busy_set: AbstractSet[BusyMarker],
        active_staff_ids: Sequence[str]
    ) -> int:
        """Number of pool units still free during the slot (never negative)."""
        busy_real = sum(
            1 for staff_id in set(active_staff_ids)
            if StaffBusy(staff_id=staff_id) in busy_set
        )
        busy_anonymous = sum(
            1 for marker in busy_set if isinstance(marker, AnonymousBusy)
        )

        return max(0, len(set(active_staff_ids)) - busy_real - busy_anonymous)
