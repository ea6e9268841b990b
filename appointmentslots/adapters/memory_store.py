"""
In-memory store implementing the settings, appointment and staff lookups.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pendulum import Date

from ..config import AppConfig
from ..domain.models import Appointment, BusinessSettings, StaffMember
from .records import AppointmentRecord, StaffRecord, parse_appointment, parse_staff

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    Holds validated appointment and staff records in memory.

    Settings come from the application config; a business without a
    settings record gets the configured defaults.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        appointments: Iterable[Dict[str, Any]] = (),
        staff: Iterable[Dict[str, Any]] = (),
    ):
        """
        Initialize the store.

        Args:
            config: Application config providing per-business settings
            appointments: Raw appointment documents
            staff: Raw staff documents

        Raises:
            InvalidRecordError: If any document is malformed
        """
        self.config = config or AppConfig()
        self._appointments: List[AppointmentRecord] = [parse_appointment(raw) for raw in appointments]
        self._staff: List[StaffRecord] = [parse_staff(raw) for raw in staff]
        logger.debug(
            "Loaded %d appointment(s) and %d staff record(s)",
            len(self._appointments), len(self._staff),
        )

    def get(self, business_id: str) -> BusinessSettings:
        return self.config.settings_for(business_id)

    def list_active_for_date(self, business_id: str, date: Date) -> List[Appointment]:
        date_string = date.to_date_string()
        appointments: List[Appointment] = []

        for record in self._appointments:
            if record.business_id != business_id or record.date != date_string:
                continue
            appointment = record.to_domain()
            if appointment.is_active:
                appointments.append(appointment)

        return appointments

    def list_active(self, business_id: str) -> List[StaffMember]:
        return [
            record.to_domain() for record in self._staff
            if record.business_id == business_id and record.is_active
        ]

    def list_staff(self, business_id: str) -> List[StaffRecord]:
        """All staff records of a business, active or not."""
        return [record for record in self._staff if record.business_id == business_id]
