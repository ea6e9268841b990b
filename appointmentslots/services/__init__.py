"""
Service layer helpers that orchestrate store adapters and domain logic.
"""

from .availability import AppointmentStore, AvailabilityService, SettingsStore, StaffStore

__all__ = ["AppointmentStore", "AvailabilityService", "SettingsStore", "StaffStore"]
