"""
Adapters layer - Store implementations feeding the availability service.
"""

from .json_store import JsonFileStore
from .memory_store import MemoryStore
from .records import AppointmentRecord, StaffRecord

__all__ = ["AppointmentRecord", "JsonFileStore", "MemoryStore", "StaffRecord"]
