"""
Store-boundary record models.

Raw appointment and staff documents are loosely typed JSON with camelCase
keys. They are validated here, once, and turned into domain objects so the
resolver never sees a half-formed record.
"""

from typing import Any, Dict, Optional

import pendulum
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..domain.exceptions import InvalidRecordError
from ..domain.models import (
    Appointment,
    AppointmentStatus,
    StaffMember,
    parse_clock,
    parse_resource_request,
)


class AppointmentRecord(BaseModel):
    """Appointment document as stored."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    business_id: str = Field(alias="businessId")
    date: str
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    staff_id: Optional[str] = Field(default="any", alias="staffId")
    status: AppointmentStatus

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        """Validate YYYY-MM-DD format."""
        pendulum.from_format(value, "YYYY-MM-DD")
        return value

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Validate HH:mm format."""
        parse_clock(value)
        return value

    def to_domain(self) -> Appointment:
        return Appointment(
            id=self.id,
            date=pendulum.from_format(self.date, "YYYY-MM-DD").date(),
            start_time=self.start_time,
            end_time=self.end_time,
            staff=parse_resource_request(self.staff_id),
            status=self.status,
        )


class StaffRecord(BaseModel):
    """Staff document as stored."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    business_id: str = Field(alias="businessId")
    name: str = ""
    is_active: bool = Field(default=False, alias="isActive")

    def to_domain(self) -> StaffMember:
        return StaffMember(id=self.id, is_active=self.is_active)


def parse_appointment(raw: Dict[str, Any]) -> AppointmentRecord:
    """
    Validate a raw appointment document.

    Raises:
        InvalidRecordError: If the document is malformed
    """
    try:
        record = AppointmentRecord.model_validate(raw)
        # Runs the start < end invariant as well
        record.to_domain()
    except (ValidationError, ValueError) as exc:
        raise InvalidRecordError(
            f"Invalid appointment record {raw.get('id', '<no id>')!r}: {exc}"
        ) from exc
    return record


def parse_staff(raw: Dict[str, Any]) -> StaffRecord:
    """
    Validate a raw staff document.

    Raises:
        InvalidRecordError: If the document is malformed
    """
    try:
        return StaffRecord.model_validate(raw)
    except ValidationError as exc:
        raise InvalidRecordError(
            f"Invalid staff record {raw.get('id', '<no id>')!r}: {exc}"
        ) from exc
