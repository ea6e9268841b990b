"""
Domain-specific exception hierarchy for the appointment slot resolver.
"""


class AvailabilityError(Exception):
    """Base class for all application-level errors."""


class InvalidRequestError(AvailabilityError):
    """Raised when an availability query is missing or has invalid parameters."""


class InvalidRecordError(AvailabilityError):
    """Raised when store data cannot be parsed into domain objects."""
