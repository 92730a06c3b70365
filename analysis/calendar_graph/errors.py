"""
Exceptions raised by the calendar graph pipeline.

Every stage either returns a fully formed result or raises one of these.
Out-of-range start/end years are not errors: they are clamped and logged.
"""


class CalendarGraphError(Exception):
    """Base class for calendar graph failures."""
    pass


class SchemaError(CalendarGraphError):
    """Raised when a dataset does not have the expected columns or types."""
    pass


class ArgumentError(CalendarGraphError, ValueError):
    """Raised for invalid season, year, threshold, location or type inputs."""
    pass


class EmptyRangeError(CalendarGraphError):
    """Raised when the resolved season window contains no data."""
    pass


class EmptyExtremesError(CalendarGraphError):
    """Raised when no day in the window crosses the mildest threshold."""
    pass
