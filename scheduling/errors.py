"""Error kinds shared by the scheduling core, the repositories and the routers."""
from typing import List, Optional


class ClinicError(Exception):
    """Base class for every error raised on purpose by this service."""


class InvalidScheduleError(ClinicError, ValueError):
    """A working-hours template is malformed (bad time, start >= end, bad interval)."""


class NotFoundError(ClinicError):
    def __init__(self, kind: str, id: str):
        self.kind = kind
        self.id = id
        super().__init__(f"{kind} {id} not found")


class ConflictError(ClinicError):
    """The write would break a uniqueness or reference rule."""


class InvalidStatusTransitionError(ConflictError):
    pass


class BookingError(ClinicError):
    """Errors a booking attempt returns to the caller instead of raising."""

    message = "Booking failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)

    @property
    def detail(self) -> str:
        return str(self)


class ValidationError(BookingError):
    message = "Invalid booking data"

    def __init__(self, message: Optional[str] = None, fields: Optional[List[str]] = None):
        self.fields = list(fields or [])
        super().__init__(message)


class SlotUnavailableError(BookingError):
    message = "Time slot no longer available"

    def __init__(self, doctor_id: Optional[str], date, time: str):
        self.doctor_id = doctor_id
        self.date = date
        self.time = time
        super().__init__(f"Time slot {date} {time} is no longer available")


class PersistenceUnavailableError(BookingError):
    message = "Data store unavailable"


class FlowClosedError(ClinicError):
    """The booking flow was already committed."""


class BookingInProgressError(ClinicError):
    """A commit for this flow is already awaiting the data store."""
