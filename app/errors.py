"""Errors raised by booking admission and the storage layer."""


class AdmissionError(Exception):
    """A candidate booking was refused. Expected, user-facing, not a fault."""

    kind = "rejected"


class OverlapError(AdmissionError):
    kind = "overlap"

    def __init__(self, facility_id):
        super().__init__(f"Booking overlaps an existing booking on facility {facility_id}")
        self.facility_id = facility_id


class InvalidWindowError(AdmissionError):
    kind = "invalid_window"


class DurationExceededError(AdmissionError):
    kind = "duration_exceeded"


class BookingNotFoundError(Exception):
    def __init__(self, booking_id):
        super().__init__(f"Booking {booking_id} not found")
        self.booking_id = booking_id


class RepositoryError(Exception):
    """Storage failure (unreachable, constraint violation, bad input to the store)."""
