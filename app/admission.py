"""Overlap-checked booking admission.

A candidate booking is admitted only if its half-open window [start, end)
does not intersect any stored booking on the same facility. The count query
here is a fast reject; the repository's guarded write is what actually keeps
two overlapping rows out of the store, and it reports a lost race with the
same OverlapError.
"""
import logging
from datetime import datetime, timedelta

from app.errors import BookingNotFoundError, DurationExceededError, InvalidWindowError, OverlapError
from app.schemas import BookingIn, BookingOut

logger = logging.getLogger(__name__)


def windows_overlap(s1: datetime, e1: datetime, s2: datetime, e2: datetime) -> bool:
    """True if [s1, e1) and [s2, e2) share an instant. Touching windows don't."""
    return s1 < e2 and s2 < e1


def validate_window(candidate: BookingIn, max_duration: timedelta | None = None):
    if candidate.start_dt >= candidate.end_dt:
        raise InvalidWindowError("start_dt must be before end_dt")
    if max_duration is not None and candidate.end_dt - candidate.start_dt > max_duration:
        raise DurationExceededError(f"Booking longer than the allowed {max_duration}")


def request_booking(repo, candidate: BookingIn, max_duration: timedelta | None = None) -> BookingOut:
    """Admit and persist a new booking, or raise an AdmissionError.

    RepositoryError from either storage call propagates untouched; nothing
    is inserted after a failed overlap query.
    """
    validate_window(candidate, max_duration)

    if repo.count_overlapping(candidate.facility_id, candidate.start_dt, candidate.end_dt) > 0:
        logger.info("rejected booking on facility %s: overlap", candidate.facility_id)
        raise OverlapError(candidate.facility_id)

    booking_id, transaction_dt = repo.insert(candidate)
    logger.info("booking %s created on facility %s", booking_id, candidate.facility_id)
    return BookingOut(id=booking_id, transaction_dt=transaction_dt, **candidate.model_dump())


def request_update(repo, booking_id: int, candidate: BookingIn, max_duration: timedelta | None = None) -> BookingOut:
    """Rewrite an existing booking under the same rules as creation.

    The booking's own current row is left out of the overlap count, so
    shrinking or shifting a window within itself is allowed.
    """
    validate_window(candidate, max_duration)

    if repo.get(booking_id) is None:
        raise BookingNotFoundError(booking_id)

    overlapping = repo.count_overlapping(
        candidate.facility_id, candidate.start_dt, candidate.end_dt, exclude_id=booking_id
    )
    if overlapping > 0:
        logger.info("rejected update of booking %s: overlap", booking_id)
        raise OverlapError(candidate.facility_id)

    transaction_dt = repo.update(booking_id, candidate)
    return BookingOut(id=booking_id, transaction_dt=transaction_dt, **candidate.model_dump())
