import logging
import math
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.admission import request_booking, request_update
from app.config import Settings, get_settings
from app.db import MAX_HOURS_CONFIG_KEY, get_db
from app.errors import AdmissionError, BookingNotFoundError, OverlapError, RepositoryError
from app.models import BookingConfig
from app.pagination import Page, page_params
from app.repository import BookingRepository
from app.schemas import BookingIn, BookingOut

logger = logging.getLogger(__name__)

router = APIRouter()


def max_booking_duration(db: Session, settings: Settings) -> timedelta | None:
    if not settings.enforce_max_duration:
        return None
    row = db.query(BookingConfig).filter(BookingConfig.key == MAX_HOURS_CONFIG_KEY).first()
    if row is None or not row.value:
        return None
    try:
        hours = float(row.value)
        # nan, inf and non-positive limits are not usable
        if not math.isfinite(hours) or hours <= 0:
            raise ValueError(row.value)
        return timedelta(hours=hours)
    except (ValueError, OverflowError):
        logger.warning("ignoring unusable %s=%r", MAX_HOURS_CONFIG_KEY, row.value)
        return None


def admission_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, OverlapError):
        return HTTPException(status_code=409, detail="Overlap Bookings")
    if isinstance(exc, BookingNotFoundError):
        return HTTPException(status_code=404, detail="Booking not found")
    if isinstance(exc, AdmissionError):
        return HTTPException(status_code=400, detail=str(exc))
    logger.error("repository failure: %s", exc, exc_info=exc)
    return HTTPException(status_code=500, detail="Internal server error")


@router.get("/bookings", response_model=list[BookingOut])
def list_bookings(
    user_id: str | None = Query(default=None),
    page: Page = Depends(page_params),
    db: Session = Depends(get_db),
):
    try:
        return BookingRepository(db).list_page(page.start, page.count, user_id)
    except RepositoryError as exc:
        raise admission_http_error(exc)


@router.get("/bookingsCount", response_model=int)
def count_bookings(user_id: str | None = Query(default=None), db: Session = Depends(get_db)):
    try:
        return BookingRepository(db).count(user_id)
    except RepositoryError as exc:
        raise admission_http_error(exc)


@router.post("/booking", response_model=BookingOut, status_code=201)
def create_booking(
    body: BookingIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Admit a booking only if its [start_dt, end_dt) window is free on the facility:
      - 400 if the window is empty/inverted or longer than the configured maximum
      - 409 if it overlaps an existing booking (boundary touches are fine)
    """
    try:
        return request_booking(BookingRepository(db), body, max_booking_duration(db, settings))
    except (AdmissionError, RepositoryError) as exc:
        raise admission_http_error(exc)


@router.get("/booking/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    try:
        booking = BookingRepository(db).get(booking_id)
    except RepositoryError as exc:
        raise admission_http_error(exc)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return booking


@router.put("/booking/{booking_id}", response_model=BookingOut)
def update_booking(
    booking_id: int,
    body: BookingIn,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    # same admission rules as creation, ignoring the booking's own row
    try:
        return request_update(BookingRepository(db), booking_id, body, max_booking_duration(db, settings))
    except (AdmissionError, BookingNotFoundError, RepositoryError) as exc:
        raise admission_http_error(exc)


@router.delete("/booking/{booking_id}")
def delete_booking(booking_id: int, db: Session = Depends(get_db)):
    try:
        deleted = BookingRepository(db).delete(booking_id)
    except RepositoryError as exc:
        raise admission_http_error(exc)
    if not deleted:
        raise HTTPException(status_code=404, detail="Booking not found")
    return {"result": "success"}
