from datetime import datetime, timezone

from sqlalchemy import DateTime, bindparam, delete, func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import BookingNotFoundError, OverlapError, RepositoryError
from app.models import Booking
from app.schemas import BookingIn

# SQLSTATE raised by PostgreSQL when bookings_no_overlap fires
EXCLUSION_VIOLATION = "23P01"

_TIMESTAMP_PARAMS = (
    bindparam("start_dt", type_=DateTime(timezone=True)),
    bindparam("end_dt", type_=DateTime(timezone=True)),
    bindparam("transaction_dt", type_=DateTime(timezone=True)),
)

# Check and write in one statement: the row is only inserted if no
# booking on the same facility intersects [start_dt, end_dt).
GUARDED_INSERT = text("""
    INSERT INTO bookings (user_id, email, purpose, facility_id, start_dt, end_dt, transaction_dt)
    SELECT :user_id, :email, :purpose, :facility_id, :start_dt, :end_dt, :transaction_dt
    WHERE NOT EXISTS (
        SELECT 1 FROM bookings b
        WHERE b.facility_id = :facility_id
          AND b.start_dt < :end_dt
          AND :start_dt < b.end_dt
    )
    RETURNING id
""").bindparams(*_TIMESTAMP_PARAMS)

GUARDED_UPDATE = text("""
    UPDATE bookings
    SET user_id = :user_id, email = :email, purpose = :purpose, facility_id = :facility_id,
        start_dt = :start_dt, end_dt = :end_dt, transaction_dt = :transaction_dt
    WHERE id = :booking_id
      AND NOT EXISTS (
        SELECT 1 FROM bookings b
        WHERE b.facility_id = :facility_id
          AND b.id != :booking_id
          AND b.start_dt < :end_dt
          AND :start_dt < b.end_dt
    )
""").bindparams(*_TIMESTAMP_PARAMS)


def _is_exclusion_violation(exc: IntegrityError) -> bool:
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    code = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
    return code == EXCLUSION_VIOLATION


class BookingRepository:
    """Booking persistence used by admission and the booking routes.

    Every storage failure is rolled back and re-raised as RepositoryError,
    so callers never see a half-applied change.
    """

    def __init__(self, session: Session):
        self.session = session

    def count_overlapping(self, facility_id: int, start: datetime, end: datetime, exclude_id: int | None = None) -> int:
        stmt = select(func.count(Booking.id)).where(
            Booking.facility_id == facility_id,
            Booking.start_dt < end,
            Booking.end_dt > start,
        )
        if exclude_id is not None:
            stmt = stmt.where(Booking.id != exclude_id)
        try:
            return self.session.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RepositoryError(str(exc)) from exc

    def insert(self, candidate: BookingIn) -> tuple[int, datetime]:
        transaction_dt = datetime.now(timezone.utc)
        params = candidate.model_dump()
        params["transaction_dt"] = transaction_dt
        try:
            row = self.session.execute(GUARDED_INSERT, params).first()
            if row is None:
                # lost the race against a concurrent admission
                self.session.rollback()
                raise OverlapError(candidate.facility_id)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if _is_exclusion_violation(exc):
                raise OverlapError(candidate.facility_id) from exc
            raise RepositoryError(str(exc)) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RepositoryError(str(exc)) from exc
        return row[0], transaction_dt

    def update(self, booking_id: int, candidate: BookingIn) -> datetime:
        transaction_dt = datetime.now(timezone.utc)
        params = candidate.model_dump()
        params.update(booking_id=booking_id, transaction_dt=transaction_dt)
        try:
            res = self.session.execute(GUARDED_UPDATE, params)
            if res.rowcount != 1:
                self.session.rollback()
                # row may have been deleted since the caller looked it up
                if self.session.get(Booking, booking_id) is None:
                    raise BookingNotFoundError(booking_id)
                raise OverlapError(candidate.facility_id)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if _is_exclusion_violation(exc):
                raise OverlapError(candidate.facility_id) from exc
            raise RepositoryError(str(exc)) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RepositoryError(str(exc)) from exc
        # rows changed by raw SQL; drop stale identity-map copies
        self.session.expire_all()
        return transaction_dt

    def get(self, booking_id: int) -> Booking | None:
        try:
            return self.session.get(Booking, booking_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RepositoryError(str(exc)) from exc

    def list_page(self, start: int, count: int, user_id: str | None = None) -> list[Booking]:
        stmt = select(Booking)
        if user_id:
            stmt = stmt.where(Booking.user_id == user_id)
        stmt = stmt.order_by(Booking.id).limit(count).offset(start)
        try:
            return list(self.session.execute(stmt).scalars())
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RepositoryError(str(exc)) from exc

    def count(self, user_id: str | None = None) -> int:
        stmt = select(func.count(Booking.id))
        if user_id:
            stmt = stmt.where(Booking.user_id == user_id)
        try:
            return self.session.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RepositoryError(str(exc)) from exc

    def delete(self, booking_id: int) -> bool:
        try:
            res = self.session.execute(delete(Booking).where(Booking.id == booking_id))
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise RepositoryError(str(exc)) from exc
        return res.rowcount == 1

    def delete_by_facility(self, facility_id: int) -> int:
        """Queue deletion of a facility's bookings. The caller commits."""
        res = self.session.execute(delete(Booking).where(Booking.facility_id == facility_id))
        return res.rowcount
