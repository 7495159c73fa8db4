import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db import get_db
from app.models import Facility
from app.pagination import Page, page_params
from app.repository import BookingRepository
from app.schemas import FacilityIn, FacilityOut

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_or_404(db: Session, facility_id: int) -> Facility:
    facility = db.get(Facility, facility_id)
    if facility is None:
        raise HTTPException(status_code=404, detail="Facility detail not found")
    return facility


@router.get("/facilityDetails", response_model=list[FacilityOut])
def list_facilities(
    status: str | None = Query(default=None),
    page: Page = Depends(page_params),
    db: Session = Depends(get_db),
):
    q = db.query(Facility)
    if status:
        q = q.filter(Facility.status == status)
    return q.order_by(Facility.id).offset(page.start).limit(page.count).all()


@router.get("/facilityDetailsCount", response_model=int)
def count_facilities(status: str | None = Query(default=None), db: Session = Depends(get_db)):
    q = db.query(func.count(Facility.id))
    if status:
        q = q.filter(Facility.status == status)
    return q.scalar()


@router.post("/facilityDetail", response_model=FacilityOut, status_code=201)
def create_facility(body: FacilityIn, db: Session = Depends(get_db)):
    facility = Facility(**body.model_dump(), transaction_dt=datetime.now(timezone.utc))
    try:
        db.add(facility)
        db.commit()
        db.refresh(facility)
    except IntegrityError:
        # name is unique
        db.rollback()
        raise HTTPException(status_code=409, detail="Facility name already exists")
    return facility


@router.get("/facilityDetail/{facility_id}", response_model=FacilityOut)
def get_facility(facility_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, facility_id)


@router.put("/facilityDetail/{facility_id}", response_model=FacilityOut)
def update_facility(facility_id: int, body: FacilityIn, db: Session = Depends(get_db)):
    facility = _get_or_404(db, facility_id)
    for field, value in body.model_dump().items():
        setattr(facility, field, value)
    facility.transaction_dt = datetime.now(timezone.utc)
    try:
        db.commit()
        db.refresh(facility)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Facility name already exists")
    return facility


@router.delete("/facilityDetail/{facility_id}")
def delete_facility(facility_id: int, db: Session = Depends(get_db)):
    """
    Delete a facility together with every booking it owns.
    Both deletes are committed as one transaction, so bookings are never orphaned.
    """
    facility = _get_or_404(db, facility_id)
    db.delete(facility)
    removed = BookingRepository(db).delete_by_facility(facility_id)
    db.commit()
    logger.info("facility %s deleted with %s booking(s)", facility_id, removed)
    return {"result": "success"}
