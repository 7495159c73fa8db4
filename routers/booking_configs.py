from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db import get_db
from app.models import BookingConfig
from app.pagination import Page, page_params
from app.schemas import BookingConfigIn, BookingConfigOut

router = APIRouter()


@router.get("/bookingConfigs", response_model=list[BookingConfigOut])
def list_configs(page: Page = Depends(page_params), db: Session = Depends(get_db)):
    return db.query(BookingConfig).order_by(BookingConfig.id).offset(page.start).limit(page.count).all()


@router.get("/bookingConfigsCount", response_model=int)
def count_configs(db: Session = Depends(get_db)):
    return db.query(func.count(BookingConfig.id)).scalar()


@router.get("/bookingConfig/{config_id}", response_model=BookingConfigOut)
def get_config(config_id: int, db: Session = Depends(get_db)):
    config = db.get(BookingConfig, config_id)
    if config is None:
        raise HTTPException(status_code=404, detail="Booking Config not found")
    return config


@router.put("/bookingConfig/{config_id}", response_model=BookingConfigOut)
def update_config(config_id: int, body: BookingConfigIn, db: Session = Depends(get_db)):
    config = db.get(BookingConfig, config_id)
    if config is None:
        raise HTTPException(status_code=404, detail="Booking Config not found")
    config.key = body.key
    config.value = body.value
    db.commit()
    db.refresh(config)
    return config
