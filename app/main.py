import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.db import init_db
from routers import auth, booking_configs, bookings, facilities

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Facility Booking API", version="0.1.0")

app.include_router(bookings.router, tags=["bookings"])
app.include_router(facilities.router, tags=["facilities"])
app.include_router(booking_configs.router, tags=["booking-configs"])
app.include_router(auth.router, tags=["auth"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

@app.on_event("startup")
def on_startup():
    if get_settings().skip_db_init:
        return
    init_db()

@app.get("/")
def root():
    return {"ok": True, "service": "facility-booking-api"}
