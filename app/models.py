from sqlalchemy import Column, String, Integer, DateTime, Boolean, Text, CheckConstraint
from app.db import Base


class Booking(Base):
    __tablename__ = "bookings"
    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    email = Column(String)
    purpose = Column(Text)
    facility_id = Column(Integer, nullable=False, index=True)  # no FK: cascade is done by the app
    start_dt = Column(DateTime(timezone=True), nullable=False)
    end_dt = Column(DateTime(timezone=True), nullable=False)
    transaction_dt = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("end_dt > start_dt", name="booking_window_valid"),
    )


class Facility(Base):
    __tablename__ = "facility_details"
    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    level = Column(String)
    description = Column(Text)
    status = Column(String)  # free-text tag, e.g. open|closed
    transaction_dt = Column(DateTime(timezone=True))


class BookingConfig(Base):
    __tablename__ = "booking_configs"
    id = Column(Integer, primary_key=True)
    key = Column(String, nullable=False)
    value = Column(String)


class Account(Base):
    __tablename__ = "accounts"
    id = Column(Integer, primary_key=True)
    user_id = Column(String, unique=True, nullable=False)
    admin = Column(Boolean, nullable=False, default=False)
    email = Column(String)
    password = Column(String, nullable=False)  # werkzeug hash
