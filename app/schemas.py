from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, field_validator


def as_utc(value: datetime) -> datetime:
    # naive timestamps are taken to be UTC (SQLite hands them back naive)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BookingIn(BaseModel):
    user_id: str
    email: str | None = ""
    purpose: str | None = ""
    facility_id: int
    start_dt: datetime
    end_dt: datetime

    @field_validator("start_dt", "end_dt")
    @classmethod
    def _normalize(cls, v: datetime) -> datetime:
        return as_utc(v)


class BookingOut(BookingIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    transaction_dt: datetime

    @field_validator("transaction_dt")
    @classmethod
    def _normalize_transaction(cls, v: datetime) -> datetime:
        return as_utc(v)


class FacilityIn(BaseModel):
    name: str
    level: str | None = None
    description: str | None = None
    status: str | None = None


class FacilityOut(FacilityIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    transaction_dt: datetime | None = None

    @field_validator("transaction_dt")
    @classmethod
    def _normalize_transaction(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None


class BookingConfigIn(BaseModel):
    key: str
    value: str | None = None


class BookingConfigOut(BookingConfigIn):
    model_config = ConfigDict(from_attributes=True)

    id: int


class LoginBody(BaseModel):
    user_id: str
    password: str


class AccountOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    admin: bool
    email: str | None = None
