# barber_booking/models.py

from typing import Optional, List
from datetime import datetime, date as Date, time, timezone

from sqlalchemy import DateTime, Index, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

from .schemas import AppointmentStatus


# At most one non-cancelled appointment per (date, start_time)
ACTIVE_SLOT_INDEX = "uq_active_slot"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Appointment(SQLModel, table=True):
    __table_args__ = (
        Index(
            ACTIVE_SLOT_INDEX,
            "appointment_date",
            "start_time",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    appointment_date: Date = Field(index=True)
    start_time: time
    end_time: time
    client_name: str
    client_phone: str
    client_email: Optional[str] = None
    notes: Optional[str] = None
    status: str = Field(default=AppointmentStatus.confirmed.value, index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class ShopSettings(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    shop_name: str
    slot_duration_minutes: int
    morning_start: time
    morning_end: time
    afternoon_start: time
    afternoon_end: time
    working_days: List[int] = Field(sa_column=Column(JSON))  # 0=Sun, 1=Mon, ..., 6=Sat
    contact_phone: Optional[str] = None
    google_maps_url: Optional[str] = None
    prices_url: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class AdminUser(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
