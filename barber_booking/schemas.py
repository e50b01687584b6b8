# barber_booking/schemas.py

import re
from datetime import datetime, date, time
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer, StrictInt, field_validator


def truncate_to_minute(value: time) -> time:
    # seconds are dropped, never rounded
    return value.replace(second=0, microsecond=0, tzinfo=None)


# Wire format for times of day is HH:MM
ShopTime = Annotated[
    time,
    AfterValidator(truncate_to_minute),
    PlainSerializer(lambda t: t.strftime("%H:%M"), return_type=str, when_used="json"),
]

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PHONE_DIGITS = 8


class AppointmentStatus(str, Enum):
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"
    no_show = "no_show"


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminPublic(BaseModel):
    id: int
    email: str


class ShopSettingsPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    shop_name: str
    slot_duration_minutes: int
    morning_start: ShopTime
    morning_end: ShopTime
    afternoon_start: ShopTime
    afternoon_end: ShopTime
    working_days: List[int]
    contact_phone: Optional[str] = None
    google_maps_url: Optional[str] = None
    prices_url: Optional[str] = None
    updated_at: Optional[datetime] = None


class ShopSettingsUpdate(BaseModel):
    # Range checks live in schedule.validate_settings_update so they can be
    # reported per field instead of as a request parsing failure.
    shop_name: Optional[str] = None
    slot_duration_minutes: Optional[StrictInt] = None  # JSON true must not pass as 1
    morning_start: Optional[ShopTime] = None
    morning_end: Optional[ShopTime] = None
    afternoon_start: Optional[ShopTime] = None
    afternoon_end: Optional[ShopTime] = None
    working_days: Optional[List[int]] = None
    contact_phone: Optional[str] = None
    google_maps_url: Optional[str] = None
    prices_url: Optional[str] = None


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class _ClientFields(BaseModel):
    @field_validator("client_name", check_fields=False)
    @classmethod
    def name_not_blank(cls, value):
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("client_name is required")
        return value

    @field_validator("client_phone", check_fields=False)
    @classmethod
    def phone_has_enough_digits(cls, value):
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("client_phone is required")
        if len(re.sub(r"\D", "", value)) < MIN_PHONE_DIGITS:
            raise ValueError(f"client_phone must have at least {MIN_PHONE_DIGITS} digits")
        return value

    @field_validator("client_email", check_fields=False)
    @classmethod
    def email_well_formed(cls, value):
        value = _blank_to_none(value)
        if value is not None and not EMAIL_RE.match(value):
            raise ValueError("client_email is not a valid email address")
        return value

    @field_validator("notes", check_fields=False)
    @classmethod
    def notes_blank_to_none(cls, value):
        return _blank_to_none(value)


class AppointmentCreate(_ClientFields):
    appointment_date: date
    start_time: ShopTime
    client_name: str
    client_phone: str
    client_email: Optional[str] = None
    notes: Optional[str] = None


class AppointmentUpdate(_ClientFields):
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    notes: Optional[str] = None


class AppointmentPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    appointment_date: date
    start_time: ShopTime
    end_time: ShopTime
    client_name: str
    client_phone: str
    client_email: Optional[str] = None
    notes: Optional[str] = None
    status: AppointmentStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AppointmentSummary(BaseModel):
    date: date
    confirmed: int = 0
    completed: int = 0
    no_show: int = 0
    cancelled: int = 0
    active: int = 0


class TimeSlot(BaseModel):
    start: str  # HH:MM
    end: str
    is_available: bool
    is_past: bool


class DaySlots(BaseModel):
    morning: List[TimeSlot] = Field(default_factory=list)
    afternoon: List[TimeSlot] = Field(default_factory=list)

    @property
    def all_slots(self) -> List[TimeSlot]:
        return [*self.morning, *self.afternoon]


class AvailabilityResponse(BaseModel):
    date: date
    is_working_day: bool
    morning: List[TimeSlot]
    afternoon: List[TimeSlot]


class CalendarDay(BaseModel):
    date: date
    day_number: int
    is_today: bool
    is_working_day: bool
    is_past: bool
    is_selectable: bool
