# barber_booking/routers/availability_routes.py

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from barber_booking.deps import get_clock, get_store
from barber_booking.schemas import AvailabilityResponse, CalendarDay
from barber_booking.slots import calendar_month, generate_day_slots, is_working_day
from barber_booking.store import AppointmentStore

router = APIRouter(
    tags=["availability"],
)


@router.get("/availability", response_model=AvailabilityResponse)
def availability(
    date: date,
    store: AppointmentStore = Depends(get_store),
    clock=Depends(get_clock),
):
    settings = store.get_settings()

    # 1) Check working day
    if not is_working_day(date, settings.working_days):
        return {"date": date, "is_working_day": False, "morning": [], "afternoon": []}

    # 2) Generate slots, marking booked and past ones
    appointments = store.list_appointments(date)
    day_slots = generate_day_slots(settings, appointments, date, clock())

    return {
        "date": date,
        "is_working_day": True,
        "morning": day_slots.morning,
        "afternoon": day_slots.afternoon,
    }


@router.get("/calendar/{year}/{month}", response_model=List[CalendarDay])
def calendar(
    year: int,
    month: int,
    store: AppointmentStore = Depends(get_store),
    clock=Depends(get_clock),
):
    if not (1 <= month <= 12) or not (1 <= year <= 9999):
        raise HTTPException(status_code=422, detail="year or month out of range")

    settings = store.get_settings()
    return calendar_month(year, month, settings.working_days, clock().date())
