# barber_booking/routers/appointments_routes.py

import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Response

from barber_booking.auth import get_current_admin
from barber_booking.deps import get_guard, get_store
from barber_booking.guard import ConflictGuard
from barber_booking.models import AdminUser
from barber_booking.schemas import (
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
    AppointmentSummary,
    AppointmentUpdate,
)
from barber_booking.store import AppointmentStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/appointments",
    tags=["appointments"],
)


@router.post("", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    guard: ConflictGuard = Depends(get_guard),
):
    # Anonymous customers book; the guard rejects taken, past or off-schedule slots
    return guard.attempt_book(appt)


@router.get("", response_model=List[AppointmentPublic])
def list_appointments(
    date: date,
    include_cancelled: bool = False,
    store: AppointmentStore = Depends(get_store),
    current_admin: AdminUser = Depends(get_current_admin),
):
    return store.list_appointments(date, include_cancelled=include_cancelled)


@router.get("/summary", response_model=AppointmentSummary)
def appointment_summary(
    date: date,
    store: AppointmentStore = Depends(get_store),
    current_admin: AdminUser = Depends(get_current_admin),
):
    counts = {status.value: 0 for status in AppointmentStatus}
    for appt in store.list_appointments(date, include_cancelled=True):
        counts[appt.status] = counts.get(appt.status, 0) + 1

    return {
        "date": date,
        **counts,
        "active": sum(n for status, n in counts.items() if status != AppointmentStatus.cancelled.value),
    }


@router.get("/{appt_id}", response_model=AppointmentPublic)
def get_appointment(
    appt_id: int,
    store: AppointmentStore = Depends(get_store),
    current_admin: AdminUser = Depends(get_current_admin),
):
    return store.get_appointment(appt_id)


@router.patch("/{appt_id}", response_model=AppointmentPublic)
def update_appointment(
    appt_id: int,
    update: AppointmentUpdate,
    guard: ConflictGuard = Depends(get_guard),
    current_admin: AdminUser = Depends(get_current_admin),
):
    return guard.update_details(appt_id, update)


@router.post("/{appt_id}/confirm", response_model=AppointmentPublic)
def confirm_appointment(
    appt_id: int,
    guard: ConflictGuard = Depends(get_guard),
    current_admin: AdminUser = Depends(get_current_admin),
):
    return guard.confirm(appt_id)


@router.post("/{appt_id}/complete", response_model=AppointmentPublic)
def complete_appointment(
    appt_id: int,
    guard: ConflictGuard = Depends(get_guard),
    current_admin: AdminUser = Depends(get_current_admin),
):
    return guard.complete(appt_id)


@router.post("/{appt_id}/no-show", response_model=AppointmentPublic)
def mark_no_show(
    appt_id: int,
    guard: ConflictGuard = Depends(get_guard),
    current_admin: AdminUser = Depends(get_current_admin),
):
    return guard.mark_no_show(appt_id)


@router.post("/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel_appointment(
    appt_id: int,
    guard: ConflictGuard = Depends(get_guard),
    current_admin: AdminUser = Depends(get_current_admin),
):
    return guard.cancel(appt_id)


@router.delete("/{appt_id}", status_code=204)
def delete_appointment(
    appt_id: int,
    store: AppointmentStore = Depends(get_store),
    current_admin: AdminUser = Depends(get_current_admin),
):
    store.delete_appointment(appt_id)
    logger.info("Appointment %s deleted by %s", appt_id, current_admin.email)
    return Response(status_code=204)
