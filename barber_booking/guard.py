# barber_booking/guard.py

import logging
from datetime import datetime
from typing import Callable

from .errors import InvalidSlot, SlotAlreadyTaken
from .models import Appointment
from .schemas import AppointmentCreate, AppointmentStatus, AppointmentUpdate
from .slots import find_slot, generate_day_slots, is_working_day, slot_end
from .store import AppointmentStore

logger = logging.getLogger(__name__)


class ConflictGuard:
    """Creates appointments without double-booking a slot.

    The pre-check only saves a wasted write; the unique index on active
    (appointment_date, start_time) rows is what actually keeps two
    concurrent bookings from both succeeding.
    """

    def __init__(self, store: AppointmentStore, clock: Callable[[], datetime] = datetime.now):
        self.store = store
        self.clock = clock

    def attempt_book(self, candidate: AppointmentCreate) -> Appointment:
        settings = self.store.get_settings()
        on_date = candidate.appointment_date
        start = candidate.start_time

        # 1) Validate against the schedule
        if not is_working_day(on_date, settings.working_days):
            raise InvalidSlot("The shop is closed on that day")

        # occupancy is checked against the store below
        day_slots = generate_day_slots(settings, [], on_date, self.clock())
        slot = find_slot(day_slots, start)
        if slot is None:
            raise InvalidSlot("Start time does not match any slot in the shop schedule")
        if slot.is_past:
            raise InvalidSlot("Cannot book an appointment in the past")

        # 2) Fast-path rejection
        if self.store.find_active(on_date, start) is not None:
            logger.info("Booking rejected, %s %s already taken", on_date, start.strftime("%H:%M"))
            raise SlotAlreadyTaken()

        # 3) Insert; the store turns a unique index violation into SlotAlreadyTaken
        appointment = Appointment(
            appointment_date=on_date,
            start_time=start,
            end_time=slot_end(start, settings.slot_duration_minutes),
            client_name=candidate.client_name,
            client_phone=candidate.client_phone,
            client_email=candidate.client_email,
            notes=candidate.notes,
            status=AppointmentStatus.confirmed.value,
        )
        appointment = self.store.insert_appointment(appointment)
        logger.info("Booked appointment %s for %s %s", appointment.id, on_date, start.strftime("%H:%M"))
        return appointment

    # Status transitions (admin only). Re-applying a transition is a no-op.

    def confirm(self, appointment_id: int) -> Appointment:
        return self._transition(appointment_id, AppointmentStatus.confirmed)

    def complete(self, appointment_id: int) -> Appointment:
        return self._transition(appointment_id, AppointmentStatus.completed)

    def mark_no_show(self, appointment_id: int) -> Appointment:
        return self._transition(appointment_id, AppointmentStatus.no_show)

    def cancel(self, appointment_id: int) -> Appointment:
        return self._transition(appointment_id, AppointmentStatus.cancelled)

    def update_details(self, appointment_id: int, update: AppointmentUpdate) -> Appointment:
        fields = update.model_dump(exclude_unset=True)
        for required in ("client_name", "client_phone"):
            if required in fields and fields[required] is None:
                del fields[required]
        if not fields:
            return self.store.get_appointment(appointment_id)
        return self.store.update_appointment(appointment_id, fields)

    def _transition(self, appointment_id: int, status: AppointmentStatus) -> Appointment:
        appointment = self.store.get_appointment(appointment_id)
        if appointment.status == status:
            return appointment

        # reviving a cancelled booking can collide with a newer one; the index decides
        appointment = self.store.update_appointment(appointment_id, {"status": status.value})
        logger.info("Appointment %s marked %s", appointment_id, status.value)
        return appointment
