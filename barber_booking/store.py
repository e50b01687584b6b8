# barber_booking/store.py

import logging
from datetime import date, time
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from .errors import AppointmentNotFound, SlotAlreadyTaken, StoreUnavailable
from .models import ACTIVE_SLOT_INDEX, Appointment, ShopSettings, utcnow
from .notifications import DELETE, INSERT, UPDATE, AppointmentEvent, ChangeFeed
from .schemas import AppointmentPublic, AppointmentStatus

logger = logging.getLogger(__name__)

# PostgreSQL names the violated index; SQLite lists the indexed columns
SLOT_CONFLICT_MARKERS = (
    ACTIVE_SLOT_INDEX,
    "appointment.appointment_date, appointment.start_time",
)


def _is_slot_conflict(error: IntegrityError) -> bool:
    message = str(error.orig)
    return any(marker in message for marker in SLOT_CONFLICT_MARKERS)


class AppointmentStore:
    """Database-backed store for the shop schedule and appointments.

    Raw SQLAlchemy failures never leave this class: a violation of the
    active-slot unique index becomes SlotAlreadyTaken, anything else
    becomes StoreUnavailable. Successful appointment writes are published
    on the change feed after commit.
    """

    def __init__(self, session: Session, feed: Optional[ChangeFeed] = None):
        self.session = session
        self.feed = feed

    # Schedule

    def get_settings(self) -> ShopSettings:
        try:
            settings = self.session.exec(select(ShopSettings).order_by(ShopSettings.id)).first()
        except SQLAlchemyError as e:
            self._fail("fetch shop settings", e)
        if settings is None:
            raise StoreUnavailable("Shop settings have not been configured")
        return settings

    def update_settings(self, fields: dict) -> ShopSettings:
        settings = self.get_settings()
        for key, value in fields.items():
            setattr(settings, key, value)
        settings.updated_at = utcnow()
        self.session.add(settings)
        self._commit("update shop settings")
        self.session.refresh(settings)
        return settings

    # Appointments

    def list_appointments(self, on_date: date, include_cancelled: bool = False) -> List[Appointment]:
        stmt = select(Appointment).where(Appointment.appointment_date == on_date)
        if not include_cancelled:
            stmt = stmt.where(Appointment.status != AppointmentStatus.cancelled.value)
        stmt = stmt.order_by(Appointment.start_time, Appointment.id)
        try:
            return list(self.session.exec(stmt).all())
        except SQLAlchemyError as e:
            self._fail("fetch appointments", e)

    def find_active(self, on_date: date, start_time: time) -> Optional[Appointment]:
        try:
            return self.session.exec(
                select(Appointment)
                .where(Appointment.appointment_date == on_date)
                .where(Appointment.start_time == start_time)
                .where(Appointment.status != AppointmentStatus.cancelled.value)
                .limit(1)
            ).first()
        except SQLAlchemyError as e:
            self._fail("check slot", e)

    def get_appointment(self, appointment_id: int) -> Appointment:
        try:
            appointment = self.session.get(Appointment, appointment_id)
        except SQLAlchemyError as e:
            self._fail("fetch appointment", e)
        if appointment is None:
            raise AppointmentNotFound()
        return appointment

    def insert_appointment(self, appointment: Appointment) -> Appointment:
        self.session.add(appointment)
        self._commit("insert appointment")
        self.session.refresh(appointment)  # fills appointment.id
        self._publish(INSERT, appointment)
        return appointment

    def update_appointment(self, appointment_id: int, fields: dict) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        for key, value in fields.items():
            setattr(appointment, key, value)
        appointment.updated_at = utcnow()
        self.session.add(appointment)
        self._commit("update appointment")
        self.session.refresh(appointment)
        self._publish(UPDATE, appointment)
        return appointment

    def delete_appointment(self, appointment_id: int) -> None:
        appointment = self.get_appointment(appointment_id)
        on_date = appointment.appointment_date
        self.session.delete(appointment)
        self._commit("delete appointment")
        if self.feed is not None:
            self.feed.publish(AppointmentEvent(DELETE, appointment_id, on_date))

    # Helpers

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if not _is_slot_conflict(e):
                self._fail(action, e)
            logger.warning("Rejected %s: slot already taken (%s)", action, e.orig)
            raise SlotAlreadyTaken()
        except SQLAlchemyError as e:
            self.session.rollback()
            self._fail(action, e)

    def _fail(self, action: str, error: Exception):
        message = str(getattr(error, "orig", None) or error)
        logger.error("Failed to %s: %s", action, message)
        raise StoreUnavailable(f"Could not {action}: {message}") from error

    def _publish(self, kind: str, appointment: Appointment) -> None:
        if self.feed is None:
            return
        self.feed.publish(AppointmentEvent(
            kind,
            appointment.id,
            appointment.appointment_date,
            AppointmentPublic.model_validate(appointment),
        ))
