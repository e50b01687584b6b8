# barber_booking/notifications.py

import asyncio
import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

from .schemas import AppointmentPublic, AppointmentStatus

logger = logging.getLogger(__name__)

INSERT = "insert"
UPDATE = "update"
DELETE = "delete"


@dataclass(frozen=True)
class AppointmentEvent:
    kind: str  # insert, update or delete
    appointment_id: int
    appointment_date: Optional[date]
    appointment: Optional[AppointmentPublic] = None

    def to_dict(self) -> dict:
        return {
            "event": self.kind,
            "id": self.appointment_id,
            "appointment": self.appointment.model_dump(mode="json") if self.appointment else None,
        }


class Subscription:
    """One viewer's queue of change events for a single date.

    Use it as a context manager; leaving the block always unsubscribes.
    """

    def __init__(self, feed: "ChangeFeed", on_date: date):
        self.feed = feed
        self.date = on_date
        self.queue: asyncio.Queue = asyncio.Queue()
        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            self._loop = None
        self.closed = False

    def wants(self, event: AppointmentEvent) -> bool:
        if event.kind == DELETE and event.appointment_date is None:
            return True
        return event.appointment_date == self.date

    def deliver(self, event: AppointmentEvent) -> None:
        if self._loop is not None and not self._loop.is_closed():
            self._loop.call_soon_threadsafe(self.queue.put_nowait, event)
        else:
            self.queue.put_nowait(event)

    async def get(self) -> AppointmentEvent:
        return await self.queue.get()

    def get_nowait(self) -> AppointmentEvent:
        return self.queue.get_nowait()

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.feed.unsubscribe(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class ChangeFeed:
    """In-process publish/subscribe channel for appointment changes."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscriptions: List[Subscription] = []

    def subscribe(self, on_date: date) -> Subscription:
        subscription = Subscription(self, on_date)
        with self._lock:
            self._subscriptions.append(subscription)
        logger.debug("Subscribed to changes for %s (%d live)", on_date, len(self._subscriptions))
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
        logger.debug("Unsubscribed from changes for %s", subscription.date)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def publish(self, event: AppointmentEvent) -> None:
        with self._lock:
            targets = [s for s in self._subscriptions if s.wants(event)]
        for subscription in targets:
            subscription.deliver(event)


class AppointmentCache:
    """A view's local copy of one day's active appointments.

    Only ``refresh`` (read from the store) and ``apply`` (a pushed change)
    modify it. Cancelled appointments are never kept and the list stays
    ordered by start time.
    """

    def __init__(self, on_date: date):
        self.date = on_date
        self._by_id: Dict[int, AppointmentPublic] = {}

    @property
    def appointments(self) -> List[AppointmentPublic]:
        return sorted(self._by_id.values(), key=lambda a: (a.start_time, a.id))

    def refresh(self, store) -> List[AppointmentPublic]:
        rows = store.list_appointments(self.date)
        self._by_id = {row.id: AppointmentPublic.model_validate(row) for row in rows}
        return self.appointments

    def apply(self, event: AppointmentEvent) -> bool:
        """Fold one event into the cache; returns True if anything changed."""
        if event.kind == DELETE:
            return self._by_id.pop(event.appointment_id, None) is not None

        appointment = event.appointment
        if appointment is None:
            return False

        if appointment.appointment_date != self.date or appointment.status == AppointmentStatus.cancelled:
            return self._by_id.pop(appointment.id, None) is not None

        if event.kind == INSERT and appointment.id in self._by_id:
            return False

        self._by_id[appointment.id] = appointment
        return True
