# barber_booking/deps.py

from fastapi import Depends, Request
from sqlmodel import Session

from .db import get_session
from .guard import ConflictGuard
from .notifications import ChangeFeed
from .store import AppointmentStore


def get_change_feed(request: Request) -> ChangeFeed:
    return request.app.state.change_feed


def get_clock(request: Request):
    return request.app.state.clock


def get_store(
    session: Session = Depends(get_session),
    feed: ChangeFeed = Depends(get_change_feed),
) -> AppointmentStore:
    return AppointmentStore(session, feed)


def get_guard(
    store: AppointmentStore = Depends(get_store),
    clock=Depends(get_clock),
) -> ConflictGuard:
    return ConflictGuard(store, clock=clock)
