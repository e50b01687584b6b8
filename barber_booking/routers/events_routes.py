# barber_booking/routers/events_routes.py

import asyncio
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from barber_booking.auth import authenticate_token
from barber_booking.db import get_session
from barber_booking.errors import NotAuthenticated
from barber_booking.notifications import AppointmentCache, Subscription
from barber_booking.store import AppointmentStore

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["events"],
)


def _snapshot(cache: AppointmentCache) -> list:
    return [a.model_dump(mode="json") for a in cache.appointments]


async def _pump(websocket: WebSocket, subscription: Subscription, cache: AppointmentCache):
    while True:
        event = await subscription.get()
        if cache.apply(event):
            await websocket.send_json({**event.to_dict(), "appointments": _snapshot(cache)})


async def _wait_for_disconnect(websocket: WebSocket):
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass


@router.websocket("/ws/appointments")
async def appointment_feed(
    websocket: WebSocket,
    date: date,
    token: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """Live view of one day's active appointments for the admin dashboard."""
    try:
        admin = await run_in_threadpool(authenticate_token, token, session)
    except NotAuthenticated:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    feed = websocket.app.state.change_feed
    cache = AppointmentCache(date)

    # subscribe before the snapshot so no change falls between the two
    with feed.subscribe(date) as subscription:
        await run_in_threadpool(cache.refresh, AppointmentStore(session))
        session.close()

        await websocket.accept()
        await websocket.send_json({"event": "snapshot", "appointments": _snapshot(cache)})
        logger.info("Admin %s watching appointments for %s", admin.email, date)

        pump = asyncio.create_task(_pump(websocket, subscription, cache))
        watcher = asyncio.create_task(_wait_for_disconnect(websocket))
        try:
            done, _ = await asyncio.wait({pump, watcher}, return_when=asyncio.FIRST_COMPLETED)
            if pump in done and pump.exception() is not None:
                logger.warning("Appointment feed for %s stopped: %s", date, pump.exception())
        finally:
            for task in (pump, watcher):
                task.cancel()

    logger.info("Admin %s stopped watching appointments for %s", admin.email, date)
