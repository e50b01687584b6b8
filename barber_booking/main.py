# barber_booking/main.py

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import config
from .db import init_db
from .errors import BookingError, NotAuthenticated
from .notifications import ChangeFeed
from .routers import appointments_routes, auth_routes, availability_routes, events_routes, settings_routes

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    init_db()
    logger.info("Database ready")
    yield
    logger.info("Application shutting down")


app = FastAPI(title="Barbershop Booking API", version="1.0.0", lifespan=lifespan)

# Shared by every request and websocket of this process
app.state.change_feed = ChangeFeed()
app.state.clock = datetime.now


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, NotAuthenticated) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


app.include_router(auth_routes.router)
app.include_router(settings_routes.router)
app.include_router(availability_routes.router)
app.include_router(appointments_routes.router)
app.include_router(events_routes.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
