# barber_booking/db.py

import logging
from datetime import time

from sqlmodel import SQLModel, Session, create_engine, select

from . import config
from .models import AdminUser, ShopSettings

logger = logging.getLogger(__name__)


def make_engine(database_url: str = config.DATABASE_URL):
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
    return create_engine(database_url, echo=config.SQL_ECHO, connect_args=connect_args)


# Engine = connection to the database
engine = make_engine()


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session


def _parse_hhmm(value: str) -> time:
    hour, minute = value.strip().split(":")[:2]
    return time(int(hour), int(minute[:2]))


def default_settings() -> ShopSettings:
    return ShopSettings(
        shop_name=config.DEFAULT_SHOP_NAME,
        slot_duration_minutes=config.DEFAULT_SLOT_DURATION_MINUTES,
        morning_start=_parse_hhmm(config.DEFAULT_MORNING_START),
        morning_end=_parse_hhmm(config.DEFAULT_MORNING_END),
        afternoon_start=_parse_hhmm(config.DEFAULT_AFTERNOON_START),
        afternoon_end=_parse_hhmm(config.DEFAULT_AFTERNOON_END),
        working_days=list(config.DEFAULT_WORKING_DAYS),
    )


def init_db(bind=None) -> None:
    """Create tables, then seed the settings row and the bootstrap admin."""
    bind = bind if bind is not None else engine
    SQLModel.metadata.create_all(bind)

    with Session(bind) as session:
        if session.exec(select(ShopSettings)).first() is None:
            session.add(default_settings())
            logger.info("Seeded default shop settings")

        if config.ADMIN_EMAIL and config.ADMIN_PASSWORD:
            existing = session.exec(
                select(AdminUser).where(AdminUser.email == config.ADMIN_EMAIL)
            ).first()
            if existing is None:
                from .auth import hash_password

                session.add(AdminUser(
                    email=config.ADMIN_EMAIL,
                    password_hash=hash_password(config.ADMIN_PASSWORD),
                ))
                logger.info("Created bootstrap admin %s", config.ADMIN_EMAIL)

        session.commit()
