"""Shared fixtures: a throwaway SQLite database and a fixed clock."""
import os
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="barber-booking-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.pop("ADMIN_EMAIL", None)
os.environ.pop("ADMIN_PASSWORD", None)

from datetime import datetime, time  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel, select  # noqa: E402

from barber_booking import db  # noqa: E402
from barber_booking.auth import hash_password  # noqa: E402
from barber_booking.guard import ConflictGuard  # noqa: E402
from barber_booking.main import app  # noqa: E402
from barber_booking.models import AdminUser, ShopSettings  # noqa: E402
from barber_booking.notifications import ChangeFeed  # noqa: E402
from barber_booking.store import AppointmentStore  # noqa: E402

# Sunday noon; 2025-03-10 is the following Monday
NOW = datetime(2025, 3, 9, 12, 0)

ADMIN_EMAIL = "admin@barbershop.test"
ADMIN_PASSWORD = "correct-horse-battery"


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def engine():
    SQLModel.metadata.drop_all(db.engine)
    db.init_db(db.engine)

    with Session(db.engine) as session:
        settings = session.exec(select(ShopSettings)).one()
        settings.shop_name = "Test Cuts"
        settings.slot_duration_minutes = 60
        settings.morning_start = time(9, 0)
        settings.morning_end = time(12, 0)
        settings.afternoon_start = time(14, 0)
        settings.afternoon_end = time(18, 0)
        settings.working_days = [1, 2, 3, 4, 5, 6]
        session.add(settings)
        session.commit()

    yield db.engine


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def store(session, feed):
    return AppointmentStore(session, feed)


@pytest.fixture
def guard(store):
    return ConflictGuard(store, clock=lambda: NOW)


@pytest.fixture
def client(engine):
    original_clock = app.state.clock
    app.state.clock = lambda: NOW
    with TestClient(app) as client:
        yield client
    app.state.clock = original_clock


@pytest.fixture
def admin_headers(client, session):
    session.add(AdminUser(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD)))
    session.commit()

    resp = client.post("/auth/login", data={"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
