"""HTTP and websocket surface."""
import pytest
from starlette.websockets import WebSocketDisconnect

MONDAY = "2025-03-10"
TUESDAY = "2025-03-11"
SUNDAY = "2025-03-16"


def book(client, start="10:00", on_date=MONDAY, **overrides):
    payload = {
        "appointment_date": on_date,
        "start_time": start,
        "client_name": "Ana Perez",
        "client_phone": "11 5555 1234",
        "client_email": "ana@example.com",
    }
    payload.update(overrides)
    return client.post("/appointments", json=payload)


def slot_map(body):
    return {s["start"]: s["is_available"] for s in body["morning"] + body["afternoon"]}


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


class TestAvailability:

    def test_working_day_slots(self, client):
        resp = client.get("/availability", params={"date": MONDAY})

        assert resp.status_code == 200
        body = resp.json()
        assert body["is_working_day"] is True
        assert [(s["start"], s["end"]) for s in body["morning"]] == [
            ("09:00", "10:00"),
            ("10:00", "11:00"),
            ("11:00", "12:00"),
        ]
        assert [s["start"] for s in body["afternoon"]] == ["14:00", "15:00", "16:00", "17:00"]

    def test_closed_day(self, client):
        body = client.get("/availability", params={"date": SUNDAY}).json()

        assert body == {"date": SUNDAY, "is_working_day": False, "morning": [], "afternoon": []}

    def test_booking_blocks_slot_for_its_date_only(self, client):
        assert book(client, "10:00").status_code == 201

        monday = slot_map(client.get("/availability", params={"date": MONDAY}).json())
        tuesday = slot_map(client.get("/availability", params={"date": TUESDAY}).json())

        assert monday["10:00"] is False
        assert monday["09:00"] is True
        assert tuesday["10:00"] is True

    def test_calendar(self, client):
        days = client.get("/calendar/2025/3").json()

        assert len(days) == 31
        assert days[8]["date"] == "2025-03-09"
        assert days[8]["is_today"] is True
        assert days[8]["is_selectable"] is False  # Sunday
        assert days[9]["is_selectable"] is True

    def test_calendar_bad_month(self, client):
        assert client.get("/calendar/2025/13").status_code == 422


class TestBooking:

    def test_create(self, client):
        resp = book(client, "14:00", notes="  fade please ")

        assert resp.status_code == 201
        body = resp.json()
        assert body["start_time"] == "14:00"
        assert body["end_time"] == "15:00"
        assert body["status"] == "confirmed"
        assert body["notes"] == "fade please"
        assert isinstance(body["id"], int)

    def test_double_booking_rejected(self, client):
        book(client, "10:00")

        resp = book(client, "10:00", client_name="Late Comer")

        assert resp.status_code == 409
        assert resp.json()["error"] == "slot_already_taken"

    def test_off_schedule_slot_rejected(self, client):
        resp = book(client, "12:30")

        assert resp.status_code == 422
        assert resp.json()["error"] == "invalid_slot"

    @pytest.mark.parametrize("overrides", [
        {"client_name": "   "},
        {"client_phone": "555-12"},
        {"client_email": "not-an-email"},
    ])
    def test_customer_fields_checked(self, client, overrides):
        assert book(client, "10:00", **overrides).status_code == 422

    def test_blank_email_is_dropped(self, client):
        body = book(client, "10:00", client_email="").json()

        assert body["client_email"] is None


class TestAdmin:

    def test_requires_login(self, client):
        resp = client.get("/appointments", params={"date": MONDAY})

        assert resp.status_code == 401
        assert resp.headers["WWW-Authenticate"] == "Bearer"
        assert resp.json()["error"] == "not_authenticated"

    def test_bad_token(self, client):
        resp = client.post("/appointments/1/cancel", headers={"Authorization": "Bearer nope"})

        assert resp.status_code == 401

    def test_wrong_password(self, client, admin_headers):
        resp = client.post("/auth/login", data={"username": "admin@barbershop.test", "password": "wrong-password"})

        assert resp.status_code == 401

    def test_me(self, client, admin_headers):
        assert client.get("/auth/me", headers=admin_headers).json()["email"] == "admin@barbershop.test"

    def test_list_hides_cancelled_by_default(self, client, admin_headers):
        first = book(client, "11:00").json()
        book(client, "09:00")
        client.post(f"/appointments/{first['id']}/cancel", headers=admin_headers)

        active = client.get("/appointments", params={"date": MONDAY}, headers=admin_headers).json()
        everything = client.get(
            "/appointments",
            params={"date": MONDAY, "include_cancelled": True},
            headers=admin_headers,
        ).json()

        assert [a["start_time"] for a in active] == ["09:00"]
        assert sorted(a["status"] for a in everything) == ["cancelled", "confirmed"]

    def test_no_show_is_idempotent(self, client, admin_headers):
        appt = book(client).json()

        for _ in range(2):
            resp = client.post(f"/appointments/{appt['id']}/no-show", headers=admin_headers)
            assert resp.status_code == 200
            assert resp.json()["status"] == "no_show"

    def test_complete_and_confirm(self, client, admin_headers):
        appt = book(client).json()

        assert client.post(f"/appointments/{appt['id']}/complete", headers=admin_headers).json()["status"] == "completed"
        assert client.post(f"/appointments/{appt['id']}/confirm", headers=admin_headers).json()["status"] == "confirmed"

    def test_unknown_appointment(self, client, admin_headers):
        resp = client.post("/appointments/4242/cancel", headers=admin_headers)

        assert resp.status_code == 404
        assert resp.json()["error"] == "appointment_not_found"

    def test_update_details(self, client, admin_headers):
        appt = book(client).json()

        resp = client.patch(
            f"/appointments/{appt['id']}",
            json={"notes": "prefers scissors", "client_phone": "11 4444 9999"},
            headers=admin_headers,
        )

        assert resp.status_code == 200
        assert resp.json()["notes"] == "prefers scissors"
        assert resp.json()["client_phone"] == "11 4444 9999"
        assert resp.json()["client_name"] == "Ana Perez"

    def test_summary(self, client, admin_headers):
        ids = [book(client, start).json()["id"] for start in ("09:00", "10:00", "11:00", "14:00")]
        client.post(f"/appointments/{ids[0]}/complete", headers=admin_headers)
        client.post(f"/appointments/{ids[1]}/no-show", headers=admin_headers)
        client.post(f"/appointments/{ids[2]}/cancel", headers=admin_headers)

        summary = client.get("/appointments/summary", params={"date": MONDAY}, headers=admin_headers).json()

        assert summary == {
            "date": MONDAY,
            "confirmed": 1,
            "completed": 1,
            "no_show": 1,
            "cancelled": 1,
            "active": 3,
        }

    def test_delete(self, client, admin_headers):
        appt = book(client).json()

        assert client.delete(f"/appointments/{appt['id']}", headers=admin_headers).status_code == 204
        assert client.get(f"/appointments/{appt['id']}", headers=admin_headers).status_code == 404


class TestSettings:

    def test_public_read(self, client):
        body = client.get("/settings").json()

        assert body["shop_name"] == "Test Cuts"
        assert body["morning_start"] == "09:00"
        assert body["working_days"] == [1, 2, 3, 4, 5, 6]

    def test_update_requires_login(self, client):
        assert client.patch("/settings", json={"shop_name": "New"}).status_code == 401

    def test_zero_duration_rejected_before_store(self, client, admin_headers):
        resp = client.patch("/settings", json={"slot_duration_minutes": 0}, headers=admin_headers)

        assert resp.status_code == 422
        body = resp.json()
        assert body["error"] == "invalid_settings"
        assert [e["field"] for e in body["errors"]] == ["slot_duration_minutes"]
        assert client.get("/settings").json()["slot_duration_minutes"] == 60

    def test_boolean_duration_rejected(self, client, admin_headers):
        resp = client.patch("/settings", json={"slot_duration_minutes": True}, headers=admin_headers)

        assert resp.status_code == 422
        assert client.get("/settings").json()["slot_duration_minutes"] == 60

    def test_update_changes_slots(self, client, admin_headers):
        resp = client.patch(
            "/settings",
            json={"slot_duration_minutes": 30, "afternoon_start": "14:00:00", "afternoon_end": "14:00"},
            headers=admin_headers,
        )

        assert resp.status_code == 200
        assert resp.json()["slot_duration_minutes"] == 30

        body = client.get("/availability", params={"date": MONDAY}).json()
        assert len(body["morning"]) == 6
        assert body["afternoon"] == []

    def test_working_days_saved_sorted(self, client, admin_headers):
        resp = client.patch("/settings", json={"working_days": [6, 0, 3]}, headers=admin_headers)

        assert resp.json()["working_days"] == [0, 3, 6]


class TestLiveFeed:

    def test_rejects_anonymous_viewer(self, client):
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect(f"/ws/appointments?date={MONDAY}") as ws:
                ws.receive_json()

    def test_snapshot_then_changes(self, client, admin_headers):
        existing = book(client, "11:00").json()
        token = admin_headers["Authorization"].split(" ", 1)[1]

        with client.websocket_connect(f"/ws/appointments?date={MONDAY}&token={token}") as ws:
            snapshot = ws.receive_json()
            assert snapshot["event"] == "snapshot"
            assert [a["id"] for a in snapshot["appointments"]] == [existing["id"]]

            created = book(client, "09:00").json()
            message = ws.receive_json()
            assert message["event"] == "insert"
            assert message["id"] == created["id"]
            assert [a["start_time"] for a in message["appointments"]] == ["09:00", "11:00"]

            client.post(f"/appointments/{existing['id']}/cancel", headers=admin_headers)
            message = ws.receive_json()
            assert message["event"] == "update"
            assert [a["id"] for a in message["appointments"]] == [created["id"]]
