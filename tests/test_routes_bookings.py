from datetime import datetime

from conftest import booking_payload, make_service
from sqlmodel import select

from venue_booking.models import Booking


def _create(client, venue, service, **overrides):
    return client.post("/bookings", json=booking_payload(venue, service, **overrides))


def test_create_booking(client, venue, service):
    resp = _create(client, venue, service)

    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["status"] == "pending"
    assert body["data"]["end_time"] == "11:00:00"
    assert body["data"]["booking_token"]


def test_end_time_optional(client, venue, service):
    payload = booking_payload(venue, service)
    del payload["end_time"]

    resp = client.post("/bookings", json=payload)

    assert resp.status_code == 201
    assert resp.json()["data"]["end_time"] == "11:00:00"


def test_double_booking_conflict(client, session, venue, service):
    assert _create(client, venue, service).status_code == 201

    resp = _create(client, venue, service, customer_email="late@example.com")

    assert resp.status_code == 409
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Time slot already booked"
    assert body["error"] == {"kind": "conflict", "code": "slot_already_booked"}
    session.expire_all()
    assert len(session.exec(select(Booking)).all()) == 1


def test_capacity_allows_parallel_bookings(client, session, venue):
    sauna = make_service(session, venue, name="Sauna", capacity=2, price=20.0)

    assert _create(client, venue, sauna).status_code == 201
    assert _create(client, venue, sauna, customer_email="b@example.com").status_code == 201
    assert _create(client, venue, sauna, customer_email="c@example.com").status_code == 409


def test_advance_notice_rejected(client, clock, venue, service):
    clock.now = datetime(2025, 6, 3, 9, 0)

    resp = _create(client, venue, service)

    assert resp.status_code == 422
    body = resp.json()
    assert body["error"]["kind"] == "policy_advance_notice"
    assert body["error"]["threshold_hours"] == 2
    assert body["error"]["remaining_hours"] == 1
    assert body["message"] == "Bookings must be made at least 2 hours in advance. Only 1 hours remaining."


def test_invalid_email(client, venue, service):
    resp = _create(client, venue, service, customer_email="nope")

    assert resp.status_code == 422
    assert resp.json()["error"]["field"] == "customer_email"


def test_email_with_empty_domain_label(client, venue, service):
    resp = _create(client, venue, service, customer_email="a@b..c")

    assert resp.status_code == 422
    assert resp.json()["error"] == {"kind": "validation", "code": "invalid_input", "field": "customer_email"}


def test_malformed_body(client, venue, service):
    resp = _create(client, venue, service, booking_date="not-a-date")

    assert resp.status_code == 422
    assert resp.json()["error"]["kind"] == "validation"


def test_manage_booking_details(client, venue, service):
    token = _create(client, venue, service).json()["data"]["booking_token"]

    resp = client.get(f"/bookings/manage/{token}")

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["venue_name"] == "Studio Nord"
    assert data["service_name"] == "Massage"
    assert data["cancellation_hours"] == 24


def test_manage_unknown_token(client):
    resp = client.get("/bookings/manage/does-not-exist")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Booking not found"


class TestCancel:
    def test_cancel_outside_window(self, client, venue, service):
        # booking at T+26h with a 24h window
        token = _create(client, venue, service).json()["data"]["booking_token"]

        resp = client.post(f"/bookings/manage/{token}/cancel", json={"reason": "Plans changed"})

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["status"] == "cancelled"
        assert data["cancellation_reason"] == "Plans changed"
        assert data["cancelled_at"] is not None

    def test_cancel_without_body(self, client, venue, service):
        token = _create(client, venue, service).json()["data"]["booking_token"]

        resp = client.post(f"/bookings/manage/{token}/cancel")

        assert resp.status_code == 200
        assert resp.json()["data"]["cancellation_reason"] is None

    def test_cancel_inside_window(self, client, clock, venue, service):
        token = _create(client, venue, service).json()["data"]["booking_token"]
        clock.now = datetime(2025, 6, 2, 14, 0)  # T+20h

        resp = client.post(f"/bookings/manage/{token}/cancel")

        assert resp.status_code == 422
        body = resp.json()
        assert body["error"]["kind"] == "policy_cancellation_window"
        assert body["error"]["threshold_hours"] == 24
        assert body["error"]["remaining_hours"] == 20
        assert body["message"] == (
            "Cancellation must be made at least 24 hours in advance. Only 20 hours remaining."
        )
        assert client.get(f"/bookings/manage/{token}").json()["data"]["status"] == "pending"

    def test_cancel_twice(self, client, venue, service):
        token = _create(client, venue, service).json()["data"]["booking_token"]
        client.post(f"/bookings/manage/{token}/cancel")

        resp = client.post(f"/bookings/manage/{token}/cancel")

        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "already_cancelled"

    def test_cancel_completed(self, client, admin_headers, venue, service):
        data = _create(client, venue, service).json()["data"]
        for status in ("confirmed", "completed"):
            client.patch(
                f"/admin/bookings/{data['id']}/status", json={"status": status}, headers=admin_headers
            )

        resp = client.post(f"/bookings/manage/{data['booking_token']}/cancel")

        assert resp.status_code == 409
        assert resp.json()["message"] == "Cannot cancel completed booking"

    def test_cancel_then_rebook(self, client, venue, service):
        token = _create(client, venue, service).json()["data"]["booking_token"]
        client.post(f"/bookings/manage/{token}/cancel")

        assert _create(client, venue, service).status_code == 201


def test_request_id_header_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert resp.json() == {"status": "ok"}
    assert resp.headers["X-Request-ID"] == "abc123"
