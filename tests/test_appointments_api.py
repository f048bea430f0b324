from conftest import auth_headers, register


def book(client, token, doctor_id="1", slot_id="1-2030-01-15-10"):
    return client.post(
        "/api/appointments",
        json={"doctorId": doctor_id, "timeSlotId": slot_id},
        headers=auth_headers(token),
    )


def test_doctors_require_session(client):
    assert client.get("/api/doctors").status_code == 401


def test_list_and_get_doctors(client):
    token = register(client)
    resp = client.get("/api/doctors", headers=auth_headers(token))
    assert resp.status_code == 200
    assert [d["name"] for d in resp.json()] == [
        "Dr. Sarah Johnson",
        "Dr. Michael Chen",
        "Dr. Emily Rodriguez",
        "Dr. James Wilson",
    ]

    one = client.get("/api/doctors/3", headers=auth_headers(token))
    assert one.status_code == 200
    assert one.json()["specialty"] == "Pediatrics"

    missing = client.get("/api/doctors/99", headers=auth_headers(token))
    assert missing.status_code == 404
    assert missing.json()["error"] == "NOT_FOUND"


def test_time_slots(client):
    token = register(client)
    resp = client.get("/api/doctors/2/slots", params={"date": "2030-01-15"}, headers=auth_headers(token))
    assert resp.status_code == 200
    slots = resp.json()
    assert len(slots) == 8
    assert slots[0] == {
        "id": "2-2030-01-15-9",
        "doctorId": "2",
        "date": "2030-01-15",
        "startTime": "09:00",
        "endTime": "10:00",
        "available": slots[0]["available"],
    }
    assert isinstance(slots[0]["available"], bool)

    bad = client.get("/api/doctors/2/slots", params={"date": "Jan 15"}, headers=auth_headers(token))
    assert bad.status_code == 400


def test_book_and_list(client):
    token = register(client)
    resp = book(client, token)
    assert resp.status_code == 201
    appt = resp.json()
    assert appt["doctorName"] == "Dr. Sarah Johnson"
    assert appt["dateTime"] == "2030-01-15 10:00"
    assert appt["status"] == "scheduled"
    assert appt["paymentStatus"] == "pending"
    assert appt["consultationId"] is None

    listed = client.get("/api/appointments", headers=auth_headers(token)).json()
    assert [a["id"] for a in listed] == [appt["id"]]
    fetched = client.get(f"/api/appointments/{appt['id']}", headers=auth_headers(token))
    assert fetched.json() == appt


def test_book_with_mismatched_slot(client):
    token = register(client)
    resp = book(client, token, doctor_id="1", slot_id="2-2030-01-15-10")
    assert resp.status_code == 400
    assert client.get("/api/appointments", headers=auth_headers(token)).json() == []


def test_book_missing_fields(client):
    token = register(client)
    resp = client.post("/api/appointments", json={"doctorId": "1"}, headers=auth_headers(token))
    assert resp.status_code == 400
    assert resp.json()["error"] == "VALIDATION_ERROR"


def test_cancel_and_pay(client):
    token = register(client)
    first = book(client, token).json()
    second = book(client, token, "4", "4-2030-01-16-15").json()

    cancelled = client.put(f"/api/appointments/{first['id']}/cancel", headers=auth_headers(token))
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    again = client.put(f"/api/appointments/{first['id']}/cancel", headers=auth_headers(token))
    assert again.status_code == 409
    assert again.json()["error"] == "INVALID_TRANSITION"

    paid = client.put(f"/api/appointments/{second['id']}/payment", headers=auth_headers(token))
    assert paid.status_code == 200
    assert paid.json()["paymentStatus"] == "completed"
    assert paid.json()["consultationId"].startswith("cons-")
    assert client.put(f"/api/appointments/{second['id']}/payment", headers=auth_headers(token)).status_code == 409

    done = client.put(f"/api/appointments/{second['id']}/complete", headers=auth_headers(token))
    assert done.status_code == 200
    assert done.json()["status"] == "completed"


def test_appointments_belong_to_the_session(client):
    alice = register(client, "alice")
    bob = register(client, "bob")
    appt = book(client, alice).json()

    assert client.get("/api/appointments", headers=auth_headers(bob)).json() == []
    assert client.get(f"/api/appointments/{appt['id']}", headers=auth_headers(bob)).status_code == 404
    assert client.put(f"/api/appointments/{appt['id']}/cancel", headers=auth_headers(bob)).status_code == 404


def test_logout_discards_bookings(client):
    token = register(client)
    book(client, token)
    client.post("/api/auth/logout", headers=auth_headers(token))

    fresh = client.post("/api/auth/login", json={"username": "alice", "password": "secret123"}).json()["token"]
    assert client.get("/api/appointments", headers=auth_headers(fresh)).json() == []
