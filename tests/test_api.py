"""
End-to-end API tests against the memory backend.
"""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from clinicslots.app import create_app
from clinicslots.core.config import reset_settings

NEXT_WEEK = (date.today() + timedelta(days=7)).isoformat()


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("DB_BACKEND", "memory")
    monkeypatch.setenv("BOOKING_RELEASE_RETRY_ENABLED", "false")
    monkeypatch.setenv("BOOKING_DEFAULT_CAPACITY", "2")
    reset_settings()
    with TestClient(create_app()) as test_client:
        yield test_client
    reset_settings()


def _doctor(client, name="Dr. Li", department_name=None) -> str:
    response = client.post("/doctors", json={"name": name, "department_name": department_name})
    assert response.status_code == 201
    return response.json()["data"]["doctor_id"]


def _patient(client, suffix: int = 1) -> str:
    response = client.post(
        "/patients",
        json={"name": "Zhang San", "identity_number": f"1101011990010{suffix:04d}X", "phone": "13800138000"},
    )
    assert response.status_code == 201
    return response.json()["data"]["patient_id"]


def _schedule(client, doctor_id: str, **overrides) -> dict:
    body = {
        "doctor_id": doctor_id,
        "schedule_date": NEXT_WEEK,
        "start_time": "09:00",
        "end_time": "12:00",
        "slot_category": "morning",
    }
    body.update(overrides)
    response = client.post("/schedules", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_booking_flow(client):
    doctor_id = _doctor(client)
    schedule = _schedule(client, doctor_id)
    assert schedule["capacity"] == 2
    assert schedule["status"] == "normal"

    first = client.post("/reservations", json={"patient_id": _patient(client, 1), "schedule_id": schedule["schedule_id"]})
    second = client.post("/reservations", json={"patient_id": _patient(client, 2), "schedule_id": schedule["schedule_id"]})
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["data"]["status"] == "booked"

    full = client.post("/reservations", json={"patient_id": _patient(client, 3), "schedule_id": schedule["schedule_id"]})
    assert full.status_code == 409
    assert full.json()["error"] == "SCHEDULE_FULL"

    occupancy = client.get(f"/schedules/{schedule['schedule_id']}/occupancy").json()["data"]
    assert occupancy == {
        "schedule_id": schedule["schedule_id"],
        "capacity": 2,
        "booked_count": 2,
        "remaining": 0,
        "status": "full",
    }
    assert client.get(f"/doctors/{doctor_id}/free-slots").json()["data"] == []

    reservation_id = first.json()["data"]["reservation_id"]
    cancelled = client.post(f"/reservations/{reservation_id}/cancel")
    assert cancelled.status_code == 200
    assert cancelled.json()["data"]["status"] == "cancelled"
    assert cancelled.json()["data"]["cancelled_at"] is not None

    again = client.post(f"/reservations/{reservation_id}/cancel")
    assert again.status_code == 409
    assert again.json()["error"] == "NOT_BOOKED"

    slots = client.get(f"/doctors/{doctor_id}/free-slots").json()["data"]
    assert [s["schedule_id"] for s in slots] == [schedule["schedule_id"]]
    assert slots[0]["remaining"] == 1

    verify = client.get(f"/schedules/{schedule['schedule_id']}/verify").json()["data"]
    assert verify["consistent"] is True
    assert verify["booked_count"] == 1


def test_complete_and_history(client):
    doctor_id = _doctor(client)
    schedule = _schedule(client, doctor_id, capacity=5)
    patient_id = _patient(client)
    booked = client.post("/reservations", json={"patient_id": patient_id, "schedule_id": schedule["schedule_id"]})
    reservation_id = booked.json()["data"]["reservation_id"]

    completed = client.post(f"/reservations/{reservation_id}/complete")
    assert completed.status_code == 200
    assert completed.json()["data"]["status"] == "completed"

    fetched = client.get(f"/reservations/{reservation_id}").json()["data"]
    assert fetched["completed_at"] is not None

    verify = client.get(f"/schedules/{schedule['schedule_id']}/verify")
    assert verify.status_code == 200
    assert verify.json()["data"]["booked_count"] == 1
    assert verify.json()["data"]["completed_reservations"] == 1

    history = client.get(f"/patients/{patient_id}/reservations").json()["data"]
    assert [r["reservation_id"] for r in history] == [reservation_id]
    assert client.get(f"/patients/{patient_id}/reservations", params={"status": "booked"}).json()["data"] == []

    agenda = client.get(f"/doctors/{doctor_id}/agenda", params={"on_date": NEXT_WEEK}).json()["data"]
    assert agenda == []


def test_withdraw_schedule(client):
    doctor_id = _doctor(client)
    schedule = _schedule(client, doctor_id)
    patient_id = _patient(client)
    client.post("/reservations", json={"patient_id": patient_id, "schedule_id": schedule["schedule_id"]})

    response = client.post(f"/schedules/{schedule['schedule_id']}/withdraw")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["schedule"]["status"] == "withdrawn"
    assert data["schedule"]["booked_count"] == 0
    assert [r["status"] for r in data["cancelled_reservations"]] == ["cancelled"]

    rejected = client.post("/reservations", json={"patient_id": patient_id, "schedule_id": schedule["schedule_id"]})
    assert rejected.status_code == 409
    assert rejected.json()["error"] == "SCHEDULE_WITHDRAWN"


def test_adjust_capacity(client):
    schedule = _schedule(client, _doctor(client), capacity=1)
    client.post("/reservations", json={"patient_id": _patient(client), "schedule_id": schedule["schedule_id"]})

    widened = client.patch(f"/schedules/{schedule['schedule_id']}/capacity", json={"capacity": 3})
    assert widened.status_code == 200
    assert widened.json()["data"]["status"] == "normal"

    too_small = client.patch(f"/schedules/{schedule['schedule_id']}/capacity", json={"capacity": 0})
    assert too_small.status_code == 422
    assert too_small.json()["error"] == "INVALID_CAPACITY"


@pytest.mark.parametrize(
    "overrides,error",
    [
        ({"end_time": "08:00"}, "INVALID_WINDOW"),
        ({"schedule_date": (date.today() - timedelta(days=1)).isoformat()}, "PAST_DATE"),
        ({"capacity": 0}, "INVALID_CAPACITY"),
        ({"slot_category": "midnight"}, "INVALID_INPUT"),
    ],
)
def test_create_schedule_rejections(client, overrides, error):
    body = {
        "doctor_id": _doctor(client),
        "schedule_date": NEXT_WEEK,
        "start_time": "09:00",
        "end_time": "12:00",
        "slot_category": "morning",
    }
    body.update(overrides)

    response = client.post("/schedules", json=body)

    assert response.status_code == 422
    assert response.json()["success"] is False
    assert response.json()["error"] == error


def test_unknown_records_are_404(client):
    assert client.get("/schedules/0000000001").status_code == 404
    assert client.get("/reservations/000000000001").json()["error"] == "RESERVATION_NOT_FOUND"
    assert client.get("/doctors/00000001/free-slots").json()["error"] == "DOCTOR_NOT_FOUND"

    schedule = _schedule(client, _doctor(client))
    response = client.post("/reservations", json={"patient_id": "0000000001", "schedule_id": schedule["schedule_id"]})
    assert response.status_code == 404
    assert response.json()["error"] == "PATIENT_NOT_FOUND"


def test_malformed_identifiers_are_rejected(client):
    response = client.get("/schedules/abc")
    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_IDENTIFIER"

    response = client.post("/reservations", json={"patient_id": "12", "schedule_id": "0000000001"})
    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"


def test_patient_registration_validation(client):
    response = client.post(
        "/patients", json={"name": "Wang Wu", "identity_number": "12345", "phone": "13800138000"}
    )
    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"


def test_department_membership(client):
    assert client.post("/departments", json={"name": "Cardiology"}).status_code == 201
    assert client.post("/departments", json={"name": "Cardiology"}).json()["error"] == "DUPLICATE_DEPARTMENT"

    first = _doctor(client, "Dr. A")
    second = _doctor(client, "Dr. B", department_name="Cardiology")
    joined = client.put(f"/departments/Cardiology/doctors/{first}")
    assert joined.status_code == 200
    assert joined.json()["data"]["department_name"] == "Cardiology"

    members = client.get("/departments/Cardiology/doctors").json()["data"]
    assert [d["doctor_id"] for d in members] == [second, first]

    _schedule(client, first)
    slots = client.get("/departments/Cardiology/free-slots").json()["data"]
    assert [s["doctor_id"] for s in slots] == [first]

    assert client.delete(f"/departments/Cardiology/doctors/{first}").status_code == 200
    assert client.get("/departments/Unknown/doctors").status_code == 404
