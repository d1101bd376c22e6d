"""HTTP tests for the API routers."""
import pytest
from fastapi.testclient import TestClient

from booking.service import SchedulingService
from conftest import TODAY
from dependencies import get_repository, get_scheduling_service
from main import app


@pytest.fixture
def client(repository):
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_scheduling_service] = lambda: SchedulingService(repository, today=lambda: TODAY)
    yield TestClient(app)
    app.dependency_overrides.clear()


def booking_body(**overrides):
    body = {
        "doctor_id": "dr-a",
        "date": "2026-10-19",
        "time": "08:00",
        "patient": {"name": "Patient X", "birth_date": "1990-01-01", "city": "Recife", "phone": "81 3333-0000"},
    }
    body.update(overrides)
    return body


class TestBookingRoutes:
    def test_dates(self, client):
        response = client.get("/api/booking/dates", params={"specialty_id": "cardio"})

        assert response.status_code == 200
        assert response.json() == ["2026-10-19", "2026-10-26", "2026-11-02"]

    def test_slots(self, client):
        response = client.get("/api/booking/slots", params={"doctor_id": "dr-a", "date": "2026-10-19"})

        assert response.status_code == 200
        assert [(s["time"], s["available"], s["doctor_name"]) for s in response.json()] == [
            ("08:00", True, "Dr. A"),
            ("09:00", True, "Dr. A"),
        ]

    def test_context_must_be_exactly_one(self, client):
        both = client.get("/api/booking/dates", params={"doctor_id": "dr-a", "specialty_id": "cardio"})
        neither = client.get("/api/booking/dates")

        assert both.status_code == 422
        assert neither.status_code == 422

    def test_unknown_doctor(self, client):
        response = client.get("/api/booking/slots", params={"doctor_id": "ghost", "date": "2026-10-19"})

        assert response.status_code == 404

    def test_book_then_conflict(self, client):
        created = client.post("/api/booking/", json=booking_body())
        again = client.post("/api/booking/", json=booking_body())

        assert created.status_code == 201
        assert created.json()["status"] == "scheduled"
        assert again.status_code == 409
        assert again.json()["detail"]["error"] == "SlotUnavailableError"
        assert "retry" in again.json()["detail"]

        slots = client.get("/api/booking/slots", params={"doctor_id": "dr-a", "date": "2026-10-19"}).json()
        assert [(s["time"], s["available"]) for s in slots] == [("08:00", False), ("09:00", True)]

    def test_missing_patient_field(self, client):
        body = booking_body(patient={"name": "Patient X", "city": "Recife"})

        response = client.post("/api/booking/", json=body)

        assert response.status_code == 422
        assert response.json()["detail"]["fields"] == ["birth_date", "phone"]

    def test_store_down(self, client, repository):
        repository.online = False

        response = client.post("/api/booking/", json=booking_body())

        assert response.status_code == 503


class TestAdminRoutes:
    def test_invalid_schedule_rejected(self, client, repository):
        body = {
            "name": "Dr. Night",
            "license_number": "CRM/SP 1",
            "specialty_id": "cardio",
            "working_hours": [{"day": "monday", "start_time": "17:00", "end_time": "08:00", "interval_minutes": 30}],
        }

        response = client.post("/api/doctor/", json=body)

        assert response.status_code == 422
        assert response.json()["detail"]["error"] == "InvalidScheduleError"
        assert len(repository.doctors) == 1

    def test_doctor_crud(self, client):
        body = {
            "name": "Dr. B",
            "license_number": "CRM/SP 2",
            "specialty_id": "cardio",
            "insurance_ids": ["sus"],
            "working_hours": [{"day": "tuesday", "start_time": "08:00", "end_time": "12:00"}],
        }
        created = client.post("/api/doctor/", json=body).json()

        listed = client.get("/api/doctor/", params={"specialty_id": "cardio"}).json()
        body["working_hours"] = []
        updated = client.put(f"/api/doctor/{created['id']}", json=body).json()
        deleted = client.delete(f"/api/doctor/{created['id']}")

        assert {d["name"] for d in listed} == {"Dr. A", "Dr. B"}
        assert updated["working_hours"] == []
        assert deleted.status_code == 200
        assert client.get(f"/api/doctor/{created['id']}").status_code == 404

    def test_specialty_and_insurance(self, client):
        specialty = client.post("/api/specialty/", json={"name": "Neurology"})
        insurance = client.post("/api/insurance/", json={"name": "Amil", "type": "private"})
        in_use = client.delete("/api/specialty/cardio")

        assert specialty.status_code == 201
        assert insurance.json()["type"] == "private"
        assert in_use.status_code == 409

    def test_appointment_status_changes(self, client):
        booked = client.post("/api/booking/", json=booking_body()).json()

        cancelled = client.put(f"/api/appointment/{booked['id']}/cancel")
        completed = client.put(f"/api/appointment/{booked['id']}/complete")
        listing = client.get("/api/appointment/", params={"status": "cancelled", "date": "2026-10-19"})
        summary = client.get("/api/appointment/summary").json()

        assert cancelled.json()["status"] == "cancelled"
        assert completed.status_code == 409
        assert [a["id"] for a in listing.json()] == [booked["id"]]
        assert summary["total"] == 1
        assert summary["by_status"]["cancelled"] == 1

    def test_status(self, client, repository):
        assert client.get("/api/admin/status").json() == {"database": "connected", "offline_mode": False}

        repository.online = False

        assert client.get("/api/admin/status").json()["database"] == "disconnected"
