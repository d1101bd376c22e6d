"""Shared test fixtures."""
import datetime as dt

import pytest

from booking.service import SchedulingService
from repository.memory import InMemoryRepository
from schemas.appointment import Patient
from schemas.doctor import Doctor, WorkingHoursEntry
from schemas.insurance import Insurance, InsuranceType
from schemas.specialty import Specialty
from scheduling.weekday import Weekday

TODAY = dt.date(2026, 10, 14)  # Wednesday
NEXT_MONDAY = dt.date(2026, 10, 19)
NEXT_TUESDAY = dt.date(2026, 10, 20)


def make_doctor(id, name, hours, specialty_id="cardio", insurance_ids=("unimed",), license_number=None):
    """Build a doctor from (day, start, end, interval) tuples."""
    return Doctor(
        id=id,
        name=name,
        license_number=license_number or f"CRM/SP {id}",
        specialty_id=specialty_id,
        insurance_ids=list(insurance_ids),
        working_hours=[
            WorkingHoursEntry(day=day, start_time=start, end_time=end, interval_minutes=interval)
            for day, start, end, interval in hours
        ],
    )


@pytest.fixture
def dr_a() -> Doctor:
    return make_doctor("dr-a", "Dr. A", [(Weekday.MONDAY, "08:00", "10:00", 60)])


@pytest.fixture
def repository(dr_a) -> InMemoryRepository:
    """Cardiology with a single doctor working Monday mornings."""
    return InMemoryRepository(
        specialties=[
            Specialty(id="cardio", name="Cardiology"),
            Specialty(id="derma", name="Dermatology"),
        ],
        doctors=[dr_a],
        insurances=[
            Insurance(id="unimed", name="Unimed", type=InsuranceType.PRIVATE),
            Insurance(id="sus", name="SUS", type=InsuranceType.PUBLIC),
        ],
    )


@pytest.fixture
def service(repository) -> SchedulingService:
    return SchedulingService(repository, today=lambda: TODAY)


@pytest.fixture
def patient() -> Patient:
    return Patient(
        name="Maria Souza",
        birth_date="1985-04-12",
        city="Campinas",
        phone="+55 19 99999-0000",
        email="maria@example.com",
    )
