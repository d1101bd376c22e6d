"""Demo data served while the database is unreachable."""
from repository.memory import InMemoryRepository
from schemas.doctor import Doctor, WorkingHoursEntry
from schemas.insurance import Insurance, InsuranceType
from schemas.specialty import Specialty
from scheduling.weekday import Weekday

WEEKDAYS = [Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY]


def snapshot_id(n: int) -> str:
    # ObjectId-shaped, so MongoRepository looks these up instead of rejecting them
    return f"{n:024x}"


def demo_snapshot() -> InMemoryRepository:
    specialties = [
        Specialty(id=snapshot_id(1), name="Cardiologia", description="Especialidade focada no coração e sistema circulatório"),
        Specialty(id=snapshot_id(2), name="Dermatologia", description="Cuidados com a pele, cabelos e unhas"),
        Specialty(id=snapshot_id(3), name="Pediatria", description="Especialidade médica dedicada ao cuidado infantil"),
    ]
    insurances = [
        Insurance(id=snapshot_id(1), name="SUS", type=InsuranceType.PUBLIC),
        Insurance(id=snapshot_id(2), name="Unimed", type=InsuranceType.PRIVATE),
        Insurance(id=snapshot_id(3), name="Bradesco Saúde", type=InsuranceType.PRIVATE),
        Insurance(id=snapshot_id(4), name="Amil", type=InsuranceType.PRIVATE),
    ]
    doctors = [
        Doctor(
            id=snapshot_id(1),
            name="Dr. João Silva",
            license_number="CRM/SP 123456",
            specialty_id=snapshot_id(1),
            insurance_ids=[snapshot_id(1), snapshot_id(2)],
            working_hours=[
                WorkingHoursEntry(day=day, start_time="08:00", end_time="17:00", interval_minutes=30)
                for day in WEEKDAYS
            ],
        ),
    ]
    return InMemoryRepository(specialties=specialties, doctors=doctors, insurances=insurances)
