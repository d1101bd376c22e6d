"""Dict-backed repository with the same rules as the MongoDB one."""
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from repository.base import ClinicRepository
from schemas.appointment import Appointment, AppointmentCreate, AppointmentFilter, AppointmentStatus, Patient
from schemas.doctor import Doctor, DoctorCreate
from schemas.insurance import Insurance, InsuranceCreate
from schemas.specialty import Specialty, SpecialtyCreate
from scheduling.errors import ConflictError, NotFoundError, PersistenceUnavailableError, SlotUnavailableError


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryRepository(ClinicRepository):
    """Keeps everything in dicts; returns copies so callers cannot mutate stored rows.

    Setting ``online = False`` makes every call raise
    ``PersistenceUnavailableError``, which is how an outage is simulated.
    """

    def __init__(
        self,
        specialties: Iterable[Specialty] = (),
        doctors: Iterable[Doctor] = (),
        insurances: Iterable[Insurance] = (),
        appointments: Iterable[Appointment] = (),
    ):
        self.specialties: Dict[str, Specialty] = {s.id: s for s in specialties}
        self.doctors: Dict[str, Doctor] = {d.id: d for d in doctors}
        self.insurances: Dict[str, Insurance] = {i.id: i for i in insurances}
        self.appointments: Dict[str, Appointment] = {a.id: a for a in appointments}
        self.patients: Dict[str, Patient] = {}
        self.online = True

    def _check_online(self):
        if not self.online:
            raise PersistenceUnavailableError("In-memory store is offline")

    @staticmethod
    def _get(table: dict, kind: str, id: str):
        if id not in table:
            raise NotFoundError(kind, id)
        return table[id].model_copy(deep=True)

    # specialties
    async def list_specialties(self) -> List[Specialty]:
        self._check_online()
        return [s.model_copy(deep=True) for s in self.specialties.values()]

    async def get_specialty(self, id: str) -> Specialty:
        self._check_online()
        return self._get(self.specialties, "Specialty", id)

    async def create_specialty(self, data: SpecialtyCreate) -> Specialty:
        self._check_online()
        specialty = Specialty(id=_new_id(), **data.model_dump())
        self.specialties[specialty.id] = specialty
        return specialty.model_copy(deep=True)

    async def update_specialty(self, id: str, data: SpecialtyCreate) -> Specialty:
        current = await self.get_specialty(id)
        specialty = current.model_copy(update=data.model_dump())
        self.specialties[id] = specialty
        return specialty.model_copy(deep=True)

    async def delete_specialty(self, id: str) -> None:
        self._check_online()
        if self.specialties.pop(id, None) is None:
            raise NotFoundError("Specialty", id)

    # insurances
    async def list_insurances(self) -> List[Insurance]:
        self._check_online()
        return [i.model_copy(deep=True) for i in self.insurances.values()]

    async def get_insurance(self, id: str) -> Insurance:
        self._check_online()
        return self._get(self.insurances, "Insurance", id)

    async def create_insurance(self, data: InsuranceCreate) -> Insurance:
        self._check_online()
        insurance = Insurance(id=_new_id(), **data.model_dump())
        self.insurances[insurance.id] = insurance
        return insurance.model_copy(deep=True)

    async def update_insurance(self, id: str, data: InsuranceCreate) -> Insurance:
        current = await self.get_insurance(id)
        insurance = current.model_copy(update=data.model_dump())
        self.insurances[id] = insurance
        return insurance.model_copy(deep=True)

    async def delete_insurance(self, id: str) -> None:
        self._check_online()
        if self.insurances.pop(id, None) is None:
            raise NotFoundError("Insurance", id)
        for doctor_id, doctor in self.doctors.items():
            if id in doctor.insurance_ids:
                remaining = [i for i in doctor.insurance_ids if i != id]
                self.doctors[doctor_id] = doctor.model_copy(update={"insurance_ids": remaining})

    # doctors
    async def list_doctors(self, specialty_id: Optional[str] = None) -> List[Doctor]:
        self._check_online()
        return [
            d.model_copy(deep=True)
            for d in self.doctors.values()
            if specialty_id is None or d.specialty_id == specialty_id
        ]

    async def get_doctor(self, id: str) -> Doctor:
        self._check_online()
        return self._get(self.doctors, "Doctor", id)

    def _check_license(self, data: DoctorCreate, doctor_id: Optional[str] = None):
        # mirrors the unique_license_number index
        for other in self.doctors.values():
            if other.id != doctor_id and other.license_number == data.license_number:
                raise ConflictError(f"A doctor with license {data.license_number} already exists")

    async def create_doctor(self, data: DoctorCreate) -> Doctor:
        self._check_online()
        self._check_license(data)
        doctor = Doctor(id=_new_id(), **data.model_dump())
        self.doctors[doctor.id] = doctor
        return doctor.model_copy(deep=True)

    async def update_doctor(self, id: str, data: DoctorCreate) -> Doctor:
        current = await self.get_doctor(id)
        self._check_license(data, doctor_id=id)
        doctor = Doctor(id=id, created_at=current.created_at, **data.model_dump())
        self.doctors[id] = doctor
        return doctor.model_copy(deep=True)

    async def delete_doctor(self, id: str) -> None:
        self._check_online()
        if self.doctors.pop(id, None) is None:
            raise NotFoundError("Doctor", id)

    # appointments and patients
    async def list_appointments(self, filter: Optional[AppointmentFilter] = None) -> List[Appointment]:
        self._check_online()
        found = [
            a.model_copy(deep=True)
            for a in self.appointments.values()
            if filter is None or filter.matches(a)
        ]
        return sorted(found, key=lambda a: (a.date, a.time))

    async def get_appointment(self, id: str) -> Appointment:
        self._check_online()
        return self._get(self.appointments, "Appointment", id)

    async def create_appointment(self, data: AppointmentCreate) -> Appointment:
        self._check_online()
        if data.status == AppointmentStatus.SCHEDULED and any(
            a.occupies(data.doctor_id, data.date, data.time) for a in self.appointments.values()
        ):
            raise SlotUnavailableError(data.doctor_id, data.date, data.time)
        appointment = Appointment(id=_new_id(), **data.model_dump())
        self.appointments[appointment.id] = appointment
        return appointment.model_copy(deep=True)

    async def update_appointment_status(self, id: str, status: AppointmentStatus) -> Appointment:
        current = await self.get_appointment(id)
        appointment = current.model_copy(update={"status": status, "updated_at": datetime.utcnow()})
        self.appointments[id] = appointment
        return appointment.model_copy(deep=True)

    async def create_patient(self, patient: Patient) -> str:
        self._check_online()
        patient_id = _new_id()
        self.patients[patient_id] = patient.model_copy(deep=True)
        return patient_id

    async def ping(self) -> bool:
        return self.online
