"""Interface of the data store the scheduling core talks to.

The core never imports Beanie or Motor. It receives a ``ClinicRepository``
when it is built; ``MongoRepository`` is the production store and
``InMemoryRepository`` is the fake used by tests and the offline snapshot.

Implementations must:
  * raise ``NotFoundError`` for unknown ids,
  * raise ``SlotUnavailableError`` from ``create_appointment`` when a
    scheduled appointment already holds the same (doctor, date, time),
  * raise ``PersistenceUnavailableError`` when the store cannot be reached,
  * make a created appointment visible to the next ``list_appointments``.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from schemas.appointment import Appointment, AppointmentCreate, AppointmentFilter, AppointmentStatus, Patient
from schemas.doctor import Doctor, DoctorCreate
from schemas.insurance import Insurance, InsuranceCreate
from schemas.specialty import Specialty, SpecialtyCreate


class ClinicRepository(ABC):
    # specialties
    @abstractmethod
    async def list_specialties(self) -> List[Specialty]: ...

    @abstractmethod
    async def get_specialty(self, id: str) -> Specialty: ...

    @abstractmethod
    async def create_specialty(self, data: SpecialtyCreate) -> Specialty: ...

    @abstractmethod
    async def update_specialty(self, id: str, data: SpecialtyCreate) -> Specialty: ...

    @abstractmethod
    async def delete_specialty(self, id: str) -> None: ...

    # insurances
    @abstractmethod
    async def list_insurances(self) -> List[Insurance]: ...

    @abstractmethod
    async def get_insurance(self, id: str) -> Insurance: ...

    @abstractmethod
    async def create_insurance(self, data: InsuranceCreate) -> Insurance: ...

    @abstractmethod
    async def update_insurance(self, id: str, data: InsuranceCreate) -> Insurance: ...

    @abstractmethod
    async def delete_insurance(self, id: str) -> None:
        """Delete the plan and drop it from every doctor that accepted it."""

    # doctors
    @abstractmethod
    async def list_doctors(self, specialty_id: Optional[str] = None) -> List[Doctor]: ...

    @abstractmethod
    async def get_doctor(self, id: str) -> Doctor: ...

    @abstractmethod
    async def create_doctor(self, data: DoctorCreate) -> Doctor: ...

    @abstractmethod
    async def update_doctor(self, id: str, data: DoctorCreate) -> Doctor:
        """Replace the doctor, including working hours and insurances, as a whole."""

    @abstractmethod
    async def delete_doctor(self, id: str) -> None: ...

    # appointments and patients
    @abstractmethod
    async def list_appointments(self, filter: Optional[AppointmentFilter] = None) -> List[Appointment]: ...

    @abstractmethod
    async def get_appointment(self, id: str) -> Appointment: ...

    @abstractmethod
    async def create_appointment(self, data: AppointmentCreate) -> Appointment: ...

    @abstractmethod
    async def update_appointment_status(self, id: str, status: AppointmentStatus) -> Appointment: ...

    @abstractmethod
    async def create_patient(self, patient: Patient) -> str:
        """Store the patient and return its id."""

    @abstractmethod
    async def ping(self) -> bool:
        """True when the store answers."""
