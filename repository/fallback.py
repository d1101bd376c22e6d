"""Read-only degradation to a local snapshot when the main store is down."""
import logging
from typing import List, Optional

from repository.base import ClinicRepository
from schemas.appointment import Appointment, AppointmentCreate, AppointmentFilter, AppointmentStatus, Patient
from schemas.doctor import Doctor, DoctorCreate
from schemas.insurance import Insurance, InsuranceCreate
from schemas.specialty import Specialty, SpecialtyCreate
from scheduling.errors import PersistenceUnavailableError

logger = logging.getLogger(__name__)


class FallbackRepository(ClinicRepository):
    """Serve reads from ``snapshot`` while ``primary`` is unreachable.

    Writes always go to ``primary`` and fail loudly when it is down; a booking
    or an admin edit is never stored only in the snapshot.
    """

    def __init__(self, primary: ClinicRepository, snapshot: ClinicRepository):
        self.primary = primary
        self.snapshot = snapshot
        self.degraded = False

    async def _read(self, name: str, *args, **kwargs):
        try:
            result = await getattr(self.primary, name)(*args, **kwargs)
        except PersistenceUnavailableError as e:
            if not self.degraded:
                logger.warning(f"Primary store unavailable, serving reads from offline snapshot: {e}")
            self.degraded = True
            return await getattr(self.snapshot, name)(*args, **kwargs)
        if self.degraded:
            logger.info("Primary store reachable again")
            self.degraded = False
        return result

    async def list_specialties(self) -> List[Specialty]:
        return await self._read("list_specialties")

    async def get_specialty(self, id: str) -> Specialty:
        return await self._read("get_specialty", id)

    async def create_specialty(self, data: SpecialtyCreate) -> Specialty:
        return await self.primary.create_specialty(data)

    async def update_specialty(self, id: str, data: SpecialtyCreate) -> Specialty:
        return await self.primary.update_specialty(id, data)

    async def delete_specialty(self, id: str) -> None:
        await self.primary.delete_specialty(id)

    async def list_insurances(self) -> List[Insurance]:
        return await self._read("list_insurances")

    async def get_insurance(self, id: str) -> Insurance:
        return await self._read("get_insurance", id)

    async def create_insurance(self, data: InsuranceCreate) -> Insurance:
        return await self.primary.create_insurance(data)

    async def update_insurance(self, id: str, data: InsuranceCreate) -> Insurance:
        return await self.primary.update_insurance(id, data)

    async def delete_insurance(self, id: str) -> None:
        await self.primary.delete_insurance(id)

    async def list_doctors(self, specialty_id: Optional[str] = None) -> List[Doctor]:
        return await self._read("list_doctors", specialty_id)

    async def get_doctor(self, id: str) -> Doctor:
        return await self._read("get_doctor", id)

    async def create_doctor(self, data: DoctorCreate) -> Doctor:
        return await self.primary.create_doctor(data)

    async def update_doctor(self, id: str, data: DoctorCreate) -> Doctor:
        return await self.primary.update_doctor(id, data)

    async def delete_doctor(self, id: str) -> None:
        await self.primary.delete_doctor(id)

    async def list_appointments(self, filter: Optional[AppointmentFilter] = None) -> List[Appointment]:
        return await self._read("list_appointments", filter)

    async def get_appointment(self, id: str) -> Appointment:
        return await self._read("get_appointment", id)

    async def create_appointment(self, data: AppointmentCreate) -> Appointment:
        return await self.primary.create_appointment(data)

    async def update_appointment_status(self, id: str, status: AppointmentStatus) -> Appointment:
        return await self.primary.update_appointment_status(id, status)

    async def create_patient(self, patient: Patient) -> str:
        return await self.primary.create_patient(patient)

    async def ping(self) -> bool:
        return await self.primary.ping()
