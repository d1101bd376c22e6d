"""Back-office operations: catalog maintenance and appointment follow-up."""
import logging
from collections import Counter
from typing import List, Optional

from repository.base import ClinicRepository
from schemas.appointment import Appointment, AppointmentFilter, AppointmentStatus, AppointmentSummary
from schemas.doctor import Doctor, DoctorCreate
from schemas.insurance import Insurance, InsuranceCreate
from schemas.specialty import Specialty, SpecialtyCreate
from scheduling.errors import ConflictError, InvalidStatusTransitionError, NotFoundError, ValidationError
from scheduling.slots import validate_schedule

logger = logging.getLogger(__name__)


class ClinicAdmin:
    def __init__(self, repository: ClinicRepository):
        self.repository = repository

    # specialties
    async def list_specialties(self) -> List[Specialty]:
        return await self.repository.list_specialties()

    async def create_specialty(self, data: SpecialtyCreate) -> Specialty:
        specialty = await self.repository.create_specialty(data)
        logger.info(f"Specialty created: {specialty.id} ({specialty.name})")
        return specialty

    async def update_specialty(self, id: str, data: SpecialtyCreate) -> Specialty:
        return await self.repository.update_specialty(id, data)

    async def delete_specialty(self, id: str) -> None:
        doctors = await self.repository.list_doctors(specialty_id=id)
        if doctors:
            raise ConflictError(f"Specialty {id} still has {len(doctors)} doctor(s)")
        await self.repository.delete_specialty(id)
        logger.info(f"Specialty deleted: {id}")

    # insurances
    async def list_insurances(self) -> List[Insurance]:
        return await self.repository.list_insurances()

    async def create_insurance(self, data: InsuranceCreate) -> Insurance:
        insurance = await self.repository.create_insurance(data)
        logger.info(f"Insurance created: {insurance.id} ({insurance.name})")
        return insurance

    async def update_insurance(self, id: str, data: InsuranceCreate) -> Insurance:
        return await self.repository.update_insurance(id, data)

    async def delete_insurance(self, id: str) -> None:
        await self.repository.delete_insurance(id)
        logger.info(f"Insurance deleted: {id}")

    # doctors
    async def list_doctors(self, specialty_id: Optional[str] = None) -> List[Doctor]:
        return await self.repository.list_doctors(specialty_id=specialty_id)

    async def get_doctor(self, id: str) -> Doctor:
        return await self.repository.get_doctor(id)

    async def _check_doctor(self, data: DoctorCreate, doctor_id: Optional[str] = None):
        # Schedule first: a bad template must never be stored.
        validate_schedule(data.working_hours)
        try:
            await self.repository.get_specialty(data.specialty_id)
        except NotFoundError:
            raise ValidationError(f"Unknown specialty {data.specialty_id}", fields=["specialty_id"])
        known = {i.id for i in await self.repository.list_insurances()}
        unknown = [i for i in data.insurance_ids if i not in known]
        if unknown:
            raise ValidationError(f"Unknown insurance(s): {', '.join(unknown)}", fields=["insurance_ids"])
        for doctor in await self.repository.list_doctors():
            if doctor.license_number == data.license_number and doctor.id != doctor_id:
                raise ConflictError(f"A doctor with license {data.license_number} already exists")

    async def create_doctor(self, data: DoctorCreate) -> Doctor:
        await self._check_doctor(data)
        doctor = await self.repository.create_doctor(data)
        logger.info(f"Doctor created: {doctor.id} ({doctor.name})")
        return doctor

    async def update_doctor(self, id: str, data: DoctorCreate) -> Doctor:
        await self.repository.get_doctor(id)
        await self._check_doctor(data, doctor_id=id)
        doctor = await self.repository.update_doctor(id, data)
        logger.info(f"Doctor updated: {doctor.id} ({doctor.name})")
        return doctor

    async def delete_doctor(self, id: str) -> None:
        await self.repository.delete_doctor(id)
        logger.info(f"Doctor deleted: {id}")

    # appointments
    async def list_appointments(self, filter: Optional[AppointmentFilter] = None) -> List[Appointment]:
        return await self.repository.list_appointments(filter)

    async def _transition(self, id: str, status: AppointmentStatus) -> Appointment:
        appointment = await self.repository.get_appointment(id)
        if not appointment.status.can_become(status):
            raise InvalidStatusTransitionError(
                f"Appointment {id} is {appointment.status.value} and cannot become {status.value}"
            )
        updated = await self.repository.update_appointment_status(id, status)
        logger.info(f"Appointment {id} marked {status.value}")
        return updated

    async def complete_appointment(self, id: str) -> Appointment:
        return await self._transition(id, AppointmentStatus.COMPLETED)

    async def cancel_appointment(self, id: str) -> Appointment:
        return await self._transition(id, AppointmentStatus.CANCELLED)

    async def appointment_summary(self) -> AppointmentSummary:
        appointments = await self.repository.list_appointments()
        counts = Counter(a.status for a in appointments)
        return AppointmentSummary(
            total=len(appointments),
            by_status={status: counts.get(status, 0) for status in AppointmentStatus},
        )
