"""MongoDB repository on Beanie documents."""
import datetime as dt
import functools
import logging
from typing import List, Optional

from beanie import PydanticObjectId
from beanie.exceptions import CollectionWasNotInitialized
from bson import ObjectId
from pymongo.errors import ConnectionFailure, DuplicateKeyError

from models.appointment import AppointmentDocument
from models.doctor import DoctorDocument
from models.insurance import InsuranceDocument
from models.patient import PatientDocument
from models.specialty import SpecialtyDocument
from repository.base import ClinicRepository
from schemas.appointment import Appointment, AppointmentCreate, AppointmentFilter, AppointmentStatus, Patient
from schemas.doctor import Doctor, DoctorCreate
from schemas.insurance import Insurance, InsuranceCreate
from schemas.specialty import Specialty, SpecialtyCreate
from scheduling.errors import ConflictError, NotFoundError, PersistenceUnavailableError, SlotUnavailableError

logger = logging.getLogger(__name__)


def classify_errors(func):
    """Turn driver connection failures into PersistenceUnavailableError."""

    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        if self.client is None:
            raise PersistenceUnavailableError("MongoDB is not configured (MONGODB_URI is empty)")
        try:
            return await func(self, *args, **kwargs)
        except (ConnectionFailure, CollectionWasNotInitialized) as e:
            logger.error(f"MongoDB unavailable during {func.__name__}: {str(e)}")
            raise PersistenceUnavailableError(f"MongoDB unavailable: {str(e)}") from e

    return wrapper


def _object_id(kind: str, id: str) -> PydanticObjectId:
    if not ObjectId.is_valid(id):
        raise NotFoundError(kind, id)
    return PydanticObjectId(id)


def _dump(doc) -> dict:
    data = doc.model_dump(exclude={"id", "revision_id"})
    data["id"] = str(doc.id)
    return data


def _to_appointment(doc: AppointmentDocument) -> Appointment:
    data = _dump(doc)
    data["date"] = dt.date.fromisoformat(doc.date)
    return Appointment.model_validate(data)


class MongoRepository(ClinicRepository):
    def __init__(self, client):
        # client is an AsyncIOMotorClient, or None when no URI is configured
        self.client = client

    # specialties
    @classify_errors
    async def list_specialties(self) -> List[Specialty]:
        docs = await SpecialtyDocument.find_all().to_list()
        return [Specialty.model_validate(_dump(d)) for d in docs]

    async def _specialty_doc(self, id: str) -> SpecialtyDocument:
        doc = await SpecialtyDocument.get(_object_id("Specialty", id))
        if doc is None:
            raise NotFoundError("Specialty", id)
        return doc

    @classify_errors
    async def get_specialty(self, id: str) -> Specialty:
        return Specialty.model_validate(_dump(await self._specialty_doc(id)))

    @classify_errors
    async def create_specialty(self, data: SpecialtyCreate) -> Specialty:
        doc = SpecialtyDocument(**data.model_dump())
        await doc.insert()
        return Specialty.model_validate(_dump(doc))

    @classify_errors
    async def update_specialty(self, id: str, data: SpecialtyCreate) -> Specialty:
        doc = await self._specialty_doc(id)
        doc.name = data.name
        doc.description = data.description
        await doc.save()
        return Specialty.model_validate(_dump(doc))

    @classify_errors
    async def delete_specialty(self, id: str) -> None:
        doc = await self._specialty_doc(id)
        await doc.delete()

    # insurances
    @classify_errors
    async def list_insurances(self) -> List[Insurance]:
        docs = await InsuranceDocument.find_all().to_list()
        return [Insurance.model_validate(_dump(d)) for d in docs]

    async def _insurance_doc(self, id: str) -> InsuranceDocument:
        doc = await InsuranceDocument.get(_object_id("Insurance", id))
        if doc is None:
            raise NotFoundError("Insurance", id)
        return doc

    @classify_errors
    async def get_insurance(self, id: str) -> Insurance:
        return Insurance.model_validate(_dump(await self._insurance_doc(id)))

    @classify_errors
    async def create_insurance(self, data: InsuranceCreate) -> Insurance:
        doc = InsuranceDocument(**data.model_dump())
        await doc.insert()
        return Insurance.model_validate(_dump(doc))

    @classify_errors
    async def update_insurance(self, id: str, data: InsuranceCreate) -> Insurance:
        doc = await self._insurance_doc(id)
        doc.name = data.name
        doc.type = data.type
        await doc.save()
        return Insurance.model_validate(_dump(doc))

    @classify_errors
    async def delete_insurance(self, id: str) -> None:
        doc = await self._insurance_doc(id)
        await doc.delete()
        await DoctorDocument.find(DoctorDocument.insurance_ids == id).update({"$pull": {"insurance_ids": id}})

    # doctors
    @classify_errors
    async def list_doctors(self, specialty_id: Optional[str] = None) -> List[Doctor]:
        query = DoctorDocument.find_all() if specialty_id is None else DoctorDocument.find(
            DoctorDocument.specialty_id == specialty_id
        )
        docs = await query.to_list()
        return [Doctor.model_validate(_dump(d)) for d in docs]

    async def _doctor_doc(self, id: str) -> DoctorDocument:
        doc = await DoctorDocument.get(_object_id("Doctor", id))
        if doc is None:
            raise NotFoundError("Doctor", id)
        return doc

    @classify_errors
    async def get_doctor(self, id: str) -> Doctor:
        return Doctor.model_validate(_dump(await self._doctor_doc(id)))

    @classify_errors
    async def create_doctor(self, data: DoctorCreate) -> Doctor:
        doc = DoctorDocument(**data.model_dump())
        try:
            await doc.insert()
        except DuplicateKeyError as e:
            raise ConflictError(f"A doctor with license {data.license_number} already exists") from e
        return Doctor.model_validate(_dump(doc))

    @classify_errors
    async def update_doctor(self, id: str, data: DoctorCreate) -> Doctor:
        doc = await self._doctor_doc(id)
        replacement = DoctorDocument(id=doc.id, created_at=doc.created_at, **data.model_dump())
        try:
            await replacement.replace()
        except DuplicateKeyError as e:
            raise ConflictError(f"A doctor with license {data.license_number} already exists") from e
        return Doctor.model_validate(_dump(replacement))

    @classify_errors
    async def delete_doctor(self, id: str) -> None:
        doc = await self._doctor_doc(id)
        await doc.delete()

    # appointments and patients
    @classify_errors
    async def list_appointments(self, filter: Optional[AppointmentFilter] = None) -> List[Appointment]:
        query = {}
        if filter is not None:
            if filter.doctor_id is not None:
                query["doctor_id"] = filter.doctor_id
            if filter.date is not None:
                query["date"] = filter.date.isoformat()
            elif filter.date_from is not None or filter.date_to is not None:
                # ISO dates compare correctly as strings
                window = {}
                if filter.date_from is not None:
                    window["$gte"] = filter.date_from.isoformat()
                if filter.date_to is not None:
                    window["$lte"] = filter.date_to.isoformat()
                query["date"] = window
            if filter.status is not None:
                query["status"] = filter.status.value
        docs = await AppointmentDocument.find(query).sort("+date", "+time").to_list()
        return [_to_appointment(d) for d in docs]

    async def _appointment_doc(self, id: str) -> AppointmentDocument:
        doc = await AppointmentDocument.get(_object_id("Appointment", id))
        if doc is None:
            raise NotFoundError("Appointment", id)
        return doc

    @classify_errors
    async def get_appointment(self, id: str) -> Appointment:
        return _to_appointment(await self._appointment_doc(id))

    @classify_errors
    async def create_appointment(self, data: AppointmentCreate) -> Appointment:
        payload = data.model_dump()
        payload["date"] = data.date.isoformat()
        doc = AppointmentDocument(**payload)
        try:
            await doc.insert()
        except DuplicateKeyError as e:
            logger.warning(f"Slot {data.date} {data.time} already taken for doctor {data.doctor_id}")
            raise SlotUnavailableError(data.doctor_id, data.date, data.time) from e
        return _to_appointment(doc)

    @classify_errors
    async def update_appointment_status(self, id: str, status: AppointmentStatus) -> Appointment:
        doc = await self._appointment_doc(id)
        await doc.set_status(status)
        return _to_appointment(doc)

    @classify_errors
    async def create_patient(self, patient: Patient) -> str:
        doc = PatientDocument(**patient.model_dump())
        await doc.insert()
        return str(doc.id)

    async def ping(self) -> bool:
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
        except ConnectionFailure as e:
            logger.error(f"MongoDB ping failed: {str(e)}")
            return False
        return True
