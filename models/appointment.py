from beanie import Document
from pydantic import Field
from pymongo import ASCENDING, IndexModel
from typing import Optional
from datetime import datetime
from schemas.appointment import AppointmentStatus, Patient


class AppointmentDocument(Document):
    doctor_id: str
    patient_id: Optional[str] = None
    date: str  # ISO date; BSON has no date-only type
    time: str
    patient: Patient  # snapshot taken at booking time
    insurance_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    class Settings:
        name = "appointments"
        indexes = [
            # One scheduled appointment per doctor and slot; cancelled and
            # completed ones do not hold the slot.
            IndexModel(
                [("doctor_id", ASCENDING), ("date", ASCENDING), ("time", ASCENDING)],
                name="unique_scheduled_slot",
                unique=True,
                partialFilterExpression={"status": AppointmentStatus.SCHEDULED.value},
            ),
            IndexModel([("date", ASCENDING), ("status", ASCENDING)], name="date_status"),
        ]

    async def set_status(self, status: AppointmentStatus):
        self.status = status
        self.updated_at = datetime.utcnow()
        await self.save()
