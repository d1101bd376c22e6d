import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from schemas.appointment import Patient


class TimeSlot(BaseModel):
    doctor_id: Optional[str] = None
    date: dt.date
    time: str
    available: bool = True
    doctor_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class BookingContext(BaseModel):
    """Who the patient is booking with: one doctor, or any doctor of a specialty."""

    doctor_id: Optional[str] = None
    specialty_id: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def exactly_one_target(self):
        if (self.doctor_id is None) == (self.specialty_id is None):
            raise ValueError("Provide either doctor_id or specialty_id")
        return self


class BookingRequest(BaseModel):
    doctor_id: Optional[str] = None
    specialty_id: Optional[str] = None
    date: dt.date
    time: str
    patient: Patient
    insurance_id: Optional[str] = None

    def context(self) -> BookingContext:
        return BookingContext(doctor_id=self.doctor_id, specialty_id=self.specialty_id)
