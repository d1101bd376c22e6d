import datetime as dt
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def can_become(self, other: "AppointmentStatus") -> bool:
        # completed and cancelled are terminal
        return self == AppointmentStatus.SCHEDULED and other != AppointmentStatus.SCHEDULED


class Patient(BaseModel):
    """Patient data as typed on the booking form.

    Every field defaults to blank so a half-filled form can be held by the
    booking flow; ``missing_fields`` decides whether it is complete.
    """

    name: str = ""
    birth_date: str = ""
    city: str = ""
    phone: str = ""
    email: Optional[str] = None

    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "birth_date", "phone", "city")

    def missing_fields(self) -> List[str]:
        return [f for f in self.REQUIRED_FIELDS if not getattr(self, f).strip()]


class AppointmentCreate(BaseModel):
    doctor_id: str
    patient_id: Optional[str] = None
    date: dt.date
    time: str
    patient: Patient
    insurance_id: Optional[str] = None  # None means self-pay
    status: AppointmentStatus = AppointmentStatus.SCHEDULED


class Appointment(AppointmentCreate):
    id: str
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    updated_at: Optional[dt.datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_self_pay(self) -> bool:
        return self.insurance_id is None

    def occupies(self, doctor_id: str, date: dt.date, time: str) -> bool:
        return (
            self.status == AppointmentStatus.SCHEDULED
            and self.doctor_id == doctor_id
            and self.date == date
            and self.time == time
        )


class AppointmentFilter(BaseModel):
    doctor_id: Optional[str] = None
    date: Optional[dt.date] = None
    status: Optional[AppointmentStatus] = None
    # inclusive range, ignored when ``date`` is set
    date_from: Optional[dt.date] = None
    date_to: Optional[dt.date] = None

    def matches(self, appointment: Appointment) -> bool:
        if self.doctor_id is not None and appointment.doctor_id != self.doctor_id:
            return False
        if self.date is not None:
            if appointment.date != self.date:
                return False
        elif (self.date_from is not None and appointment.date < self.date_from) or (
            self.date_to is not None and appointment.date > self.date_to
        ):
            return False
        if self.status is not None and appointment.status != self.status:
            return False
        return True


class AppointmentSummary(BaseModel):
    total: int
    by_status: Dict[AppointmentStatus, int]
