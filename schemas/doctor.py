from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime
from scheduling.weekday import Weekday

DEFAULT_INTERVAL_MINUTES = 30


class WorkingHoursEntry(BaseModel):
    """One weekday of a doctor's recurring schedule.

    Times are clinic-local ``HH:MM`` strings. They are checked by
    ``scheduling.slots.validate_working_hours`` rather than here so that a bad
    template is reported as ``InvalidScheduleError`` wherever it shows up.
    """

    day: Weekday
    start_time: str
    end_time: str
    interval_minutes: int = DEFAULT_INTERVAL_MINUTES

    model_config = ConfigDict(frozen=True)


class DoctorCreate(BaseModel):
    name: str = Field(..., min_length=1)
    license_number: str = Field(..., min_length=1)
    specialty_id: str
    insurance_ids: List[str] = []
    working_hours: List[WorkingHoursEntry] = []

    @field_validator("insurance_ids")
    @classmethod
    def dedupe_insurance_ids(cls, v):
        return list(dict.fromkeys(v))


class Doctor(DoctorCreate):
    id: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(from_attributes=True)

    def hours_for(self, day: Weekday) -> Optional[WorkingHoursEntry]:
        for entry in self.working_hours:
            if entry.day == day:
                return entry
        return None

    def accepts(self, insurance_id: str) -> bool:
        return insurance_id in self.insurance_ids
