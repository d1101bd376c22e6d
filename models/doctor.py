from beanie import Document
from pydantic import BaseModel, Field, field_validator
from pymongo import ASCENDING, IndexModel
from typing import List, Optional
from datetime import datetime
from schemas.doctor import DEFAULT_INTERVAL_MINUTES
from scheduling.weekday import Weekday, weekday_from_storage


class WorkingHoursRecord(BaseModel):
    """Stored form of a WorkingHoursEntry.

    Older records carry Portuguese day labels, ``HH:MM:SS`` times and no
    interval; they are normalised here so the rest of the code only ever sees
    the canonical form.
    """

    day: Weekday
    start_time: str
    end_time: str
    interval_minutes: Optional[int] = DEFAULT_INTERVAL_MINUTES

    @field_validator("day", mode="before")
    @classmethod
    def translate_day(cls, v):
        return weekday_from_storage(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def drop_seconds(cls, v):
        if isinstance(v, str) and len(v) == 8 and v.count(":") == 2:
            return v[:5]
        return v

    @field_validator("interval_minutes", mode="after")
    @classmethod
    def default_interval(cls, v):
        return DEFAULT_INTERVAL_MINUTES if v is None else v


class DoctorDocument(Document):
    name: str
    license_number: str
    specialty_id: str
    insurance_ids: List[str] = []
    # Embedded, so deleting the doctor deletes its schedule as well
    working_hours: List[WorkingHoursRecord] = []
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "doctors"
        indexes = [
            IndexModel([("license_number", ASCENDING)], name="unique_license_number", unique=True),
            IndexModel([("specialty_id", ASCENDING)], name="specialty"),
        ]
