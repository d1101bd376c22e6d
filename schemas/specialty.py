from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class SpecialtyCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class Specialty(SpecialtyCreate):
    id: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(from_attributes=True)
