from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from typing import Optional


class InsuranceType(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class InsuranceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    type: Optional[InsuranceType] = None


class Insurance(InsuranceCreate):
    id: str

    model_config = ConfigDict(from_attributes=True)
