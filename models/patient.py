from beanie import Document
from pydantic import Field
from typing import Optional
from datetime import datetime


class PatientDocument(Document):
    name: str
    birth_date: str
    city: str
    phone: str
    email: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "patients"
