from beanie import Document
from typing import Optional
from schemas.insurance import InsuranceType


class InsuranceDocument(Document):
    name: str
    type: Optional[InsuranceType] = None

    class Settings:
        name = "insurances"
