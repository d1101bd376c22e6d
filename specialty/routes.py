from fastapi import APIRouter, Depends
from typing import List
from admin.service import ClinicAdmin
from dependencies import get_admin
from schemas.specialty import Specialty, SpecialtyCreate
from scheduling.errors import ClinicError
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/specialty")


@router.get("/", response_model=List[Specialty])
async def get_specialties(admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.list_specialties()
    except ClinicError as e:
        raise to_http_exception(e)


@router.post("/", response_model=Specialty, status_code=201)
async def create_specialty(specialty: SpecialtyCreate, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.create_specialty(specialty)
    except ClinicError as e:
        raise to_http_exception(e)


@router.put("/{id}", response_model=Specialty)
async def update_specialty(id: str, specialty: SpecialtyCreate, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.update_specialty(id, specialty)
    except ClinicError as e:
        raise to_http_exception(e)


@router.delete("/{id}")
async def delete_specialty(id: str, admin: ClinicAdmin = Depends(get_admin)):
    try:
        await admin.delete_specialty(id)
    except ClinicError as e:
        raise to_http_exception(e)
    return {"msg": "Specialty deleted successfully"}
