from fastapi import APIRouter, Depends
from typing import List, Optional
from admin.service import ClinicAdmin
from dependencies import get_admin
from schemas.doctor import Doctor, DoctorCreate
from scheduling.errors import ClinicError
from utils.http_errors import to_http_exception
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/doctor")


@router.get("/", response_model=List[Doctor])
async def get_all_doctors(specialty_id: Optional[str] = None, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.list_doctors(specialty_id=specialty_id)
    except ClinicError as e:
        raise to_http_exception(e)


@router.get("/{id}", response_model=Doctor)
async def get_doctor(id: str, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.get_doctor(id)
    except ClinicError as e:
        raise to_http_exception(e)


@router.post("/", response_model=Doctor, status_code=201)
async def create_doctor(doctor: DoctorCreate, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.create_doctor(doctor)
    except ClinicError as e:
        logger.warning(f"Doctor not saved: {str(e)}")
        raise to_http_exception(e)


@router.put("/{id}", response_model=Doctor)
async def update_doctor(id: str, doctor: DoctorCreate, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.update_doctor(id, doctor)
    except ClinicError as e:
        logger.warning(f"Doctor {id} not updated: {str(e)}")
        raise to_http_exception(e)


@router.delete("/{id}")
async def delete_doctor(id: str, admin: ClinicAdmin = Depends(get_admin)):
    try:
        await admin.delete_doctor(id)
    except ClinicError as e:
        raise to_http_exception(e)
    return {"msg": "Doctor deleted successfully"}
