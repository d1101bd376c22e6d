from fastapi import APIRouter, Depends
from typing import List
from admin.service import ClinicAdmin
from dependencies import get_admin
from schemas.insurance import Insurance, InsuranceCreate
from scheduling.errors import ClinicError
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/insurance")


@router.get("/", response_model=List[Insurance])
async def get_insurances(admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.list_insurances()
    except ClinicError as e:
        raise to_http_exception(e)


@router.post("/", response_model=Insurance, status_code=201)
async def create_insurance(insurance: InsuranceCreate, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.create_insurance(insurance)
    except ClinicError as e:
        raise to_http_exception(e)


@router.put("/{id}", response_model=Insurance)
async def update_insurance(id: str, insurance: InsuranceCreate, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.update_insurance(id, insurance)
    except ClinicError as e:
        raise to_http_exception(e)


@router.delete("/{id}")
async def delete_insurance(id: str, admin: ClinicAdmin = Depends(get_admin)):
    try:
        await admin.delete_insurance(id)
    except ClinicError as e:
        raise to_http_exception(e)
    return {"msg": "Insurance deleted successfully"}
