from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from datetime import date
from admin.service import ClinicAdmin
from dependencies import get_admin
from schemas.appointment import Appointment, AppointmentFilter, AppointmentStatus, AppointmentSummary
from scheduling.errors import ClinicError
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/appointment")


@router.get("/", response_model=List[Appointment])
async def list_appointments(
    doctor_id: Optional[str] = None,
    day: Optional[date] = Query(None, alias="date"),
    status: Optional[AppointmentStatus] = None,
    admin: ClinicAdmin = Depends(get_admin),
):
    try:
        return await admin.list_appointments(AppointmentFilter(doctor_id=doctor_id, date=day, status=status))
    except ClinicError as e:
        raise to_http_exception(e)


@router.get("/summary", response_model=AppointmentSummary)
async def appointment_summary(admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.appointment_summary()
    except ClinicError as e:
        raise to_http_exception(e)


@router.put("/{appointment_id}/complete", response_model=Appointment)
async def complete_appointment(appointment_id: str, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.complete_appointment(appointment_id)
    except ClinicError as e:
        raise to_http_exception(e)


@router.put("/{appointment_id}/cancel", response_model=Appointment)
async def cancel_appointment(appointment_id: str, admin: ClinicAdmin = Depends(get_admin)):
    try:
        return await admin.cancel_appointment(appointment_id)
    except ClinicError as e:
        raise to_http_exception(e)
