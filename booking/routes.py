from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError as PydanticValidationError
from typing import List, Optional
from datetime import date
from booking.service import SchedulingService
from dependencies import get_scheduling_service
from schemas.appointment import Appointment
from schemas.booking import BookingContext, BookingRequest, TimeSlot
from scheduling.errors import BookingError, ClinicError
from utils.http_errors import to_http_exception

router = APIRouter(prefix="/booking")


def booking_context(doctor_id: Optional[str] = None, specialty_id: Optional[str] = None) -> BookingContext:
    try:
        return BookingContext(doctor_id=doctor_id, specialty_id=specialty_id)
    except PydanticValidationError:
        raise HTTPException(status_code=422, detail="Provide either doctor_id or specialty_id")


@router.get("/dates", response_model=List[date])
async def get_available_dates(
    lookahead_days: Optional[int] = Query(None, ge=1, le=90),
    context: BookingContext = Depends(booking_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    try:
        return await service.get_available_dates(context, lookahead_days)
    except ClinicError as e:
        raise to_http_exception(e)


@router.get("/slots", response_model=List[TimeSlot])
async def get_available_slots(
    day: date = Query(..., alias="date"),
    context: BookingContext = Depends(booking_context),
    service: SchedulingService = Depends(get_scheduling_service),
):
    try:
        return await service.get_available_slots(context, day)
    except ClinicError as e:
        raise to_http_exception(e)


@router.post("/", response_model=Appointment, status_code=201)
async def submit_booking(request: BookingRequest, service: SchedulingService = Depends(get_scheduling_service)):
    context = booking_context(request.doctor_id, request.specialty_id)
    result = await service.submit_booking(context, request.date, request.time, request.patient, request.insurance_id)
    if isinstance(result, BookingError):
        raise to_http_exception(result)
    return result
