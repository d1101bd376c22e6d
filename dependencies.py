from fastapi import Depends, Request
from repository.base import ClinicRepository
from booking.service import SchedulingService
from admin.service import ClinicAdmin
import config


def get_repository(request: Request) -> ClinicRepository:
    return request.app.state.repository


def get_scheduling_service(repository: ClinicRepository = Depends(get_repository)) -> SchedulingService:
    return SchedulingService(repository, lookahead_days=config.BOOKING_LOOKAHEAD_DAYS)


def get_admin(repository: ClinicRepository = Depends(get_repository)) -> ClinicAdmin:
    return ClinicAdmin(repository)
