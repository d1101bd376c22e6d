"""Availability and booking operations used by the patient-facing screens."""
import datetime as dt
import logging
from typing import Callable, List, Optional, Union

from repository.base import ClinicRepository
from schemas.appointment import Appointment, AppointmentCreate, AppointmentFilter, AppointmentStatus, Patient
from schemas.booking import BookingContext, TimeSlot
from schemas.doctor import Doctor
from scheduling.aggregator import aggregate, find_slot_owner
from scheduling.business_days import candidate_dates, filter_dates_with_availability
from scheduling.errors import BookingError, NotFoundError, SlotUnavailableError, ValidationError
from scheduling.slots import is_valid_time

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD_DAYS = 14

BookingResult = Union[Appointment, BookingError]


class SchedulingService:
    def __init__(
        self,
        repository: ClinicRepository,
        today: Optional[Callable[[], dt.date]] = None,
        lookahead_days: int = DEFAULT_LOOKAHEAD_DAYS,
    ):
        self.repository = repository
        self.today = today or dt.date.today
        self.lookahead_days = lookahead_days

    async def doctors_for(self, context: BookingContext) -> List[Doctor]:
        """Doctors a context can book with. Raises NotFoundError for unknown ids."""
        if context.doctor_id is not None:
            return [await self.repository.get_doctor(context.doctor_id)]
        await self.repository.get_specialty(context.specialty_id)
        return await self.repository.list_doctors(specialty_id=context.specialty_id)

    async def _scheduled(self, doctors: List[Doctor], **criteria) -> List[Appointment]:
        ids = {d.id for d in doctors}
        if len(ids) == 1:
            criteria["doctor_id"] = next(iter(ids))
        found = await self.repository.list_appointments(
            AppointmentFilter(status=AppointmentStatus.SCHEDULED, **criteria)
        )
        return [a for a in found if a.doctor_id in ids]

    def booking_window(self, lookahead_days: Optional[int] = None) -> List[dt.date]:
        """Dates a patient may book. ``lookahead_days`` can narrow the configured window, never widen it."""
        days = self.lookahead_days if lookahead_days is None else min(lookahead_days, self.lookahead_days)
        return candidate_dates(days, today=self.today())

    async def get_available_dates(
        self, context: BookingContext, lookahead_days: Optional[int] = None
    ) -> List[dt.date]:
        """Business days in the lookahead window with at least one free slot."""
        doctors = await self.doctors_for(context)
        dates = self.booking_window(lookahead_days)
        if not dates:
            return []
        appointments = await self._scheduled(doctors, date_from=dates[0], date_to=dates[-1])
        return filter_dates_with_availability(dates, doctors, appointments)

    async def get_available_slots(self, context: BookingContext, date: dt.date) -> List[TimeSlot]:
        """Every slot on ``date``, free or taken, sorted by time."""
        doctors = await self.doctors_for(context)
        return await self._slots(doctors, date)

    async def _slots(self, doctors: List[Doctor], date: dt.date) -> List[TimeSlot]:
        appointments = await self._scheduled(doctors, date=date)
        return aggregate(doctors, date, appointments)

    async def submit_booking(
        self,
        context: BookingContext,
        date: dt.date,
        time: str,
        patient: Patient,
        insurance_id: Optional[str] = None,
    ) -> BookingResult:
        """Store a patient and their appointment.

        Returns the new Appointment, or the BookingError explaining why
        nothing was booked. A patient row may be left behind if the store
        fails between the two writes; the caller still receives the error.
        """
        missing = patient.missing_fields()
        if missing:
            return ValidationError(f"Missing patient fields: {', '.join(missing)}", fields=missing)
        if not is_valid_time(time):
            return ValidationError(f"Invalid time {time!r}, expected HH:MM", fields=["time"])
        if date not in self.booking_window():
            return ValidationError(
                f"{date} is outside the booking window (business days from tomorrow, "
                f"{self.lookahead_days} ahead)",
                fields=["date"],
            )

        try:
            doctors = await self.doctors_for(context)
            slot = find_slot_owner(await self._slots(doctors, date), time)
            if slot is None:
                logger.warning(f"Rejected booking for {date} {time}: no free slot ({context})")
                return SlotUnavailableError(context.doctor_id, date, time)
            doctor = next(d for d in doctors if d.id == slot.doctor_id)
            if insurance_id is not None and not doctor.accepts(insurance_id):
                return ValidationError(
                    f"{doctor.name} does not accept insurance {insurance_id}", fields=["insurance_id"]
                )

            patient_id = await self.repository.create_patient(patient)
            appointment = await self.repository.create_appointment(
                AppointmentCreate(
                    doctor_id=doctor.id,
                    patient_id=patient_id,
                    date=date,
                    time=time,
                    patient=patient,
                    insurance_id=insurance_id,
                )
            )
        except NotFoundError as e:
            return ValidationError(str(e), fields=["doctor_id" if e.kind == "Doctor" else "specialty_id"])
        except BookingError as e:
            logger.warning(f"Booking for {date} {time} failed: {e}")
            return e

        logger.info(f"Appointment {appointment.id} booked with {doctor.name} on {date} at {time}")
        return appointment
