"""Step-by-step booking, as the patient walks through the booking screens.

    CHOOSING_DATE_TIME -> ENTERING_PATIENT_INFO -> REVIEWING_CONFIRMATION -> COMMITTED

``continue_`` moves one step forward after checking that step's guard,
``back`` moves one step back and keeps everything typed so far. A committed
flow is finished; ``restart`` gives a new one for the next booking.
"""
import datetime as dt
import logging
from enum import Enum
from typing import List, Optional

from booking.service import BookingResult, SchedulingService
from schemas.appointment import Appointment, Patient
from schemas.booking import BookingContext, TimeSlot
from scheduling.errors import (
    BookingError,
    BookingInProgressError,
    FlowClosedError,
    PersistenceUnavailableError,
    SlotUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class BookingStep(str, Enum):
    CHOOSING_DATE_TIME = "choosing_date_time"
    ENTERING_PATIENT_INFO = "entering_patient_info"
    REVIEWING_CONFIRMATION = "reviewing_confirmation"
    COMMITTED = "committed"


STEPS = list(BookingStep)


class BookingFlow:
    def __init__(self, service: SchedulingService, context: BookingContext):
        self.service = service
        self.context = context
        self.step = BookingStep.CHOOSING_DATE_TIME
        self.available_dates: List[dt.date] = []
        self.slots: List[TimeSlot] = []
        self.selected_date: Optional[dt.date] = None
        self.selected_time: Optional[str] = None
        self.patient = Patient()
        self.insurance_id: Optional[str] = None
        self.appointment: Optional[Appointment] = None
        self.last_error: Optional[BookingError] = None
        self._submitting = False

    @property
    def committed(self) -> bool:
        return self.step == BookingStep.COMMITTED

    @property
    def submitting(self) -> bool:
        return self._submitting

    def _ensure_open(self):
        if self.committed:
            raise FlowClosedError("This booking is already confirmed; start a new one")

    def _ensure_step(self, step: BookingStep):
        self._ensure_open()
        if self.step != step:
            raise ValidationError(f"Not allowed while {self.step.value}")

    # data entry
    async def load_dates(self, lookahead_days: Optional[int] = None) -> List[dt.date]:
        self._ensure_open()
        self.available_dates = await self.service.get_available_dates(self.context, lookahead_days)
        return self.available_dates

    async def select_date(self, date: dt.date) -> List[TimeSlot]:
        self._ensure_step(BookingStep.CHOOSING_DATE_TIME)
        if date not in self.available_dates:
            raise ValidationError(f"{date} is not an available date", fields=["date"])
        if date != self.selected_date:
            self.selected_time = None
        self.selected_date = date
        self.slots = await self.service.get_available_slots(self.context, date)
        return self.slots

    def select_time(self, time: str):
        self._ensure_step(BookingStep.CHOOSING_DATE_TIME)
        if self.selected_date is None:
            raise ValidationError("Choose a date first", fields=["date"])
        if not any(slot.time == time and slot.available for slot in self.slots):
            raise ValidationError(f"{time} is not available on {self.selected_date}", fields=["time"])
        self.selected_time = time

    def set_patient(self, patient: Optional[Patient] = None, **fields):
        self._ensure_open()
        base = patient or self.patient
        self.patient = base.model_copy(update=fields) if fields else base

    def set_insurance(self, insurance_id: Optional[str]):
        """Pick a plan, or None for self-pay."""
        self._ensure_open()
        self.insurance_id = insurance_id or None

    @property
    def selected_slot(self) -> Optional[TimeSlot]:
        for slot in self.slots:
            if slot.time == self.selected_time and slot.available:
                return slot
        return None

    # navigation
    def _check_guard(self, target: BookingStep):
        if target == BookingStep.ENTERING_PATIENT_INFO:
            if self.selected_date is None or self.selected_time is None:
                raise ValidationError("Choose a date and a time", fields=["date", "time"])
            if self.selected_date not in self.available_dates:
                raise ValidationError(f"{self.selected_date} is no longer available", fields=["date"])
        elif target == BookingStep.REVIEWING_CONFIRMATION:
            missing = self.patient.missing_fields()
            if missing:
                raise ValidationError(f"Missing patient fields: {', '.join(missing)}", fields=missing)
        elif target == BookingStep.COMMITTED:
            raise ValidationError("Confirm the booking to finish")

    def continue_(self) -> BookingStep:
        self._ensure_open()
        target = STEPS[STEPS.index(self.step) + 1]
        self._check_guard(target)
        self.step = target
        return self.step

    def back(self) -> BookingStep:
        self._ensure_open()
        index = STEPS.index(self.step)
        if index > 0:
            self.step = STEPS[index - 1]
        return self.step

    # commit
    async def commit(self) -> BookingResult:
        """Book the appointment.

        On success the flow is COMMITTED. On failure it stays in
        REVIEWING_CONFIRMATION with ``last_error`` set; a taken slot also
        clears the chosen time and reloads the day's slots.
        """
        self._ensure_step(BookingStep.REVIEWING_CONFIRMATION)
        if self._submitting:
            raise BookingInProgressError("Booking is already being submitted")
        # both guards again: data may have changed through back/continue
        self._check_guard(BookingStep.ENTERING_PATIENT_INFO)
        self._check_guard(BookingStep.REVIEWING_CONFIRMATION)

        self._submitting = True
        try:
            result = await self.service.submit_booking(
                self.context, self.selected_date, self.selected_time, self.patient, self.insurance_id
            )
        finally:
            self._submitting = False

        if isinstance(result, BookingError):
            self.last_error = result
            if isinstance(result, SlotUnavailableError):
                await self._refresh_after_conflict()
            return result

        self.last_error = None
        self.appointment = result
        self.step = BookingStep.COMMITTED
        return result

    async def _refresh_after_conflict(self):
        self.selected_time = None
        try:
            self.slots = await self.service.get_available_slots(self.context, self.selected_date)
        except PersistenceUnavailableError as e:
            logger.warning(f"Could not reload slots after a booking conflict: {e}")
            self.slots = []

    def restart(self) -> "BookingFlow":
        return BookingFlow(self.service, self.context)
