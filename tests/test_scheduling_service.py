"""Tests for availability queries and booking submission."""
import asyncio
import datetime as dt

import pytest

from booking.service import SchedulingService
from conftest import NEXT_MONDAY, NEXT_TUESDAY, TODAY, make_doctor
from repository.memory import InMemoryRepository
from schemas.appointment import Appointment, AppointmentFilter, Patient
from schemas.booking import BookingContext
from schemas.specialty import Specialty
from scheduling.errors import (
    InvalidScheduleError,
    NotFoundError,
    PersistenceUnavailableError,
    SlotUnavailableError,
    ValidationError,
)
from scheduling.weekday import Weekday

BY_DOCTOR = BookingContext(doctor_id="dr-a")
BY_SPECIALTY = BookingContext(specialty_id="cardio")


def times(slots):
    return [(s.time, s.available) for s in slots]


class TestAvailability:
    @pytest.mark.asyncio
    async def test_dates_for_monday_doctor(self, service):
        dates = await service.get_available_dates(BY_DOCTOR)

        assert NEXT_MONDAY in dates
        assert all(d.weekday() == 0 for d in dates)

    @pytest.mark.asyncio
    async def test_lookahead_override(self, service):
        dates = await service.get_available_dates(BY_SPECIALTY, lookahead_days=3)

        assert dates == [NEXT_MONDAY]

    @pytest.mark.asyncio
    async def test_lookahead_cannot_widen_booking_window(self, repository):
        service = SchedulingService(repository, today=lambda: TODAY, lookahead_days=3)

        dates = await service.get_available_dates(BY_SPECIALTY, lookahead_days=60)

        assert dates == [NEXT_MONDAY]

    @pytest.mark.asyncio
    async def test_dates_query_is_limited_to_window(self, repository):
        repository = RecordingRepository(
            specialties=list(repository.specialties.values()), doctors=list(repository.doctors.values())
        )
        service = SchedulingService(repository, today=lambda: TODAY, lookahead_days=3)

        await service.get_available_dates(BY_DOCTOR)

        [query] = repository.filters
        assert (query.doctor_id, query.date_from, query.date_to) == ("dr-a", dt.date(2026, 10, 15), NEXT_MONDAY)

    @pytest.mark.asyncio
    async def test_slots_for_doctor(self, service):
        slots = await service.get_available_slots(BY_DOCTOR, NEXT_MONDAY)

        assert times(slots) == [("08:00", True), ("09:00", True)]

    @pytest.mark.asyncio
    async def test_repeated_reads_are_identical(self, service):
        first = await service.get_available_slots(BY_SPECIALTY, NEXT_MONDAY)
        second = await service.get_available_slots(BY_SPECIALTY, NEXT_MONDAY)

        assert first == second

    @pytest.mark.asyncio
    async def test_specialty_merges_doctors(self, repository, service):
        repository.doctors["dr-b"] = make_doctor("dr-b", "Dr. B", [(Weekday.MONDAY, "08:30", "09:30", 60)])
        repository.doctors["dr-x"] = make_doctor(
            "dr-x", "Dr. X", [(Weekday.MONDAY, "07:00", "08:00", 60)], specialty_id="derma"
        )

        slots = await service.get_available_slots(BY_SPECIALTY, NEXT_MONDAY)

        assert [(s.time, s.doctor_name) for s in slots] == [
            ("08:00", "Dr. A"),
            ("08:30", "Dr. B"),
            ("09:00", "Dr. A"),
        ]

    @pytest.mark.asyncio
    async def test_unknown_doctor(self, service):
        with pytest.raises(NotFoundError):
            await service.get_available_slots(BookingContext(doctor_id="nobody"), NEXT_MONDAY)

    @pytest.mark.asyncio
    async def test_stored_bad_template_is_not_swallowed(self, repository, service):
        repository.doctors["dr-a"] = make_doctor("dr-a", "Dr. A", [(Weekday.MONDAY, "10:00", "08:00", 60)])

        with pytest.raises(InvalidScheduleError):
            await service.get_available_slots(BY_DOCTOR, NEXT_MONDAY)


class TestSubmitBooking:
    @pytest.mark.asyncio
    async def test_books_and_blocks_the_slot(self, repository, service, patient):
        result = await service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "08:00", patient, insurance_id="unimed")

        assert isinstance(result, Appointment)
        assert result.doctor_id == "dr-a"
        assert result.patient == patient
        assert result.patient_id in repository.patients
        assert result.insurance_id == "unimed"
        slots = await service.get_available_slots(BY_DOCTOR, NEXT_MONDAY)
        assert times(slots) == [("08:00", False), ("09:00", True)]

    @pytest.mark.asyncio
    async def test_self_pay(self, service, patient):
        result = await service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "09:00", patient)

        assert result.is_self_pay

    @pytest.mark.asyncio
    async def test_double_booking_rejected(self, repository, service, patient):
        await service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "08:00", patient)

        result = await service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "08:00", patient)

        assert isinstance(result, SlotUnavailableError)
        booked = await repository.list_appointments(AppointmentFilter(doctor_id="dr-a", date=NEXT_MONDAY))
        assert len(booked) == 1

    @pytest.mark.asyncio
    async def test_specialty_booking_picks_free_doctor(self, repository, service, patient):
        repository.doctors["dr-b"] = make_doctor("dr-b", "Dr. B", [(Weekday.MONDAY, "08:00", "09:00", 60)])
        await service.submit_booking(BY_SPECIALTY, NEXT_MONDAY, "08:00", patient)

        result = await service.submit_booking(BY_SPECIALTY, NEXT_MONDAY, "08:00", patient)

        assert result.doctor_id == "dr-b"
        third = await service.submit_booking(BY_SPECIALTY, NEXT_MONDAY, "08:00", patient)
        assert isinstance(third, SlotUnavailableError)

    @pytest.mark.asyncio
    async def test_time_outside_schedule(self, service, patient):
        result = await service.submit_booking(BY_DOCTOR, NEXT_TUESDAY, "08:00", patient)

        assert isinstance(result, SlotUnavailableError)

    @pytest.mark.asyncio
    async def test_missing_patient_fields_never_reach_store(self, repository, service):
        result = await service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "08:00", Patient(name="Ana", city=" "))

        assert isinstance(result, ValidationError)
        assert result.fields == ["birth_date", "phone", "city"]
        assert repository.patients == {}

    @pytest.mark.asyncio
    async def test_email_is_optional(self, service, patient):
        result = await service.submit_booking(
            BY_DOCTOR, NEXT_MONDAY, "08:00", patient.model_copy(update={"email": None})
        )

        assert isinstance(result, Appointment)

    @pytest.mark.asyncio
    async def test_malformed_time(self, service, patient):
        result = await service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "8h", patient)

        assert isinstance(result, ValidationError)
        assert result.fields == ["time"]

    @pytest.mark.asyncio
    async def test_past_or_same_day(self, service, patient):
        result = await service.submit_booking(BY_DOCTOR, TODAY, "08:00", patient)

        assert isinstance(result, ValidationError)
        assert result.fields == ["date"]

    @pytest.fixture
    def weekend_service(self, repository):
        repository.doctors["dr-a"] = make_doctor(
            "dr-a",
            "Dr. A",
            [(Weekday.MONDAY, "08:00", "10:00", 60), (Weekday.SATURDAY, "08:00", "10:00", 60)],
        )
        return SchedulingService(repository, today=lambda: TODAY)

    @pytest.mark.asyncio
    async def test_weekend_date_rejected_even_with_hours(self, weekend_service, repository, patient):
        saturday = dt.date(2026, 10, 17)

        result = await weekend_service.submit_booking(BY_DOCTOR, saturday, "08:00", patient)

        assert isinstance(result, ValidationError)
        assert result.fields == ["date"]
        assert repository.appointments == {}

    @pytest.mark.asyncio
    async def test_date_beyond_lookahead_rejected(self, weekend_service, repository, patient):
        far_monday = dt.date(2028, 1, 3)

        result = await weekend_service.submit_booking(BY_DOCTOR, far_monday, "08:00", patient)

        assert isinstance(result, ValidationError)
        assert result.fields == ["date"]
        assert repository.patients == {}

    @pytest.mark.asyncio
    async def test_last_date_of_short_window_accepted(self, repository, patient):
        service = SchedulingService(repository, today=lambda: TODAY, lookahead_days=3)

        # Thu, Fri, Mon
        result = await service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "08:00", patient)

        assert isinstance(result, Appointment)

    @pytest.mark.asyncio
    async def test_insurance_not_accepted(self, service, patient):
        result = await service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "08:00", patient, insurance_id="sus")

        assert isinstance(result, ValidationError)
        assert result.fields == ["insurance_id"]

    @pytest.mark.asyncio
    async def test_unknown_specialty(self, service, patient):
        result = await service.submit_booking(BookingContext(specialty_id="nope"), NEXT_MONDAY, "08:00", patient)

        assert isinstance(result, ValidationError)
        assert result.fields == ["specialty_id"]

    @pytest.mark.asyncio
    async def test_store_down_is_returned_not_raised(self, repository, service, patient):
        repository.online = False

        result = await service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "08:00", patient)

        assert isinstance(result, PersistenceUnavailableError)


class RecordingRepository(InMemoryRepository):
    """Remembers every appointment filter it is asked for."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.filters = []

    async def list_appointments(self, filter=None):
        self.filters.append(filter)
        return await super().list_appointments(filter)


class InterleavingRepository(InMemoryRepository):
    """Yields to the event loop after each read so two bookings overlap."""

    async def list_appointments(self, filter=None):
        result = await super().list_appointments(filter)
        await asyncio.sleep(0)
        return result


class TestConcurrentBookings:
    @pytest.mark.asyncio
    async def test_second_commit_loses(self, dr_a, patient):
        repository = InterleavingRepository(specialties=[Specialty(id="cardio", name="Cardiology")], doctors=[dr_a])
        service = SchedulingService(repository, today=lambda: TODAY)

        results = await asyncio.gather(
            service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "08:00", patient),
            service.submit_booking(BY_DOCTOR, NEXT_MONDAY, "08:00", patient),
        )

        assert sum(isinstance(r, Appointment) for r in results) == 1
        assert sum(isinstance(r, SlotUnavailableError) for r in results) == 1
        assert len(repository.appointments) == 1
        # the losing booker's patient row stays behind
        assert len(repository.patients) == 2


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_cardiology_scenario(self, service):
        dates = await service.get_available_dates(BY_SPECIALTY)
        assert NEXT_MONDAY in dates

        slots = await service.get_available_slots(BY_SPECIALTY, NEXT_MONDAY)
        assert times(slots) == [("08:00", True), ("09:00", True)]

        patient_x = Patient(name="Patient X", birth_date="1990-01-01", city="Recife", phone="81 3333-0000")
        booked = await service.submit_booking(BY_SPECIALTY, NEXT_MONDAY, "08:00", patient_x)
        assert isinstance(booked, Appointment)

        slots = await service.get_available_slots(BY_SPECIALTY, NEXT_MONDAY)
        assert times(slots) == [("08:00", False), ("09:00", True)]
        assert dt.date(2026, 10, 19) in await service.get_available_dates(BY_SPECIALTY)
