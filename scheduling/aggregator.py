"""Merge the slots of several doctors into one time-ordered list."""
import datetime as dt
from operator import attrgetter
from typing import Iterable, List, Optional, Sequence, Set

from schemas.appointment import Appointment, AppointmentStatus
from schemas.booking import TimeSlot
from schemas.doctor import Doctor
from scheduling.slots import generate_slots
from scheduling.weekday import Weekday


def booked_times_for(appointments: Iterable[Appointment], doctor_id: str, date: dt.date) -> Set[str]:
    """Times already taken for a doctor on a date. Only scheduled appointments block a slot."""
    return {
        a.time
        for a in appointments
        if a.doctor_id == doctor_id and a.date == date and a.status == AppointmentStatus.SCHEDULED
    }


def slots_for_doctor(doctor: Doctor, date: dt.date, appointments: Iterable[Appointment]) -> List[TimeSlot]:
    entry = doctor.hours_for(Weekday.of(date))
    if entry is None:
        return []
    booked = booked_times_for(appointments, doctor.id, date)
    return list(generate_slots(entry, date, booked, doctor_id=doctor.id, doctor_name=doctor.name))


def aggregate(doctors: Sequence[Doctor], date: dt.date, appointments: Iterable[Appointment]) -> List[TimeSlot]:
    """Slots of every doctor on ``date``, sorted by time.

    ``HH:MM`` strings sort correctly as text. ``sorted`` is stable, so doctors
    sharing a time keep the order they were passed in.
    """
    appointments = list(appointments)
    slots: List[TimeSlot] = []
    for doctor in doctors:
        slots.extend(slots_for_doctor(doctor, date, appointments))
    return sorted(slots, key=attrgetter("time"))


def find_slot_owner(slots: Iterable[TimeSlot], time: str) -> Optional[TimeSlot]:
    """First available slot at ``time``; decides the doctor for specialty-wide bookings."""
    for slot in slots:
        if slot.time == time and slot.available:
            return slot
    return None


def has_availability(slots: Iterable[TimeSlot]) -> bool:
    return any(slot.available for slot in slots)
