"""Slot generation from a doctor's working-hours template.

Every screen that offers times goes through ``generate_slots``; nothing else
in the project steps through a working day.
"""
import datetime as dt
import re
from typing import Iterable, Iterator, List, Optional, Tuple

from schemas.booking import TimeSlot
from schemas.doctor import WorkingHoursEntry
from scheduling.errors import InvalidScheduleError

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_time(value: str) -> int:
    """Return minutes since midnight for an ``HH:MM`` string."""
    match = TIME_PATTERN.match(value) if isinstance(value, str) else None
    if not match:
        raise InvalidScheduleError(f"Invalid time {value!r}, expected HH:MM between 00:00 and 23:59")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def is_valid_time(value: str) -> bool:
    return isinstance(value, str) and TIME_PATTERN.match(value) is not None


def validate_working_hours(entry: WorkingHoursEntry) -> Tuple[int, int, int]:
    """Check one template entry and return (start, end, interval) in minutes."""
    start = parse_time(entry.start_time)
    end = parse_time(entry.end_time)
    if start >= end:
        raise InvalidScheduleError(
            f"{entry.day.value}: start time {entry.start_time} must be before end time {entry.end_time}"
        )
    if entry.interval_minutes <= 0:
        raise InvalidScheduleError(
            f"{entry.day.value}: interval must be a positive number of minutes, got {entry.interval_minutes}"
        )
    return start, end, entry.interval_minutes


def validate_schedule(entries: Iterable[WorkingHoursEntry]) -> None:
    """Check a doctor's whole weekly template before it is saved."""
    seen = set()
    for entry in entries:
        if entry.day in seen:
            raise InvalidScheduleError(f"More than one working-hours entry for {entry.day.value}")
        seen.add(entry.day)
        validate_working_hours(entry)


def generate_slots(
    entry: WorkingHoursEntry,
    date: dt.date,
    booked_times: Iterable[str] = (),
    doctor_id: Optional[str] = None,
    doctor_name: Optional[str] = None,
) -> Iterator[TimeSlot]:
    """Yield the slots of ``entry`` on ``date``.

    A slot starts at ``start_time`` and then every ``interval_minutes`` while
    its start is strictly before ``end_time``; the last slot may run past the
    end of the working day. Slots whose time is in ``booked_times`` are marked
    unavailable.

    The template is validated before this returns, so a bad template raises
    ``InvalidScheduleError`` here and not on first iteration. Each call
    returns a new iterator.
    """
    start, end, interval = validate_working_hours(entry)
    return _iter_slots(start, end, interval, date, frozenset(booked_times), doctor_id, doctor_name)


def _iter_slots(start, end, interval, date, booked, doctor_id, doctor_name) -> Iterator[TimeSlot]:
    current = start
    while current < end:
        time = format_time(current)
        yield TimeSlot(
            doctor_id=doctor_id,
            date=date,
            time=time,
            available=time not in booked,
            doctor_name=doctor_name,
        )
        current += interval


def available_only(slots: Iterable[TimeSlot]) -> List[TimeSlot]:
    return [slot for slot in slots if slot.available]
