"""Which calendar dates a patient may be offered."""
import datetime as dt
from typing import Iterable, List, Optional, Sequence

from schemas.appointment import Appointment
from schemas.doctor import Doctor
from scheduling.aggregator import aggregate, has_availability

WEEKEND = {5, 6}  # date.weekday() for Saturday and Sunday


def is_business_day(date: dt.date) -> bool:
    return date.weekday() not in WEEKEND


def candidate_dates(lookahead_days: int, today: Optional[dt.date] = None) -> List[dt.date]:
    """The next ``lookahead_days`` weekdays, starting tomorrow.

    Saturdays and Sundays are skipped and do not count towards
    ``lookahead_days``, so the result always has exactly that many dates.
    """
    if lookahead_days < 0:
        raise ValueError(f"lookahead_days must not be negative, got {lookahead_days}")
    current = today or dt.date.today()
    dates: List[dt.date] = []
    while len(dates) < lookahead_days:
        current += dt.timedelta(days=1)
        if is_business_day(current):
            dates.append(current)
    return dates


def filter_dates_with_availability(
    dates: Iterable[dt.date],
    doctors: Sequence[Doctor],
    appointments: Iterable[Appointment],
) -> List[dt.date]:
    """Keep the dates on which at least one of ``doctors`` has a free slot."""
    appointments = list(appointments)
    return [d for d in dates if has_availability(aggregate(doctors, d, appointments))]


def to_iso(dates: Iterable[dt.date]) -> List[str]:
    return [d.isoformat() for d in dates]
