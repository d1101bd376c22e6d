from datetime import date
from enum import Enum


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        # date.weekday(): Monday == 0
        return list(cls)[day.weekday()]


# Labels written by the first version of the admin screens. Only the
# persistence layer translates them; everything else sees Weekday members.
STORED_LABELS = {
    "segunda": Weekday.MONDAY,
    "terça": Weekday.TUESDAY,
    "terca": Weekday.TUESDAY,
    "quarta": Weekday.WEDNESDAY,
    "quinta": Weekday.THURSDAY,
    "sexta": Weekday.FRIDAY,
    "sábado": Weekday.SATURDAY,
    "sabado": Weekday.SATURDAY,
    "domingo": Weekday.SUNDAY,
}


def weekday_from_storage(label) -> Weekday:
    """Read a stored day label, canonical or legacy, into a Weekday."""
    if isinstance(label, Weekday):
        return label
    key = str(label).strip().lower()
    if key in STORED_LABELS:
        return STORED_LABELS[key]
    # Raises ValueError for unknown labels, which pydantic reports on load.
    return Weekday(key)
