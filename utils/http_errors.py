from fastapi import HTTPException
from scheduling.errors import (
    ClinicError,
    ConflictError,
    InvalidScheduleError,
    NotFoundError,
    PersistenceUnavailableError,
    SlotUnavailableError,
    ValidationError,
)

STATUS_CODES = [
    (NotFoundError, 404),
    (SlotUnavailableError, 409),
    (ConflictError, 409),
    (InvalidScheduleError, 422),
    (ValidationError, 422),
    (PersistenceUnavailableError, 503),
]


def to_http_exception(error: ClinicError) -> HTTPException:
    for kind, status_code in STATUS_CODES:
        if isinstance(error, kind):
            break
    else:
        status_code = 400
    detail = {"error": type(error).__name__, "msg": str(error)}
    fields = getattr(error, "fields", None)
    if fields:
        detail["fields"] = fields
    if isinstance(error, SlotUnavailableError):
        detail["retry"] = "Choose another time slot"
    return HTTPException(status_code=status_code, detail=detail)
