"""
Domain exceptions and the handlers that turn them into JSON responses.

Error bodies carry a human readable ``detail`` and a stable ``code`` that
clients can branch on, e.g. ``slot_unavailable`` to offer another slot.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
import logging

# Set up logging
logger = logging.getLogger(__name__)

class AppException(Exception):
    """
    Base exception class for application-specific exceptions.
    """
    code = "error"

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class ValidationException(AppException):
    """Raised when input fails a domain rule (date/slot format, missing field)."""
    code = "invalid_input"

    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ResourceNotFoundException(AppException):
    """Raised when a doctor, patient, appointment or prescription does not exist."""
    code = "not_found"

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class SlotNotFoundException(AppException):
    """Raised when a (date, time slot) pair is not in the doctor's availability."""
    code = "slot_not_found"

    def __init__(self, date: str, time_slot: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Slot {date} {time_slot} is not in the doctor's availability"
        )
        self.date = date
        self.time_slot = time_slot


class SlotUnavailableException(AppException):
    """Raised when a slot exists but has already been booked."""
    code = "slot_unavailable"

    def __init__(self, date: str, time_slot: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Slot {date} {time_slot} has already been booked"
        )
        self.date = date
        self.time_slot = time_slot


class InvalidTransitionException(AppException):
    """Raised on an illegal appointment status change."""
    code = "invalid_transition"

    def __init__(self, current: str, target: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Cannot move appointment from {current} to {target}"
        )
        self.current = current
        self.target = target


class DoctorHasActiveAppointmentsException(AppException):
    """Raised when removing a doctor who still has open appointments."""
    code = "doctor_has_open_appointments"

    def __init__(self, count: int):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Doctor has {count} open appointment(s) and cannot be removed"
        )
        self.count = count


class PrescriptionExistsException(AppException):
    code = "prescription_exists"

    def __init__(self, appointment_id: int):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Appointment {appointment_id} already has a prescription"
        )


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Standardized error response
    """
    if exc.status_code >= 500:
        logger.error(f"Application error: {exc.detail}")
    else:
        logger.warning(f"Request refused ({exc.status_code}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code}
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Args:
        request: The request that caused the exception
        exc: The validation exception instance

    Returns:
        JSONResponse: Standardized error response with validation details
    """
    logger.warning(f"Rejected request body for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "code": "invalid_request",
            "errors": jsonable_encoder(exc.errors())
        }
    )


def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
