# barber_booking/errors.py

from typing import List, Optional


class BookingError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code = 400
    code = "booking_error"
    default_message = "Booking failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class SlotAlreadyTaken(BookingError):
    status_code = 409
    code = "slot_already_taken"
    default_message = "This time slot is already booked, please pick another one"


class InvalidSlot(BookingError):
    status_code = 422
    code = "invalid_slot"
    default_message = "The requested time is not a bookable slot"


class AppointmentNotFound(BookingError):
    status_code = 404
    code = "appointment_not_found"
    default_message = "Appointment not found"


class StoreUnavailable(BookingError):
    status_code = 503
    code = "store_unavailable"
    default_message = "The appointment store is unavailable, please try again"


class NotAuthenticated(BookingError):
    status_code = 401
    code = "not_authenticated"
    default_message = "Admin login required"


class ConfigError(BookingError):
    status_code = 422
    code = "config_error"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}

    def __eq__(self, other):
        if not isinstance(other, ConfigError):
            return NotImplemented
        return (self.field, self.message) == (other.field, other.message)

    def __hash__(self):
        return hash((self.field, self.message))

    def __repr__(self):
        return f"ConfigError({self.field!r}, {self.message!r})"


class ScheduleValidationError(BookingError):
    """Raised when an admin schedule edit has one or more field errors."""

    status_code = 422
    code = "invalid_settings"
    default_message = "Shop settings are invalid"

    def __init__(self, errors: List[ConfigError]):
        self.errors = list(errors)
        super().__init__()

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["errors"] = [e.to_dict() for e in self.errors]
        return body
