"""
Availability Schemas - Request and response bodies for a doctor's slots.
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from .service import validate_date, validate_time_slot
from ..exceptions import ValidationException

def _check(validator, value: str) -> str:
    # Surface as a 422 request error rather than a 400 domain error
    try:
        return validator(value)
    except ValidationException as e:
        raise ValueError(e.detail)

class AvailabilityDay(BaseModel):
    """
    One date and its open time slots

    Fields:
    - date: Calendar date (YYYY-MM-DD)
    - time_slots: Times of day (HH:MM, 24-hour)
    """
    date: str = Field(..., description="Calendar date, YYYY-MM-DD", examples=["2025-05-11"])
    time_slots: List[str] = Field(..., description="Times of day, HH:MM", examples=[["13:00", "14:00"]])

class AvailabilityCreate(AvailabilityDay):
    """Slots to merge into the doctor's availability for one date"""

    @field_validator("date")
    @classmethod
    def validate_date_format(cls, v):
        return _check(validate_date, v)

    @field_validator("time_slots")
    @classmethod
    def validate_time_slots(cls, v):
        if not v:
            raise ValueError("At least one time slot is required")
        return [_check(validate_time_slot, slot) for slot in v]

class AvailabilityRemove(BaseModel):
    """Open slots to take off a date; all of them when time_slots is omitted"""
    date: str
    time_slots: Optional[List[str]] = None

    @field_validator("date")
    @classmethod
    def validate_date_format(cls, v):
        return _check(validate_date, v)

    @field_validator("time_slots")
    @classmethod
    def validate_time_slots(cls, v):
        if v is None:
            return v
        if not v:
            raise ValueError("List the slots to remove, or omit time_slots to clear the date")
        return [_check(validate_time_slot, slot) for slot in v]

class AvailabilityResponse(BaseModel):
    doctor_id: int
    availability: List[AvailabilityDay]
