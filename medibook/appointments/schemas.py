"""
Appointment Schemas - Pydantic models for booking requests and appointment data.
"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
from .models import AppointmentStatus

class AppointmentCreate(BaseModel):
    """
    Appointment Create Schema - A patient's booking request

    Fields:
    - doctor_id: Doctor to book with
    - date: Slot date (YYYY-MM-DD)
    - time_slot: Slot time (HH:MM)
    - reason: Reason for the visit (optional)
    """
    doctor_id: int
    date: str = Field(..., description="Slot date, YYYY-MM-DD", examples=["2025-05-11"])
    time_slot: str = Field(..., description="Slot time, HH:MM", examples=["13:00"])
    reason: Optional[str] = Field(None, max_length=500)

class AppointmentRating(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 to 5")

class AppointmentResponse(BaseModel):
    """
    Appointment Response Schema - Used when returning appointment data
    """
    id: int
    doctor_id: int
    patient_id: int
    doctor_name: Optional[str] = None
    patient_name: Optional[str] = None
    date: str
    time_slot: str
    status: AppointmentStatus
    reason: Optional[str] = None
    cancelled_by: Optional[str] = None
    rating: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
