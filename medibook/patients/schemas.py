"""
Patient Schemas - Pydantic models for patient profile data.
"""
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
from ..auth.schemas import UserResponse

class PatientProfileUpdate(BaseModel):
    """
    Patient Profile Update Schema - Used when a patient edits their own profile
    """
    full_name: Optional[str] = Field(None, min_length=1)
    gender: Optional[str] = None
    contact: Optional[str] = None
    profile_image: Optional[str] = None
    age: Optional[int] = Field(None, ge=0, le=150)
    address: Optional[str] = None
    medical_history: Optional[str] = None
    allergies: Optional[str] = None

class PatientResponse(BaseModel):
    """
    Patient Response Schema - Used when returning patient data
    """
    id: int
    user: UserResponse
    age: Optional[int] = None
    address: Optional[str] = None
    medical_history: Optional[str] = None
    allergies: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
