"""
Doctor Schemas - Pydantic models for doctor profile data validation and serialization.

Doctor accounts are created by administrators; see the admin schemas.
"""
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime
from ..auth.schemas import UserResponse

class DoctorProfileBase(BaseModel):
    """
    Professional fields shared by create and update payloads

    Fields:
    - age: Doctor's age
    - specialization: Doctor's medical specialization
    - degree: Medical degree(s)
    - experience: Experience summary, e.g. "8 years"
    - bio: Professional biography
    """
    age: Optional[int] = Field(None, ge=18, le=120, description="Doctor's age")
    specialization: Optional[str] = Field(None, description="Doctor's medical specialization")
    degree: Optional[str] = Field(None, description="Medical degree(s)")
    experience: Optional[str] = Field(None, description="Experience summary")
    bio: Optional[str] = Field(None, description="Professional biography")

class DoctorProfileUpdate(DoctorProfileBase):
    """
    Doctor Profile Update Schema - Used when a doctor edits their own profile

    Also accepts the identity fields stored on the user account.
    """
    full_name: Optional[str] = Field(None, min_length=1)
    gender: Optional[str] = None
    contact: Optional[str] = None
    profile_image: Optional[str] = None

class DoctorResponse(BaseModel):
    """
    Doctor Response Schema - Used when returning doctor data
    """
    id: int
    user: UserResponse
    age: Optional[int] = None
    specialization: Optional[str] = None
    degree: Optional[str] = None
    experience: Optional[str] = None
    bio: Optional[str] = None
    average_rating: float = 0.0
    total_ratings: int = 0
    consultation_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class DoctorListResponse(BaseModel):
    """
    Doctor List Response Schema - Used when returning a page of doctors
    """
    doctors: List[DoctorResponse]
    total: int
    page: int
    page_size: int
    total_pages: int

class DoctorSearchParams(BaseModel):
    """
    Doctor Search Parameters Schema - Used for filtering doctor lists

    Fields:
    - specialization: Filter by specialization
    - name: Search by doctor's name or email
    - min_rating: Only doctors rated at least this high
    - available_on: Only doctors with an open slot on this date (YYYY-MM-DD)
    """
    specialization: Optional[str] = None
    name: Optional[str] = None
    min_rating: Optional[float] = Field(None, ge=0, le=5)
    available_on: Optional[str] = None
