"""
Prescription Schemas - Pydantic models for prescriptions.
"""
from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime

class Medicine(BaseModel):
    """
    One prescribed medicine

    Fields:
    - name: Medicine name
    - dosage: Amount per dose, e.g. "500mg"
    - frequency: How often, e.g. "twice a day"
    - duration: For how long, e.g. "5 days"
    """
    name: str = Field(..., min_length=1)
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None

class PrescriptionCreate(BaseModel):
    """
    Prescription Create Schema - Written by the doctor for one appointment
    """
    appointment_id: int
    diagnosis: Optional[str] = None
    medicines: List[Medicine] = Field(default_factory=list)
    notes: Optional[str] = None

class PrescriptionResponse(BaseModel):
    """
    Prescription Response Schema - Used when returning prescription history
    """
    id: int
    appointment_id: int
    doctor_id: int
    patient_id: int
    diagnosis: Optional[str] = None
    medicines: List[Medicine] = []
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True
