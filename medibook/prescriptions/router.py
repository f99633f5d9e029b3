"""
Prescription Router - API endpoints for prescriptions and prescription history.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth.dependencies import require_doctor, require_doctor_or_patient
from ..auth.models import User, UserRole
from ..doctors.service import get_doctor_profile_by_user_id
from ..patients.service import get_patient_profile_by_user_id
from .schemas import PrescriptionCreate, PrescriptionResponse
from . import service

router = APIRouter()

@router.post("/", response_model=PrescriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_prescription_route(
    prescription_data: PrescriptionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor)
):
    """
    Write a prescription for one of the doctor's appointments
    """
    return service.create_prescription(db, current_user, prescription_data)

@router.get("/me", response_model=List[PrescriptionResponse])
async def list_my_prescriptions(
    patient_id: Optional[int] = Query(None, description="Doctors only: restrict to one patient"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_patient)
):
    """
    Prescription history

    Patients see prescriptions written for them; doctors see the ones they wrote.
    """
    if current_user.role == UserRole.DOCTOR:
        doctor = get_doctor_profile_by_user_id(db, current_user.id)
        return service.list_for_doctor(db, doctor.id, patient_id)
    patient = get_patient_profile_by_user_id(db, current_user.id)
    return service.list_for_patient(db, patient.id)
