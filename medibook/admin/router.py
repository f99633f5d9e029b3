"""
Admin Router - API endpoints for managing doctors and viewing patients.

Every endpoint requires an administrator token.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth.dependencies import require_admin
from ..auth.models import User
from ..doctors.schemas import DoctorResponse
from ..patients.schemas import PatientResponse
from .schemas import DoctorCreate
from .service import add_doctor, list_doctors, remove_doctor, list_patients

router = APIRouter()

@router.post("/doctors", response_model=DoctorResponse, status_code=status.HTTP_201_CREATED)
async def add_doctor_route(
    doctor_data: DoctorCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Add a doctor

    The response never includes the password or its hash.
    """
    return add_doctor(db, doctor_data)

@router.get("/doctors", response_model=List[DoctorResponse])
async def list_doctors_route(
    specialization: Optional[str] = Query(None, description="Filter by specialization"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    List every doctor
    """
    return list_doctors(db, specialization)

@router.delete("/doctors/{doctor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_doctor_route(
    doctor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    Remove a doctor

    Refused with 409 while the doctor has requested or confirmed appointments.
    """
    remove_doctor(db, doctor_id)

@router.get("/patients", response_model=List[PatientResponse])
async def list_patients_route(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """
    List every patient
    """
    return list_patients(db)
