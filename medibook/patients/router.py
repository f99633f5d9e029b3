"""
Patient Router - API endpoints for a patient's own profile.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth.dependencies import require_patient
from ..auth.models import User
from .schemas import PatientProfileUpdate, PatientResponse
from .service import get_patient_profile_by_user_id, update_patient_profile

router = APIRouter()

@router.get("/me", response_model=PatientResponse)
async def get_my_patient_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_patient)
):
    """
    Get the current patient's profile
    """
    return get_patient_profile_by_user_id(db, current_user.id)

@router.put("/me", response_model=PatientResponse)
async def update_my_patient_profile(
    profile_data: PatientProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_patient)
):
    """
    Update the current patient's profile
    """
    patient = get_patient_profile_by_user_id(db, current_user.id)
    return update_patient_profile(db, patient, profile_data)
