"""
Patient Service - Business logic for patient profiles.
"""
from typing import List
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
import logging
from datetime import datetime, timezone

from ..exceptions import ResourceNotFoundException
from .models import Patient
from .schemas import PatientProfileUpdate

# Set up logging
logger = logging.getLogger(__name__)

USER_FIELDS = {"full_name", "gender", "contact", "profile_image"}

def get_patient_profile(db: Session, patient_id: int) -> Patient:
    """
    Get a patient profile by ID.

    Raises:
        ResourceNotFoundException: If patient profile not found
    """
    patient = db.query(Patient).filter(Patient.id == patient_id).first()
    if not patient:
        raise ResourceNotFoundException(f"Patient {patient_id} not found")
    return patient

def get_patient_profile_by_user_id(db: Session, user_id: int) -> Patient:
    patient = db.query(Patient).filter(Patient.user_id == user_id).first()
    if not patient:
        raise ResourceNotFoundException("Patient profile not found")
    return patient

def update_patient_profile(db: Session, patient: Patient, profile_data: PatientProfileUpdate) -> Patient:
    """
    Update a patient profile and the identity fields on its user.

    Args:
        db: Database session
        patient: Patient profile to update
        profile_data: Updated profile data

    Returns:
        Patient: Updated patient profile
    """
    update_data = profile_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if field in USER_FIELDS:
            setattr(patient.user, field, value)
        else:
            setattr(patient, field, value)
    patient.updated_at = datetime.now(timezone.utc)

    try:
        db.commit()
        db.refresh(patient)
        logger.info(f"Patient profile {patient.id} updated: {sorted(update_data)}")
        return patient
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating patient profile {patient.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating the patient profile"
        )

def list_patients(db: Session) -> List[Patient]:
    """Get every patient, ordered by ID."""
    return db.query(Patient).order_by(Patient.id).all()
