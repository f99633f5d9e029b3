"""
Admin Service - Managing the doctor directory and viewing patients.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
import logging

from ..auth.models import UserRole
from ..auth.service import build_user, commit_new_account
from ..exceptions import DoctorHasActiveAppointmentsException
from ..doctors.models import Doctor
from ..availability.models import AvailabilitySlot
from ..doctors.service import get_doctor_profile, list_doctors as list_doctor_profiles
from ..patients.models import Patient
from ..patients.service import list_patients as list_patient_profiles
from ..appointments.service import count_open_for_doctor
from .schemas import DoctorCreate

# Set up logging
logger = logging.getLogger(__name__)

def add_doctor(db: Session, doctor_data: DoctorCreate) -> Doctor:
    """
    Create a doctor account and its profile.

    Args:
        db: Database session
        doctor_data: Account and profile fields

    Returns:
        Doctor: The new doctor profile

    Raises:
        EmailAlreadyExistsException: If the email is already registered;
            no record is created in that case
    """
    logger.info(f"Adding doctor {doctor_data.email}")
    user = build_user(
        db,
        email=doctor_data.email,
        full_name=doctor_data.full_name,
        password=doctor_data.password,
        role=UserRole.DOCTOR,
        gender=doctor_data.gender,
        contact=doctor_data.contact,
        profile_image=doctor_data.profile_image,
    )
    doctor = Doctor(
        age=doctor_data.age,
        specialization=doctor_data.specialization,
        degree=doctor_data.degree,
        experience=doctor_data.experience,
        bio=doctor_data.bio,
        average_rating=0.0,
        total_ratings=0,
        consultation_count=0,
    )
    user.doctor_profile = doctor

    commit_new_account(db, user)
    db.refresh(doctor)
    logger.info(f"Doctor {doctor.id} added for user {user.id}")
    return doctor

def list_doctors(db: Session, specialization: Optional[str] = None) -> List[Doctor]:
    """Every doctor, optionally filtered by specialization."""
    return list_doctor_profiles(db, specialization)

def remove_doctor(db: Session, doctor_id: int) -> None:
    """
    Delete a doctor together with their account, slots and history.

    The doctor's open slots are withdrawn before the open-appointment check
    and in the same transaction. A booking can then no longer start, and one
    that committed first is seen by the check, so removal never deletes an
    appointment that is still requested or confirmed.

    Args:
        db: Database session
        doctor_id: ID of the doctor profile

    Raises:
        ResourceNotFoundException: If doctor profile not found
        DoctorHasActiveAppointmentsException: If requested or confirmed
            appointments still reference the doctor
    """
    doctor = get_doctor_profile(db, doctor_id)

    withdrawn = (
        db.query(AvailabilitySlot)
        .filter(AvailabilitySlot.doctor_id == doctor_id, AvailabilitySlot.is_booked.is_(False))
        .delete(synchronize_session=False)
    )
    open_count = count_open_for_doctor(db, doctor_id)
    if open_count:
        db.rollback()
        logger.warning(f"Refusing to remove doctor {doctor_id}: {open_count} open appointment(s)")
        raise DoctorHasActiveAppointmentsException(open_count)

    try:
        # Slot objects loaded earlier may belong to rows deleted above
        db.expire_all()
        db.delete(doctor.user)
        db.commit()
        logger.info(f"Doctor {doctor_id} removed ({withdrawn} open slot(s) withdrawn)")
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting doctor {doctor_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while deleting the doctor"
        )

def list_patients(db: Session) -> List[Patient]:
    """Every patient, for administrative views."""
    return list_patient_profiles(db)
