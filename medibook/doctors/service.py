"""
Doctor Service - Profile lookups, self-service edits and the doctor directory.

The directory is shared by patients browsing for a doctor (paginated, with
name, rating and open-date filters) and by administrators (full list).
"""
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session, Query
from sqlalchemy import or_, func
from fastapi import HTTPException, status
import logging
from datetime import datetime, timezone

from ..auth.models import User
from ..availability.models import AvailabilitySlot
from ..exceptions import ResourceNotFoundException
from .models import Doctor
from .schemas import DoctorProfileUpdate, DoctorSearchParams

logger = logging.getLogger(__name__)

# Editable through the doctor profile but stored on the account
USER_FIELDS = {"full_name", "gender", "contact", "profile_image"}

def get_doctor_profile(db: Session, doctor_id: int) -> Doctor:
    """
    Get a doctor profile by ID.

    Raises:
        ResourceNotFoundException: If doctor profile not found
    """
    doctor = db.get(Doctor, doctor_id)
    if not doctor:
        raise ResourceNotFoundException(f"Doctor {doctor_id} not found")
    return doctor

def get_doctor_profile_by_user_id(db: Session, user_id: int) -> Doctor:
    doctor = db.query(Doctor).filter(Doctor.user_id == user_id).first()
    if not doctor:
        raise ResourceNotFoundException("No doctor profile for this account")
    return doctor

def update_doctor_profile(db: Session, doctor: Doctor, profile_data: DoctorProfileUpdate) -> Doctor:
    """
    Apply a partial profile edit made by the doctor.

    Only fields present in the request are touched. Name, gender, contact
    and picture live on the user account; the rest on the profile.

    Args:
        db: Database session
        doctor: The doctor's own profile
        profile_data: Fields to change

    Returns:
        Doctor: The refreshed profile
    """
    changes = profile_data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        target = doctor.user if field in USER_FIELDS else doctor
        setattr(target, field, value)
    doctor.updated_at = datetime.now(timezone.utc)

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating doctor profile {doctor.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating the doctor profile"
        )

    db.refresh(doctor)
    logger.info(f"Doctor profile {doctor.id} updated: {sorted(changes)}")
    return doctor

def _directory_query(db: Session, filters: DoctorSearchParams) -> Query:
    query = db.query(Doctor).join(User, Doctor.user_id == User.id)

    if filters.specialization:
        query = query.filter(Doctor.specialization.ilike(f"%{filters.specialization}%"))
    if filters.name:
        pattern = f"%{filters.name}%"
        query = query.filter(or_(User.full_name.ilike(pattern), User.email.ilike(pattern)))
    if filters.min_rating is not None:
        query = query.filter(Doctor.average_rating >= filters.min_rating)
    if filters.available_on:
        open_slot = db.query(AvailabilitySlot.id).filter(
            AvailabilitySlot.doctor_id == Doctor.id,
            AvailabilitySlot.date == filters.available_on,
            AvailabilitySlot.is_booked.is_(False),
        )
        query = query.filter(open_slot.exists())

    return query.order_by(Doctor.id)

def list_doctors(db: Session, specialization: Optional[str] = None) -> List[Doctor]:
    """Every doctor, optionally narrowed by a case-insensitive specialization match."""
    return _directory_query(db, DoctorSearchParams(specialization=specialization)).all()

def search_doctors(
    db: Session,
    page: int,
    page_size: int,
    filters: DoctorSearchParams
) -> Tuple[List[Doctor], int, int]:
    """
    One page of the doctor directory.

    Args:
        db: Database session
        page: Page number, starting at 1
        page_size: Doctors per page
        filters: Directory filters

    Returns:
        (doctors on the page, matching doctors, number of pages)
    """
    query = _directory_query(db, filters)
    total = query.count()
    doctors = query.offset((page - 1) * page_size).limit(page_size).all()
    return doctors, total, -(-total // page_size)

def record_consultation(db: Session, doctor_id: int) -> None:
    """Count one more completed appointment. Does not commit."""
    db.query(Doctor).filter(Doctor.id == doctor_id).update(
        {
            Doctor.consultation_count: Doctor.consultation_count + 1,
            Doctor.updated_at: func.now(),
        },
        synchronize_session=False
    )

def record_rating(db: Session, doctor_id: int, rating: int) -> None:
    """
    Fold a 1-5 rating into the doctor's running mean. Does not commit.

    The new mean is computed by the database from the stored values, so
    ratings committed concurrently are all counted.
    """
    db.query(Doctor).filter(Doctor.id == doctor_id).update(
        {
            Doctor.average_rating: (Doctor.average_rating * Doctor.total_ratings + rating) / (Doctor.total_ratings + 1),
            Doctor.total_ratings: Doctor.total_ratings + 1,
            Doctor.updated_at: func.now(),
        },
        synchronize_session=False
    )
