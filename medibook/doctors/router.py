"""
Doctor Router - The doctor directory and a doctor's own profile.

Doctor accounts are created by administrators through /api/v1/admin/doctors;
these endpoints only read the directory and edit an existing profile.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth.dependencies import get_current_active_user, require_doctor
from ..auth.models import User
from .schemas import DoctorProfileUpdate, DoctorResponse, DoctorListResponse, DoctorSearchParams
from .service import get_doctor_profile, get_doctor_profile_by_user_id, update_doctor_profile, search_doctors

router = APIRouter()

@router.get("/me", response_model=DoctorResponse)
async def get_my_doctor_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor)
):
    return get_doctor_profile_by_user_id(db, current_user.id)

@router.put("/me", response_model=DoctorResponse)
async def update_my_doctor_profile(
    profile_data: DoctorProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor)
):
    """
    Edit the current doctor's profile

    Only the fields sent are changed.
    """
    doctor = get_doctor_profile_by_user_id(db, current_user.id)
    return update_doctor_profile(db, doctor, profile_data)

@router.get("/", response_model=DoctorListResponse)
async def browse_doctors(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(10, ge=1, le=100, description="Doctors per page"),
    specialization: Optional[str] = Query(None, description="Specialization contains"),
    name: Optional[str] = Query(None, description="Name or email contains"),
    min_rating: Optional[float] = Query(None, ge=0, le=5, description="Minimum average rating"),
    available_on: Optional[str] = Query(
        None, pattern=r"^\d{4}-\d{2}-\d{2}$", description="Has an open slot on this date (YYYY-MM-DD)"
    ),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Browse the doctor directory

    Filters combine; results are ordered by doctor ID.
    """
    filters = DoctorSearchParams(
        specialization=specialization,
        name=name,
        min_rating=min_rating,
        available_on=available_on,
    )
    doctors, total, total_pages = search_doctors(db, page, page_size, filters)

    return DoctorListResponse(
        doctors=[DoctorResponse.model_validate(doctor) for doctor in doctors],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages
    )

@router.get("/{doctor_id}", response_model=DoctorResponse)
async def get_doctor(
    doctor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    return get_doctor_profile(db, doctor_id)
