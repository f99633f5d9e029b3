"""
Appointment Router - API endpoints for booking and managing appointments.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth.dependencies import get_current_active_user, require_doctor, require_patient, require_doctor_or_patient
from ..auth.models import User, UserRole
from ..doctors.service import get_doctor_profile_by_user_id
from ..patients.service import get_patient_profile_by_user_id
from .models import AppointmentStatus
from .schemas import AppointmentCreate, AppointmentRating, AppointmentResponse
from .service import (
    book_appointment,
    cancel_appointment,
    complete_appointment,
    confirm_appointment,
    get_appointment_for_user,
    list_for_doctor,
    list_for_patient,
    rate_appointment,
)

router = APIRouter()

@router.post("/", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment_route(
    booking: AppointmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_patient)
):
    """
    Book an open slot with a doctor

    Responds 409 if someone else booked the slot first.
    """
    patient = get_patient_profile_by_user_id(db, current_user.id)
    return book_appointment(
        db,
        patient_id=patient.id,
        doctor_id=booking.doctor_id,
        date=booking.date,
        time_slot=booking.time_slot,
        reason=booking.reason,
    )

@router.get("/me", response_model=List[AppointmentResponse])
async def list_my_appointments(
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status", description="Filter by status"),
    date: Optional[str] = Query(None, description="Doctors only: filter by date (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor_or_patient)
):
    """
    List the current user's appointments

    Patients see what they booked; doctors see their schedule.
    """
    if current_user.role == UserRole.DOCTOR:
        doctor = get_doctor_profile_by_user_id(db, current_user.id)
        return list_for_doctor(db, doctor.id, status_filter, date)
    patient = get_patient_profile_by_user_id(db, current_user.id)
    return list_for_patient(db, patient.id, status_filter)

@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment_route(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get one appointment the current user takes part in
    """
    return get_appointment_for_user(db, appointment_id, current_user)

@router.post("/{appointment_id}/confirm", response_model=AppointmentResponse)
async def confirm_appointment_route(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor)
):
    """
    Approve a requested appointment
    """
    return confirm_appointment(db, appointment_id, current_user)

@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment_route(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Cancel an appointment and release its slot

    Allowed for the patient, the doctor, and admins.
    """
    return cancel_appointment(db, appointment_id, current_user)

@router.post("/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment_route(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor)
):
    """
    Mark a confirmed appointment as done
    """
    return complete_appointment(db, appointment_id, current_user)

@router.post("/{appointment_id}/rating", response_model=AppointmentResponse)
async def rate_appointment_route(
    appointment_id: int,
    rating_data: AppointmentRating,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_patient)
):
    """
    Rate the doctor for a completed appointment
    """
    return rate_appointment(db, appointment_id, current_user, rating_data.rating)
