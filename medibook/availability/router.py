"""
Availability Router - API endpoints for a doctor's bookable slots.

Mounted under the doctors prefix: doctors manage their own slots through
/me/availability, everyone signed in can read any doctor's open slots.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth.dependencies import get_current_active_user, require_doctor
from ..auth.models import User
from ..doctors.service import get_doctor_profile_by_user_id
from .schemas import AvailabilityCreate, AvailabilityRemove, AvailabilityResponse
from .service import add_availability, list_availability, remove_availability

router = APIRouter()

@router.get("/me/availability", response_model=AvailabilityResponse)
async def get_my_availability(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor)
):
    """
    Get the current doctor's open slots
    """
    doctor = get_doctor_profile_by_user_id(db, current_user.id)
    return AvailabilityResponse(doctor_id=doctor.id, availability=list_availability(db, doctor.id))

@router.post("/me/availability", response_model=AvailabilityResponse)
async def add_my_availability(
    availability_data: AvailabilityCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor)
):
    """
    Add time slots for a date

    Slots already offered for that date are ignored, so posting the same
    body twice is harmless.
    """
    doctor = get_doctor_profile_by_user_id(db, current_user.id)
    availability = add_availability(db, doctor.id, availability_data.date, availability_data.time_slots)
    return AvailabilityResponse(doctor_id=doctor.id, availability=availability)

@router.delete("/me/availability", response_model=AvailabilityResponse)
async def remove_my_availability(
    removal: AvailabilityRemove,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_doctor)
):
    """
    Withdraw open slots for a date. Booked slots stay with their appointments.
    """
    doctor = get_doctor_profile_by_user_id(db, current_user.id)
    availability = remove_availability(db, doctor.id, removal.date, removal.time_slots)
    return AvailabilityResponse(doctor_id=doctor.id, availability=availability)

@router.get("/{doctor_id}/availability", response_model=AvailabilityResponse)
async def get_doctor_availability(
    doctor_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user)
):
    """
    Get a doctor's open slots, grouped by date
    """
    return AvailabilityResponse(doctor_id=doctor_id, availability=list_availability(db, doctor_id))
