"""
Appointment Service - Booking and the appointment lifecycle.

Booking takes a slot out of the doctor's availability and creates the
appointment in the same transaction; cancelling puts the slot back in the
same transaction as the status change. Nothing here retries: a booking that
loses a race for a slot fails with SlotUnavailableException.
"""
from typing import List, Optional
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
import logging

from ..config import settings
from ..auth.models import User, UserRole
from ..auth.exceptions import PermissionDeniedException
from ..exceptions import (
    ResourceNotFoundException,
    ValidationException,
    InvalidTransitionException,
    SlotNotFoundException,
    SlotUnavailableException,
)
from ..availability.service import consume_slot, restore_slot, validate_date, validate_time_slot
from ..doctors.service import get_doctor_profile, record_consultation, record_rating
from ..patients.service import get_patient_profile
from .models import Appointment, AppointmentStatus, OPEN_STATUSES, statuses_leading_to

# Set up logging
logger = logging.getLogger(__name__)

def _commit(db: Session, appointment: Appointment, action: str) -> Appointment:
    try:
        db.commit()
        db.refresh(appointment)
        return appointment
    except Exception as e:
        db.rollback()
        logger.error(f"Error while trying to {action} appointment {appointment.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"An error occurred while trying to {action} the appointment"
        )

def get_appointment(db: Session, appointment_id: int) -> Appointment:
    """
    Get an appointment by ID.

    Raises:
        ResourceNotFoundException: If appointment not found
    """
    appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
    if not appointment:
        raise ResourceNotFoundException(f"Appointment {appointment_id} not found")
    return appointment

def is_doctor_of(appointment: Appointment, user: User) -> bool:
    return user.role == UserRole.DOCTOR and appointment.doctor.user_id == user.id

def is_patient_of(appointment: Appointment, user: User) -> bool:
    return user.role == UserRole.PATIENT and appointment.patient.user_id == user.id

def get_appointment_for_user(db: Session, appointment_id: int, user: User) -> Appointment:
    """
    Get an appointment the user takes part in. Admins can see any appointment.

    Raises:
        ResourceNotFoundException: If appointment not found
        PermissionDeniedException: If the user is not a participant
    """
    appointment = get_appointment(db, appointment_id)
    if user.role != UserRole.ADMIN and not (is_doctor_of(appointment, user) or is_patient_of(appointment, user)):
        raise PermissionDeniedException("You don't have access to this appointment")
    return appointment

def book_appointment(
    db: Session,
    patient_id: int,
    doctor_id: int,
    date: str,
    time_slot: str,
    reason: Optional[str] = None
) -> Appointment:
    """
    Book one of a doctor's open slots for a patient.

    The slot is marked booked with a conditional update and the appointment
    row is inserted in the same commit. The appointment starts CONFIRMED, or
    REQUESTED when bookings need the doctor's approval.

    Args:
        db: Database session
        patient_id: ID of the patient profile
        doctor_id: ID of the doctor profile
        date: Calendar date, YYYY-MM-DD
        time_slot: Time of day, HH:MM
        reason: Why the patient is booking (optional)

    Returns:
        Appointment: The new appointment

    Raises:
        ValidationException: If date or slot is malformed
        ResourceNotFoundException: If doctor or patient not found
        SlotNotFoundException: If the doctor never offered the slot
        SlotUnavailableException: If the slot is already booked
    """
    validate_date(date)
    validate_time_slot(time_slot)
    doctor = get_doctor_profile(db, doctor_id)
    patient = get_patient_profile(db, patient_id)

    try:
        consume_slot(db, doctor_id, date, time_slot)
    except (SlotNotFoundException, SlotUnavailableException) as e:
        db.rollback()
        logger.warning(f"Booking refused for patient {patient_id} with doctor {doctor_id}: {e.detail}")
        raise

    initial_status = (
        AppointmentStatus.REQUESTED if settings.appointment_requires_approval
        else AppointmentStatus.CONFIRMED
    )
    appointment = Appointment(
        doctor_id=doctor_id,
        patient_id=patient_id,
        date=date,
        time_slot=time_slot,
        status=initial_status,
        reason=reason,
    )
    db.add(appointment)
    if patient not in doctor.patients:
        doctor.patients.append(patient)

    try:
        db.commit()
        db.refresh(appointment)
    except Exception as e:
        db.rollback()
        logger.error(f"Error booking {date} {time_slot} with doctor {doctor_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while booking the appointment"
        )

    logger.info(
        f"Appointment {appointment.id} booked: patient {patient_id}, doctor {doctor_id}, "
        f"{date} {time_slot} ({initial_status.value})"
    )
    return appointment

def _apply_transition(db: Session, appointment: Appointment, target: AppointmentStatus, **values) -> None:
    """
    Move an appointment to ``target`` with a conditional UPDATE.

    The row only changes if its stored status may still lead to ``target``,
    so of two concurrent requests exactly one wins. Does not commit.

    Raises:
        InvalidTransitionException: If the stored status does not allow the move
    """
    current = AppointmentStatus(appointment.status)
    if not appointment.can_transition_to(target):
        raise InvalidTransitionException(current.value, target.value)

    changes = {Appointment.status: target, Appointment.updated_at: datetime.now(timezone.utc)}
    changes.update({getattr(Appointment, field): value for field, value in values.items()})
    updated = (
        db.query(Appointment)
        .filter(Appointment.id == appointment.id, Appointment.status.in_(statuses_leading_to(target)))
        .update(changes, synchronize_session=False)
    )
    if updated != 1:
        db.rollback()
        # Another request moved it first; report the status it now has
        current = AppointmentStatus(appointment.status)
        logger.warning(f"Appointment {appointment.id} already moved to {current.value}; {target.value} refused")
        raise InvalidTransitionException(current.value, target.value)

def confirm_appointment(db: Session, appointment_id: int, actor: User) -> Appointment:
    """
    Doctor approves a REQUESTED appointment.

    Raises:
        PermissionDeniedException: If the actor is not the appointment's doctor
        InvalidTransitionException: If the appointment is not REQUESTED
    """
    appointment = get_appointment(db, appointment_id)
    if not is_doctor_of(appointment, actor):
        raise PermissionDeniedException("Only the appointment's doctor can confirm it")

    _apply_transition(db, appointment, AppointmentStatus.CONFIRMED)
    _commit(db, appointment, "confirm")
    logger.info(f"Appointment {appointment_id} confirmed by doctor {appointment.doctor_id}")
    return appointment

def cancel_appointment(db: Session, appointment_id: int, actor: User) -> Appointment:
    """
    Cancel an appointment and give its slot back to the doctor.

    The patient, the doctor, or an admin may cancel. The slot is only
    restored by the request whose status change went through, in the same
    commit.

    Args:
        db: Database session
        appointment_id: ID of the appointment
        actor: User cancelling

    Returns:
        Appointment: The cancelled appointment

    Raises:
        PermissionDeniedException: If the actor is not a participant or admin
        InvalidTransitionException: If the appointment is COMPLETED or CANCELLED
    """
    appointment = get_appointment_for_user(db, appointment_id, actor)

    _apply_transition(db, appointment, AppointmentStatus.CANCELLED, cancelled_by=actor.role.value)
    restore_slot(db, appointment.doctor_id, appointment.date, appointment.time_slot)

    _commit(db, appointment, "cancel")
    logger.info(
        f"Appointment {appointment_id} cancelled by {actor.role.value} {actor.id}; "
        f"slot {appointment.date} {appointment.time_slot} restored"
    )
    return appointment

def complete_appointment(db: Session, appointment_id: int, actor: User) -> Appointment:
    """
    Doctor marks a CONFIRMED appointment as done.

    Raises:
        PermissionDeniedException: If the actor is not the appointment's doctor
        InvalidTransitionException: If the appointment is not CONFIRMED
    """
    appointment = get_appointment(db, appointment_id)
    if not is_doctor_of(appointment, actor):
        raise PermissionDeniedException("Only the appointment's doctor can complete it")

    _apply_transition(db, appointment, AppointmentStatus.COMPLETED)
    record_consultation(db, appointment.doctor_id)

    _commit(db, appointment, "complete")
    logger.info(f"Appointment {appointment_id} completed by doctor {appointment.doctor_id}")
    return appointment

def _rating_refusal(appointment: Appointment) -> ValidationException:
    if appointment.status != AppointmentStatus.COMPLETED:
        return ValidationException("Only completed appointments can be rated")
    return ValidationException("Appointment has already been rated")

def rate_appointment(db: Session, appointment_id: int, actor: User, rating: int) -> Appointment:
    """
    Patient rates the doctor after a completed appointment, once.

    The rating is written only if the row is still completed and unrated,
    so a repeated submission never counts twice toward the doctor's mean.

    Raises:
        PermissionDeniedException: If the actor is not the appointment's patient
        ValidationException: If the rating is out of range, the appointment is
            not completed, or it was already rated
    """
    if not 1 <= rating <= 5:
        raise ValidationException("Rating must be between 1 and 5")

    appointment = get_appointment(db, appointment_id)
    if not is_patient_of(appointment, actor):
        raise PermissionDeniedException("Only the appointment's patient can rate it")
    if appointment.status != AppointmentStatus.COMPLETED or appointment.rating is not None:
        raise _rating_refusal(appointment)

    updated = (
        db.query(Appointment)
        .filter(
            Appointment.id == appointment_id,
            Appointment.status == AppointmentStatus.COMPLETED,
            Appointment.rating.is_(None),
        )
        .update({Appointment.rating: rating}, synchronize_session=False)
    )
    if updated != 1:
        db.rollback()
        logger.warning(f"Rating for appointment {appointment_id} refused: rated concurrently")
        raise _rating_refusal(appointment)

    record_rating(db, appointment.doctor_id, rating)

    _commit(db, appointment, "rate")
    logger.info(f"Appointment {appointment_id} rated {rating} for doctor {appointment.doctor_id}")
    return appointment

def list_for_patient(
    db: Session,
    patient_id: int,
    status_filter: Optional[AppointmentStatus] = None
) -> List[Appointment]:
    query = db.query(Appointment).filter(Appointment.patient_id == patient_id)
    if status_filter:
        query = query.filter(Appointment.status == status_filter)
    return query.order_by(Appointment.date, Appointment.time_slot).all()

def list_for_doctor(
    db: Session,
    doctor_id: int,
    status_filter: Optional[AppointmentStatus] = None,
    date: Optional[str] = None
) -> List[Appointment]:
    query = db.query(Appointment).filter(Appointment.doctor_id == doctor_id)
    if status_filter:
        query = query.filter(Appointment.status == status_filter)
    if date:
        query = query.filter(Appointment.date == validate_date(date))
    return query.order_by(Appointment.date, Appointment.time_slot).all()

def count_open_for_doctor(db: Session, doctor_id: int) -> int:
    return db.query(Appointment).filter(
        Appointment.doctor_id == doctor_id,
        Appointment.status.in_(OPEN_STATUSES)
    ).count()
