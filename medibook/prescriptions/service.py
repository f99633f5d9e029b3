"""
Prescription Service - Writing prescriptions and reading prescription history.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
import logging

from ..auth.models import User
from ..auth.exceptions import PermissionDeniedException
from ..exceptions import InvalidTransitionException, PrescriptionExistsException
from ..appointments.models import AppointmentStatus
from ..appointments.service import get_appointment, is_doctor_of
from .models import Prescription
from .schemas import PrescriptionCreate

# Set up logging
logger = logging.getLogger(__name__)

# Appointment statuses a prescription can be written against
PRESCRIBABLE_STATUSES = (AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED)

def create_prescription(db: Session, actor: User, prescription_data: PrescriptionCreate) -> Prescription:
    """
    Write a prescription for an appointment.

    Args:
        db: Database session
        actor: Doctor writing the prescription
        prescription_data: Diagnosis, medicines and notes

    Returns:
        Prescription: The new prescription

    Raises:
        ResourceNotFoundException: If the appointment does not exist
        PermissionDeniedException: If the actor is not the appointment's doctor
        InvalidTransitionException: If the appointment is requested or cancelled
        PrescriptionExistsException: If the appointment already has one
    """
    appointment = get_appointment(db, prescription_data.appointment_id)
    if not is_doctor_of(appointment, actor):
        raise PermissionDeniedException("Only the appointment's doctor can write its prescription")
    if appointment.status not in PRESCRIBABLE_STATUSES:
        raise InvalidTransitionException(AppointmentStatus(appointment.status).value, "PRESCRIBED")
    if appointment.prescription is not None:
        raise PrescriptionExistsException(appointment.id)

    prescription = Prescription(
        appointment_id=appointment.id,
        doctor_id=appointment.doctor_id,
        patient_id=appointment.patient_id,
        diagnosis=prescription_data.diagnosis,
        medicines=[medicine.model_dump() for medicine in prescription_data.medicines],
        notes=prescription_data.notes,
    )
    db.add(prescription)

    try:
        db.commit()
        db.refresh(prescription)
    except IntegrityError:
        db.rollback()
        logger.warning(f"Prescription for appointment {appointment.id} refused: written concurrently")
        raise PrescriptionExistsException(appointment.id)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating prescription for appointment {appointment.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while saving the prescription"
        )

    logger.info(f"Prescription {prescription.id} written for appointment {appointment.id}")
    return prescription

def list_for_patient(db: Session, patient_id: int) -> List[Prescription]:
    """Prescription history of a patient, newest first."""
    return (
        db.query(Prescription)
        .filter(Prescription.patient_id == patient_id)
        .order_by(Prescription.id.desc())
        .all()
    )

def list_for_doctor(db: Session, doctor_id: int, patient_id: Optional[int] = None) -> List[Prescription]:
    """Prescriptions a doctor has written, optionally for one patient."""
    query = db.query(Prescription).filter(Prescription.doctor_id == doctor_id)
    if patient_id is not None:
        query = query.filter(Prescription.patient_id == patient_id)
    return query.order_by(Prescription.id.desc()).all()
