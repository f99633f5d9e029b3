"""
Availability Service - The per-doctor ledger of bookable slots.

A slot is one (date, time) pair. Slots are merged into a doctor's ledger
without duplicates, listed as an ordered projection grouped by date, and
consumed with a conditional UPDATE so two bookings can never take the same
slot. ``consume_slot`` and ``restore_slot`` do not commit: the appointment
service commits them together with the appointment row.
"""
from typing import List, Dict, Any, Optional, Iterable
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import func
from fastapi import HTTPException, status
import logging
import re

from ..exceptions import ValidationException, SlotNotFoundException, SlotUnavailableException
from ..doctors.service import get_doctor_profile
from .models import AvailabilitySlot

# Set up logging
logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_SLOT_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

def validate_date(value: str) -> str:
    """
    Check that a value is a real calendar date written as YYYY-MM-DD.

    Raises:
        ValidationException: If the format or the date itself is wrong
    """
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise ValidationException(f"Invalid date '{value}'. Use YYYY-MM-DD")
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValidationException(f"Invalid date '{value}'. Not a calendar date")
    return value

def validate_time_slot(value: str) -> str:
    """
    Check that a value is a 24-hour HH:MM time.

    Raises:
        ValidationException: If the format is wrong
    """
    if not isinstance(value, str) or not TIME_SLOT_PATTERN.match(value):
        raise ValidationException(f"Invalid time slot '{value}'. Use HH:MM (24-hour)")
    return value

def project_slots(slots: Iterable[AvailabilitySlot]) -> List[Dict[str, Any]]:
    """
    Group slots by date, keeping the order in which they were added.

    Args:
        slots: Slots already sorted by position

    Returns:
        List of {"date", "time_slots"} entries
    """
    grouped: Dict[str, List[str]] = {}
    for slot in slots:
        grouped.setdefault(slot.date, []).append(slot.time_slot)
    return [{"date": date, "time_slots": time_slots} for date, time_slots in grouped.items()]

def _slot_query(db: Session, doctor_id: int, date: str, time_slot: Optional[str] = None):
    query = db.query(AvailabilitySlot).filter(
        AvailabilitySlot.doctor_id == doctor_id,
        AvailabilitySlot.date == date,
    )
    if time_slot is not None:
        query = query.filter(AvailabilitySlot.time_slot == time_slot)
    return query

def _next_position(db: Session, doctor_id: int) -> int:
    current = db.query(func.max(AvailabilitySlot.position)).filter(
        AvailabilitySlot.doctor_id == doctor_id
    ).scalar()
    return (current or 0) + 1

def list_availability(db: Session, doctor_id: int) -> List[Dict[str, Any]]:
    """
    Get the open slots of a doctor.

    Dates whose slots are all booked are left out.

    Args:
        db: Database session
        doctor_id: ID of the doctor profile

    Returns:
        Ordered list of {"date", "time_slots"} entries

    Raises:
        ResourceNotFoundException: If doctor profile not found
    """
    get_doctor_profile(db, doctor_id)
    slots = (
        db.query(AvailabilitySlot)
        .filter(AvailabilitySlot.doctor_id == doctor_id, AvailabilitySlot.is_booked.is_(False))
        .order_by(AvailabilitySlot.position)
        .all()
    )
    return project_slots(slots)

def add_availability(db: Session, doctor_id: int, date: str, time_slots: List[str]) -> List[Dict[str, Any]]:
    """
    Merge time slots for a date into a doctor's availability.

    Slots already present for that date (open or booked) and repeats within
    the request are skipped. New slots keep the order they were given in.

    Args:
        db: Database session
        doctor_id: ID of the doctor profile
        date: Calendar date, YYYY-MM-DD
        time_slots: Times of day, HH:MM

    Returns:
        The doctor's updated availability

    Raises:
        ValidationException: If the date or a slot is malformed, or no slots given
        ResourceNotFoundException: If doctor profile not found
    """
    validate_date(date)
    if not time_slots:
        raise ValidationException("At least one time slot is required")
    requested = [validate_time_slot(slot) for slot in time_slots]

    get_doctor_profile(db, doctor_id)

    existing = {row.time_slot for row in _slot_query(db, doctor_id, date).all()}
    position = _next_position(db, doctor_id)
    added = []
    for time_slot in requested:
        if time_slot in existing:
            continue
        existing.add(time_slot)
        db.add(AvailabilitySlot(
            doctor_id=doctor_id,
            date=date,
            time_slot=time_slot,
            position=position,
            is_booked=False,
        ))
        position += 1
        added.append(time_slot)

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error adding availability for doctor {doctor_id} on {date}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating availability"
        )

    logger.info(f"Doctor {doctor_id} availability on {date}: added {added}, skipped {len(requested) - len(added)}")
    return list_availability(db, doctor_id)

def remove_availability(
    db: Session,
    doctor_id: int,
    date: str,
    time_slots: Optional[List[str]] = None
) -> List[Dict[str, Any]]:
    """
    Remove open slots from a date. Booked slots are never removed.

    Args:
        db: Database session
        doctor_id: ID of the doctor profile
        date: Calendar date, YYYY-MM-DD
        time_slots: Slots to remove; every open slot of the date when omitted

    Returns:
        The doctor's updated availability

    Raises:
        ValidationException: If the date or a slot is malformed, or time_slots
            is an empty list
        SlotNotFoundException: If nothing matched
    """
    validate_date(date)
    if time_slots is not None and not time_slots:
        raise ValidationException("List the slots to remove, or omit time_slots to clear the date")
    get_doctor_profile(db, doctor_id)

    query = _slot_query(db, doctor_id, date).filter(AvailabilitySlot.is_booked.is_(False))
    if time_slots is not None:
        requested = [validate_time_slot(slot) for slot in time_slots]
        query = query.filter(AvailabilitySlot.time_slot.in_(requested))
    else:
        requested = None

    removed = query.delete(synchronize_session=False)
    if removed == 0:
        db.rollback()
        raise SlotNotFoundException(date, ", ".join(requested) if requested else "*")

    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error removing availability for doctor {doctor_id} on {date}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while updating availability"
        )

    logger.info(f"Doctor {doctor_id} availability on {date}: removed {removed} slot(s)")
    return list_availability(db, doctor_id)

def consume_slot(db: Session, doctor_id: int, date: str, time_slot: str) -> None:
    """
    Mark one open slot as booked, only if it is still open at write time.

    Runs inside the caller's transaction and does not commit.

    Args:
        db: Database session
        doctor_id: ID of the doctor profile
        date: Calendar date, YYYY-MM-DD
        time_slot: Time of day, HH:MM

    Raises:
        SlotNotFoundException: If the doctor never offered this slot
        SlotUnavailableException: If the slot is already booked
    """
    updated = (
        _slot_query(db, doctor_id, date, time_slot)
        .filter(AvailabilitySlot.is_booked.is_(False))
        .update({AvailabilitySlot.is_booked: True}, synchronize_session=False)
    )
    if updated == 1:
        return

    if _slot_query(db, doctor_id, date, time_slot).first() is None:
        raise SlotNotFoundException(date, time_slot)
    raise SlotUnavailableException(date, time_slot)

def restore_slot(db: Session, doctor_id: int, date: str, time_slot: str) -> None:
    """
    Give a booked slot back to the doctor's availability.

    The slot reopens where it was; if it has since been removed it is
    added again at the end. Does not commit.
    """
    reopened = (
        _slot_query(db, doctor_id, date, time_slot)
        .filter(AvailabilitySlot.is_booked.is_(True))
        .update({AvailabilitySlot.is_booked: False}, synchronize_session=False)
    )
    if reopened:
        return

    if _slot_query(db, doctor_id, date, time_slot).first() is None:
        db.add(AvailabilitySlot(
            doctor_id=doctor_id,
            date=date,
            time_slot=time_slot,
            position=_next_position(db, doctor_id),
            is_booked=False,
        ))
