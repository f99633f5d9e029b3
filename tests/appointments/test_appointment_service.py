"""
Tests for booking and the appointment lifecycle.
"""
import pytest

from medibook.config import settings
from medibook.exceptions import (
    ValidationException,
    ResourceNotFoundException,
    SlotNotFoundException,
    SlotUnavailableException,
    InvalidTransitionException,
)
from medibook.auth.exceptions import PermissionDeniedException
from medibook.appointments.models import Appointment, AppointmentStatus
from medibook.availability.service import add_availability, list_availability
from medibook.appointments.service import (
    book_appointment,
    cancel_appointment,
    complete_appointment,
    confirm_appointment,
    rate_appointment,
    list_for_doctor,
    list_for_patient,
    count_open_for_doctor,
)


@pytest.fixture
def schedule(db, make_doctor, make_patient):
    """A doctor offering 13:00 and 14:00 on 2025-05-11, and one patient."""
    doctor = make_doctor()
    patient = make_patient()
    add_availability(db, doctor.id, "2025-05-11", ["13:00", "14:00"])
    return doctor, patient


def test_booking_takes_slot(db, schedule):
    doctor, patient = schedule
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00", reason="Chest pain")

    assert appointment.status == AppointmentStatus.CONFIRMED
    assert appointment.reason == "Chest pain"
    assert list_availability(db, doctor.id) == [{"date": "2025-05-11", "time_slots": ["14:00"]}]
    assert patient in doctor.patients


def test_second_booking_of_same_slot_is_refused(db, schedule, make_patient):
    doctor, patient = schedule
    other = make_patient(email="other@example.com", full_name="Other Patient")
    book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")

    with pytest.raises(SlotUnavailableException):
        book_appointment(db, other.id, doctor.id, "2025-05-11", "13:00")

    assert db.query(Appointment).count() == 1
    assert list_availability(db, doctor.id) == [{"date": "2025-05-11", "time_slots": ["14:00"]}]


def test_booking_slot_never_offered(db, schedule):
    doctor, patient = schedule
    with pytest.raises(SlotNotFoundException):
        book_appointment(db, patient.id, doctor.id, "2025-05-11", "09:00")
    assert db.query(Appointment).count() == 0


def test_booking_malformed_slot(db, schedule):
    doctor, patient = schedule
    with pytest.raises(ValidationException):
        book_appointment(db, patient.id, doctor.id, "2025-05-11", "1pm")


def test_booking_unknown_doctor(db, schedule):
    _, patient = schedule
    with pytest.raises(ResourceNotFoundException):
        book_appointment(db, patient.id, 999, "2025-05-11", "13:00")


def test_booking_requires_approval_when_configured(db, schedule, monkeypatch):
    doctor, patient = schedule
    monkeypatch.setattr(settings, "appointment_requires_approval", True)

    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")
    assert appointment.status == AppointmentStatus.REQUESTED

    confirmed = confirm_appointment(db, appointment.id, doctor.user)
    assert confirmed.status == AppointmentStatus.CONFIRMED


def test_confirm_twice_is_invalid(db, schedule):
    doctor, patient = schedule
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")
    with pytest.raises(InvalidTransitionException):
        confirm_appointment(db, appointment.id, doctor.user)


def test_cancel_restores_slot_for_rebooking(db, schedule, make_patient):
    doctor, patient = schedule
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")

    cancelled = cancel_appointment(db, appointment.id, patient.user)
    assert cancelled.status == AppointmentStatus.CANCELLED
    assert cancelled.cancelled_by == "PATIENT"
    assert list_availability(db, doctor.id) == [{"date": "2025-05-11", "time_slots": ["13:00", "14:00"]}]

    other = make_patient(email="other@example.com", full_name="Other Patient")
    rebooked = book_appointment(db, other.id, doctor.id, "2025-05-11", "13:00")
    assert rebooked.status == AppointmentStatus.CONFIRMED


def test_doctor_and_admin_may_cancel(db, schedule, make_admin):
    doctor, patient = schedule
    admin = make_admin()
    first = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")
    second = book_appointment(db, patient.id, doctor.id, "2025-05-11", "14:00")

    assert cancel_appointment(db, first.id, doctor.user).cancelled_by == "DOCTOR"
    assert cancel_appointment(db, second.id, admin).cancelled_by == "ADMIN"


def test_stranger_cannot_cancel(db, schedule, make_patient):
    doctor, patient = schedule
    stranger = make_patient(email="stranger@example.com", full_name="Stranger")
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")

    with pytest.raises(PermissionDeniedException):
        cancel_appointment(db, appointment.id, stranger.user)
    assert list_availability(db, doctor.id) == [{"date": "2025-05-11", "time_slots": ["14:00"]}]


def test_cancel_twice_is_invalid(db, schedule):
    doctor, patient = schedule
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")
    cancel_appointment(db, appointment.id, patient.user)
    with pytest.raises(InvalidTransitionException):
        cancel_appointment(db, appointment.id, patient.user)


def test_completed_appointment_cannot_be_cancelled(db, schedule):
    doctor, patient = schedule
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")
    complete_appointment(db, appointment.id, doctor.user)

    with pytest.raises(InvalidTransitionException):
        cancel_appointment(db, appointment.id, patient.user)
    assert list_availability(db, doctor.id) == [{"date": "2025-05-11", "time_slots": ["14:00"]}]


def test_complete_counts_consultation(db, schedule):
    doctor, patient = schedule
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")
    completed = complete_appointment(db, appointment.id, doctor.user)

    assert completed.status == AppointmentStatus.COMPLETED
    db.refresh(doctor)
    assert doctor.consultation_count == 1


def test_patient_cannot_complete(db, schedule):
    doctor, patient = schedule
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")
    with pytest.raises(PermissionDeniedException):
        complete_appointment(db, appointment.id, patient.user)


def test_rating_updates_running_average(db, schedule):
    doctor, patient = schedule
    first = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")
    second = book_appointment(db, patient.id, doctor.id, "2025-05-11", "14:00")
    complete_appointment(db, first.id, doctor.user)
    complete_appointment(db, second.id, doctor.user)

    rate_appointment(db, first.id, patient.user, 5)
    rate_appointment(db, second.id, patient.user, 2)

    db.refresh(doctor)
    assert doctor.total_ratings == 2
    assert doctor.average_rating == pytest.approx(3.5)


def test_rating_rules(db, schedule):
    doctor, patient = schedule
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")

    with pytest.raises(ValidationException):
        rate_appointment(db, appointment.id, patient.user, 4)

    complete_appointment(db, appointment.id, doctor.user)
    with pytest.raises(ValidationException):
        rate_appointment(db, appointment.id, patient.user, 6)
    with pytest.raises(PermissionDeniedException):
        rate_appointment(db, appointment.id, doctor.user, 4)

    rate_appointment(db, appointment.id, patient.user, 4)
    with pytest.raises(ValidationException):
        rate_appointment(db, appointment.id, patient.user, 3)


def test_listing_and_open_count(db, schedule):
    doctor, patient = schedule
    add_availability(db, doctor.id, "2025-05-10", ["09:00"])
    late = book_appointment(db, patient.id, doctor.id, "2025-05-11", "14:00")
    early = book_appointment(db, patient.id, doctor.id, "2025-05-10", "09:00")
    cancel_appointment(db, late.id, patient.user)

    assert [a.id for a in list_for_patient(db, patient.id)] == [early.id, late.id]
    assert [a.id for a in list_for_doctor(db, doctor.id, AppointmentStatus.CANCELLED)] == [late.id]
    assert [a.id for a in list_for_doctor(db, doctor.id, date="2025-05-10")] == [early.id]
    assert count_open_for_doctor(db, doctor.id) == 1
