"""
Tests for bookings and status changes made from independent sessions.

Each session has its own connection to a file-backed database, so objects
loaded in one session go stale when another session commits.
"""
import pytest

from medibook.exceptions import (
    InvalidTransitionException,
    SlotUnavailableException,
    ValidationException,
)
from medibook.doctors.models import Doctor
from medibook.appointments.models import Appointment, AppointmentStatus
from medibook.availability.service import list_availability
from medibook.appointments.service import (
    book_appointment,
    cancel_appointment,
    complete_appointment,
    get_appointment,
    rate_appointment,
)


def confirmed_at(session, time_slot):
    return session.query(Appointment).filter(
        Appointment.date == "2025-05-11",
        Appointment.time_slot == time_slot,
        Appointment.status == AppointmentStatus.CONFIRMED,
    ).count()


def test_only_one_of_two_sessions_books_a_slot(session_factory, seeded_clinic):
    doctor_id, patient_ids = seeded_clinic
    first, second = session_factory(), session_factory()

    # Both callers see the slot open before either books
    assert list_availability(first, doctor_id)[0]["time_slots"] == ["13:00", "14:00"]
    assert list_availability(second, doctor_id)[0]["time_slots"] == ["13:00", "14:00"]

    book_appointment(first, patient_ids[0], doctor_id, "2025-05-11", "13:00")
    with pytest.raises(SlotUnavailableException):
        book_appointment(second, patient_ids[1], doctor_id, "2025-05-11", "13:00")

    check = session_factory()
    assert check.query(Appointment).count() == 1
    assert confirmed_at(check, "13:00") == 1


def test_stale_cancel_cannot_reopen_a_rebooked_slot(session_factory, seeded_clinic):
    doctor_id, patient_ids = seeded_clinic
    patient_session, stale_session, other_session = session_factory(), session_factory(), session_factory()

    appointment = book_appointment(patient_session, patient_ids[0], doctor_id, "2025-05-11", "13:00")
    stale = get_appointment(stale_session, appointment.id)
    stale_actor = stale.patient.user
    assert stale.status == AppointmentStatus.CONFIRMED

    cancel_appointment(patient_session, appointment.id, appointment.patient.user)
    book_appointment(other_session, patient_ids[1], doctor_id, "2025-05-11", "13:00")

    with pytest.raises(InvalidTransitionException):
        cancel_appointment(stale_session, appointment.id, stale_actor)

    check = session_factory()
    assert list_availability(check, doctor_id) == [{"date": "2025-05-11", "time_slots": ["14:00"]}]
    with pytest.raises(SlotUnavailableException):
        book_appointment(check, patient_ids[2], doctor_id, "2025-05-11", "13:00")
    assert confirmed_at(check, "13:00") == 1


def test_cancel_from_stale_session_after_completion_keeps_slot_booked(session_factory, seeded_clinic):
    doctor_id, patient_ids = seeded_clinic
    doctor_session, stale_session = session_factory(), session_factory()

    appointment = book_appointment(doctor_session, patient_ids[0], doctor_id, "2025-05-11", "13:00")
    stale = get_appointment(stale_session, appointment.id)
    stale_actor = stale.patient.user

    complete_appointment(doctor_session, appointment.id, doctor_session.get(Doctor, doctor_id).user)
    with pytest.raises(InvalidTransitionException):
        cancel_appointment(stale_session, appointment.id, stale_actor)

    check = session_factory()
    assert check.get(Appointment, appointment.id).status == AppointmentStatus.COMPLETED
    assert list_availability(check, doctor_id) == [{"date": "2025-05-11", "time_slots": ["14:00"]}]


def test_repeated_rating_from_stale_session_counts_once(session_factory, seeded_clinic):
    doctor_id, patient_ids = seeded_clinic
    first, stale_session = session_factory(), session_factory()

    appointment = book_appointment(first, patient_ids[0], doctor_id, "2025-05-11", "13:00")
    complete_appointment(first, appointment.id, first.get(Doctor, doctor_id).user)
    stale = get_appointment(stale_session, appointment.id)
    stale_actor = stale.patient.user
    assert stale.rating is None

    rate_appointment(first, appointment.id, appointment.patient.user, 5)
    with pytest.raises(ValidationException):
        rate_appointment(stale_session, appointment.id, stale_actor, 1)

    doctor = session_factory().get(Doctor, doctor_id)
    assert doctor.total_ratings == 1
    assert doctor.average_rating == pytest.approx(5.0)
