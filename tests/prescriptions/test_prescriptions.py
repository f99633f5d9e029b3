"""
Tests for writing prescriptions and reading prescription history.
"""
import pytest

from medibook.availability.service import add_availability
from medibook.appointments.service import book_appointment, cancel_appointment


@pytest.fixture
def visit(db, make_doctor, make_patient):
    doctor = make_doctor()
    patient = make_patient()
    add_availability(db, doctor.id, "2025-05-11", ["13:00", "14:00"])
    appointment = book_appointment(db, patient.id, doctor.id, "2025-05-11", "13:00")
    return doctor, patient, appointment


PRESCRIPTION = {
    "diagnosis": "Hypertension",
    "medicines": [{"name": "Amlodipine", "dosage": "5mg", "frequency": "once a day", "duration": "30 days"}],
    "notes": "Recheck in a month",
}


def test_doctor_writes_prescription(client, visit, auth_headers):
    doctor, patient, appointment = visit

    response = client.post(
        "/api/v1/prescriptions/",
        json=dict(PRESCRIPTION, appointment_id=appointment.id),
        headers=auth_headers(doctor.user),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["doctor_id"] == doctor.id
    assert data["patient_id"] == patient.id
    assert data["medicines"][0]["name"] == "Amlodipine"

    history = client.get("/api/v1/prescriptions/me", headers=auth_headers(patient.user)).json()
    assert [p["id"] for p in history] == [data["id"]]

    written = client.get(
        f"/api/v1/prescriptions/me?patient_id={patient.id}", headers=auth_headers(doctor.user)
    ).json()
    assert [p["diagnosis"] for p in written] == ["Hypertension"]


def test_one_prescription_per_appointment(client, visit, auth_headers):
    doctor, patient, appointment = visit
    body = dict(PRESCRIPTION, appointment_id=appointment.id)

    assert client.post("/api/v1/prescriptions/", json=body, headers=auth_headers(doctor.user)).status_code == 201
    response = client.post("/api/v1/prescriptions/", json=body, headers=auth_headers(doctor.user))
    assert response.status_code == 409
    assert response.json()["code"] == "prescription_exists"


def test_cancelled_appointment_cannot_be_prescribed(client, db, visit, auth_headers):
    doctor, patient, appointment = visit
    cancel_appointment(db, appointment.id, patient.user)

    response = client.post(
        "/api/v1/prescriptions/",
        json=dict(PRESCRIPTION, appointment_id=appointment.id),
        headers=auth_headers(doctor.user),
    )
    assert response.status_code == 409


def test_other_doctor_cannot_prescribe(client, visit, make_doctor, auth_headers):
    doctor, patient, appointment = visit
    other = make_doctor(email="other-doc@example.com", full_name="Dr. Other")

    response = client.post(
        "/api/v1/prescriptions/",
        json=dict(PRESCRIPTION, appointment_id=appointment.id),
        headers=auth_headers(other.user),
    )
    assert response.status_code == 403


def test_patient_cannot_prescribe(client, visit, auth_headers):
    doctor, patient, appointment = visit
    response = client.post(
        "/api/v1/prescriptions/",
        json=dict(PRESCRIPTION, appointment_id=appointment.id),
        headers=auth_headers(patient.user),
    )
    assert response.status_code == 403


def test_unknown_appointment(client, visit, auth_headers):
    doctor, patient, appointment = visit
    response = client.post(
        "/api/v1/prescriptions/",
        json=dict(PRESCRIPTION, appointment_id=999),
        headers=auth_headers(doctor.user),
    )
    assert response.status_code == 404
