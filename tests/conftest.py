"""
Test configuration for the appointment system backend.
"""
import os

# Settings are read at import time; point them at throwaway values first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.pop("BOOTSTRAP_ADMIN_EMAIL", None)
os.environ.pop("BOOTSTRAP_ADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from medibook.database import Base, get_db
from medibook.main import app
from medibook.auth.models import User, UserRole
from medibook.auth.service import issue_token
from medibook.doctors.models import Doctor
from medibook.patients.models import Patient
from medibook.availability.service import add_availability

# Test database URL
TEST_DATABASE_URL = "sqlite://"

# Create test database engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """
    Create a test client with a test database session.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = {}


@pytest.fixture
def make_admin(db):
    """Factory creating an active admin user."""
    def _make_admin(email="admin@example.com", password="adminpass"):
        user = User(email=email, full_name="Admin", password=password, role=UserRole.ADMIN)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make_admin


@pytest.fixture
def make_doctor(db):
    """Factory creating a doctor user with a profile."""
    def _make_doctor(email="doctor@example.com", password="doctorpass", specialization="Cardiology", full_name="Dr. House"):
        user = User(email=email, full_name=full_name, password=password, role=UserRole.DOCTOR)
        user.doctor_profile = Doctor(specialization=specialization)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user.doctor_profile
    return _make_doctor


@pytest.fixture
def make_patient(db):
    """Factory creating a patient user with a profile."""
    def _make_patient(email="patient@example.com", password="patientpass", full_name="Pat Smith"):
        user = User(email=email, full_name=full_name, password=password, role=UserRole.PATIENT)
        user.patient_profile = Patient(age=30)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user.patient_profile
    return _make_patient


@pytest.fixture
def auth_headers():
    """Bearer headers for a user."""
    def _auth_headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}
    return _auth_headers


@pytest.fixture
def session_factory(tmp_path):
    """
    Open sessions on a file-backed SQLite database, each on its own connection.

    Lets a test interleave requests the way concurrent workers would.
    Writers give up after a short busy timeout instead of waiting.
    """
    file_engine = create_engine(
        f"sqlite:///{tmp_path / 'medibook.db'}",
        connect_args={"check_same_thread": False, "timeout": 0.2},
    )
    Base.metadata.create_all(bind=file_engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=file_engine)
    sessions = []

    def _open():
        session = factory()
        sessions.append(session)
        return session

    yield _open

    for session in sessions:
        session.close()
    file_engine.dispose()


@pytest.fixture
def seeded_clinic(session_factory):
    """
    A doctor offering 13:00 and 14:00 on 2025-05-11 and three patients,
    committed to the file-backed database.

    Returns:
        (doctor profile ID, list of patient profile IDs)
    """
    session = session_factory()
    doctor_user = User(email="doctor@example.com", full_name="Dr. House", password="doctorpass", role=UserRole.DOCTOR)
    doctor_user.doctor_profile = Doctor(specialization="Cardiology")
    session.add(doctor_user)

    patient_users = []
    for number in range(3):
        user = User(
            email=f"patient{number}@example.com",
            full_name=f"Patient {number}",
            password="patientpass",
            role=UserRole.PATIENT,
        )
        user.patient_profile = Patient(age=30)
        session.add(user)
        patient_users.append(user)
    session.commit()

    doctor_id = doctor_user.doctor_profile.id
    add_availability(session, doctor_id, "2025-05-11", ["13:00", "14:00"])
    return doctor_id, [user.patient_profile.id for user in patient_users]
