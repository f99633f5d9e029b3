"""
Import every model so SQLAlchemy can resolve string relationships and
``Base.metadata`` knows all tables.
"""
from .database import Base
from .auth.models import User, UserRole, AccountStatus
from .doctors.models import Doctor, doctor_patients
from .patients.models import Patient
from .availability.models import AvailabilitySlot
from .appointments.models import Appointment, AppointmentStatus
from .prescriptions.models import Prescription

__all__ = [
    "Base",
    "User",
    "UserRole",
    "AccountStatus",
    "Doctor",
    "doctor_patients",
    "Patient",
    "AvailabilitySlot",
    "Appointment",
    "AppointmentStatus",
    "Prescription",
]
