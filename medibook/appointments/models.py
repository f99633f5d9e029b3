"""
Appointment Model - Binds a patient to one doctor slot and tracks its lifecycle.

Legal status changes are listed once in ``ALLOWED_TRANSITIONS``. The service
applies them as conditional UPDATEs guarded by ``statuses_leading_to`` so two
requests can never both move the same appointment.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, func
from sqlalchemy.orm import relationship
from typing import List
import enum
from ..database import Base

class AppointmentStatus(str, enum.Enum):
    """Enum for appointment status"""
    REQUESTED = "REQUESTED"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

# Legal status changes; terminal states map to nothing
ALLOWED_TRANSITIONS = {
    AppointmentStatus.REQUESTED: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CONFIRMED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
}

# Statuses that still hold a slot
OPEN_STATUSES = (AppointmentStatus.REQUESTED, AppointmentStatus.CONFIRMED)

def statuses_leading_to(target: AppointmentStatus) -> List[AppointmentStatus]:
    return [source for source, targets in ALLOWED_TRANSITIONS.items() if target in targets]

class Appointment(Base):
    """
    Appointment Model - Stores appointment information

    Fields:
    - id: Primary key for appointment
    - doctor_id: Foreign key to Doctor model
    - patient_id: Foreign key to Patient model
    - date: Booked date (YYYY-MM-DD)
    - time_slot: Booked time of day (HH:MM)
    - status: Current status of the appointment
    - reason: Reason for the appointment
    - cancelled_by: Role of whoever cancelled it
    - rating: Patient's 1-5 rating once completed
    - created_at: When the appointment was created
    - updated_at: When the appointment was last updated
    """
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(String(10), nullable=False)
    time_slot = Column(String(5), nullable=False)
    status = Column(Enum(AppointmentStatus, name="appointment_status"), nullable=False, default=AppointmentStatus.CONFIRMED)
    reason = Column(String, nullable=True)
    cancelled_by = Column(String, nullable=True)
    rating = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    doctor = relationship("Doctor", back_populates="appointments")
    patient = relationship("Patient", back_populates="appointments")
    prescription = relationship("Prescription", back_populates="appointment", uselist=False, cascade="all, delete")

    def __repr__(self):
        """String representation of the Appointment model"""
        return (
            f"<Appointment(id={self.id}, doctor_id={self.doctor_id}, patient_id={self.patient_id}, "
            f"slot='{self.date} {self.time_slot}', status='{self.status}')>"
        )

    @property
    def doctor_name(self) -> str:
        return self.doctor.full_name if self.doctor else None

    @property
    def patient_name(self) -> str:
        return self.patient.full_name if self.patient else None

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES

    def can_transition_to(self, status: AppointmentStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[AppointmentStatus(self.status)]

