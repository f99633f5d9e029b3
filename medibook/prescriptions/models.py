"""
Prescription Model - What a doctor prescribed during one appointment.
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from ..database import Base

class Prescription(Base):
    """
    Prescription Model - Stores a doctor's prescription for an appointment

    Fields:
    - id: Primary key for prescription
    - appointment_id: The appointment it was written for (one per appointment)
    - doctor_id: Prescribing doctor
    - patient_id: Patient it was written for
    - diagnosis: Medical diagnosis
    - medicines: List of {name, dosage, frequency, duration} entries
    - notes: Additional advice
    - created_at: When the prescription was created
    - updated_at: When the prescription was last updated
    """
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id", ondelete="CASCADE"), unique=True, nullable=False)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    diagnosis = Column(Text, nullable=True)
    medicines = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    appointment = relationship("Appointment", back_populates="prescription")
    doctor = relationship("Doctor", back_populates="prescriptions")
    patient = relationship("Patient", back_populates="prescriptions")

    def __repr__(self):
        """String representation of the Prescription model"""
        return f"<Prescription(id={self.id}, appointment_id={self.appointment_id}, doctor_id={self.doctor_id})>"
