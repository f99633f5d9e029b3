"""
Doctor Model - Stores doctor-specific information, ratings and the patient list.

This model extends the base User model with doctor-specific fields and relationships.
Bookable slots live in the availability package and are owned by this row.
"""
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Table, func
from sqlalchemy.orm import relationship
from ..database import Base

# Patients who have booked with a doctor at least once
doctor_patients = Table(
    "doctor_patients",
    Base.metadata,
    Column("doctor_id", Integer, ForeignKey("doctors.id", ondelete="CASCADE"), primary_key=True),
    Column("patient_id", Integer, ForeignKey("patients.id", ondelete="CASCADE"), primary_key=True),
)

class Doctor(Base):
    """
    Doctor Model - Stores doctor-specific information

    Fields:
    - id: Primary key for doctor profile
    - user_id: Foreign key to User model
    - age: Doctor's age
    - specialization: Doctor's medical specialization
    - degree: Medical degree(s)
    - experience: Free-text experience summary
    - bio: Professional biography
    - average_rating: Running mean of patient ratings (0-5)
    - total_ratings: Number of ratings received
    - consultation_count: Number of completed consultations
    - created_at: When the doctor profile was created
    - updated_at: When the doctor profile was last updated
    """
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    age = Column(Integer, nullable=True)
    specialization = Column(String, nullable=True, index=True)
    degree = Column(String, nullable=True)
    experience = Column(String, nullable=True)
    bio = Column(String, nullable=True)
    average_rating = Column(Float, nullable=False, default=0.0)
    total_ratings = Column(Integer, nullable=False, default=0)
    consultation_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="doctor_profile")
    slots = relationship(
        "AvailabilitySlot",
        back_populates="doctor",
        cascade="all, delete",
        order_by="AvailabilitySlot.position",
    )
    appointments = relationship("Appointment", back_populates="doctor", cascade="all, delete")
    prescriptions = relationship("Prescription", back_populates="doctor", cascade="all, delete")
    patients = relationship("Patient", secondary=doctor_patients)

    def __repr__(self):
        """String representation of the Doctor model"""
        return f"<Doctor(id={self.id}, user_id={self.user_id}, specialization='{self.specialization}')>"

    @property
    def full_name(self) -> str:
        """Get doctor's full name from associated user"""
        return self.user.full_name if self.user else None

    @property
    def email(self) -> str:
        """Get doctor's email from associated user"""
        return self.user.email if self.user else None
