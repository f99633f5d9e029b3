"""
Availability Slot Model - One bookable (date, time) pair owned by a doctor.

Rows are never duplicated for a doctor; a booked slot stays in place with
``is_booked`` set so that cancelling restores it where it was.
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database import Base

class AvailabilitySlot(Base):
    """
    Availability Slot Model

    Fields:
    - id: Primary key
    - doctor_id: Owning doctor
    - date: Calendar date, YYYY-MM-DD
    - time_slot: Time of day, HH:MM (24h)
    - position: Insertion order within the doctor's ledger
    - is_booked: Whether an appointment currently holds this slot
    """
    __tablename__ = "availability_slots"
    __table_args__ = (
        UniqueConstraint("doctor_id", "date", "time_slot", name="uq_availability_doctor_date_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(String(10), nullable=False)
    time_slot = Column(String(5), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    is_booked = Column(Boolean, nullable=False, default=False)

    doctor = relationship("Doctor", back_populates="slots")

    def __repr__(self):
        return (
            f"<AvailabilitySlot(doctor_id={self.doctor_id}, date='{self.date}', "
            f"time_slot='{self.time_slot}', booked={self.is_booked})>"
        )
