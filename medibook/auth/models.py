"""
User Model - Stores identity and credentials for every account in the system.

Doctor and patient profiles hang off a User row; admins have no profile.
"""
from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from ..database import Base
from ..core.security import hash_password, verify_password

class UserRole(str, enum.Enum):
    """
    Enumeration for user roles.

    Roles:
    - PATIENT: Patients who book appointments
    - DOCTOR: Practitioners who publish availability and treat patients
    - ADMIN: Administrators who manage the doctor directory
    """
    PATIENT = "PATIENT"
    DOCTOR = "DOCTOR"
    ADMIN = "ADMIN"

class AccountStatus(str, enum.Enum):
    """
    Enumeration for account status types.

    Status Types:
    - ACTIVE: Account allowed to sign in
    - DISABLED: Account created but blocked by an administrator
    - DEACTIVATED: Previously active account that has been suspended
    """
    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"
    DEACTIVATED = "DEACTIVATED"

class User(Base):
    """
    User Model - Stores all user information in the system

    Fields:
    - id: Primary key for user identification
    - email: Unique email address for login and communication
    - full_name: User's complete name
    - gender: User's gender (optional)
    - contact: User's mobile number (optional)
    - profile_image: URL to user's profile image (optional)
    - password_hash: Salted bcrypt hash (never store raw passwords)
    - role: User role (patient, doctor, admin)
    - status: Current account status
    - created_at: Timestamp when user was created
    - updated_at: Timestamp when user was last updated
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    gender = Column(String, nullable=True)
    contact = Column(String, nullable=True)
    profile_image = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.PATIENT, nullable=False)
    status = Column(Enum(AccountStatus), default=AccountStatus.ACTIVE, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    doctor_profile = relationship(
        "Doctor", back_populates="user", uselist=False, cascade="all, delete"
    )
    patient_profile = relationship(
        "Patient", back_populates="user", uselist=False, cascade="all, delete"
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"

    @property
    def password(self):
        raise AttributeError("password is write-only")

    @password.setter
    def password(self, plain_password: str) -> None:
        """Hash and store a new password. Untouched on updates that skip it."""
        self.password_hash = hash_password(plain_password)

    def check_password(self, plain_password: str) -> bool:
        return verify_password(plain_password, self.password_hash)

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE
