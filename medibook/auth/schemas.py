"""
User Schemas - Pydantic models for user data validation and serialization.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from .models import UserRole, AccountStatus

class UserBase(BaseModel):
    """
    Base User Schema - Contains fields common to all user-related schemas

    Fields:
    - email: User's email address
    - full_name: User's full name
    """
    email: EmailStr
    full_name: str = Field(..., min_length=1)

class UserCreate(UserBase):
    """
    User Creation Schema - Used when creating a new account

    Extends UserBase with:
    - password: User's plain text password (will be hashed before storage)
    - gender: User's gender (optional)
    - contact: User's mobile number (optional)
    - profile_image: URL to user's profile image (optional)
    """
    password: str = Field(..., min_length=6)
    gender: Optional[str] = None
    contact: Optional[str] = None
    profile_image: Optional[str] = None

class PatientRegistration(UserCreate):
    """
    Patient Registration Schema - Used for patient self-registration

    Patients are active as soon as they register.
    """
    age: Optional[int] = Field(None, ge=0, le=150)
    address: Optional[str] = None

class UserLogin(BaseModel):
    """
    User Login Schema - Used for authentication

    Fields:
    - email: User's email address
    - password: User's plain text password
    """
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    """
    User Response Schema - Used when returning user data. Never carries the hash.
    """
    id: int
    email: EmailStr
    full_name: str
    gender: Optional[str] = None
    contact: Optional[str] = None
    profile_image: Optional[str] = None
    role: UserRole
    status: AccountStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class LoginResponse(BaseModel):
    """
    Login Response Schema - Returned after successful authentication

    Fields:
    - access_token: JWT access token
    - token_type: Type of token (always "bearer")
    - user: User information
    """
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
