"""
Authentication Service - Account creation, credential checks and token issuing.
"""
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
import logging

from ..core.security import create_access_token
from ..patients.models import Patient
from .models import User, UserRole, AccountStatus
from .schemas import PatientRegistration, UserResponse
from .exceptions import EmailAlreadyExistsException, InvalidCredentialsException, AccountStatusException

# Set up logging
logger = logging.getLogger(__name__)

def email_exists(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == email).first() is not None

def build_user(
    db: Session,
    email: str,
    full_name: str,
    password: str,
    role: UserRole,
    gender: Optional[str] = None,
    contact: Optional[str] = None,
    profile_image: Optional[str] = None,
) -> User:
    """
    Create an unsaved user with a hashed password.

    Args:
        db: Database session
        email: Login email, unique across all users
        full_name: Display name
        password: Plain text password (hashed on assignment)
        role: Account role

    Returns:
        User: New user, added to the session but not committed

    Raises:
        EmailAlreadyExistsException: If the email is already registered
    """
    if email_exists(db, email):
        logger.warning(f"Account creation refused: Email {email} already registered")
        raise EmailAlreadyExistsException()

    user = User(
        email=email,
        full_name=full_name,
        password=password,
        role=role,
        status=AccountStatus.ACTIVE,
        gender=gender,
        contact=contact,
        profile_image=profile_image,
    )
    db.add(user)
    return user

def commit_new_account(db: Session, user: User) -> User:
    """
    Commit a freshly built account.

    A unique-email violation from a concurrent registration surfaces as
    EmailAlreadyExistsException; nothing is written in that case.
    """
    try:
        db.commit()
        db.refresh(user)
        return user
    except IntegrityError:
        db.rollback()
        logger.warning(f"Account creation refused: Email {user.email} registered concurrently")
        raise EmailAlreadyExistsException()
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating account for {user.email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while creating the account"
        )

def register_patient(db: Session, registration: PatientRegistration) -> User:
    """
    Register a new patient user together with their patient profile.

    Args:
        db: Database session
        registration: Registration details

    Returns:
        User: The new patient user

    Raises:
        EmailAlreadyExistsException: If email already exists
    """
    logger.info(f"Patient registration attempt for email: {registration.email}")
    user = build_user(
        db,
        email=registration.email,
        full_name=registration.full_name,
        password=registration.password,
        role=UserRole.PATIENT,
        gender=registration.gender,
        contact=registration.contact,
        profile_image=registration.profile_image,
    )
    user.patient_profile = Patient(age=registration.age, address=registration.address)

    commit_new_account(db, user)
    logger.info(f"Patient account created: {user.id}")
    return user

def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Check credentials.

    Raises:
        InvalidCredentialsException: If the email is unknown or the password is wrong
        AccountStatusException: If the account is not active
    """
    user = db.query(User).filter(User.email == email).first()
    if not user or not user.check_password(password):
        logger.warning(f"Login failed: Invalid credentials for {email}")
        raise InvalidCredentialsException()

    if not user.is_active:
        logger.warning(f"Login failed: Account status {user.status} for {email}")
        raise AccountStatusException(user.status)

    return user

def issue_token(user: User) -> str:
    return create_access_token(user.id, user.email, user.role.value)

def login_user(db: Session, email: str, password: str) -> Dict[str, Any]:
    """
    Authenticate a user and generate an access token.

    Returns:
        Dict with access token and user information
    """
    user = authenticate_user(db, email, password)
    logger.info(f"Login successful: User {user.id} ({email})")
    return {
        "access_token": issue_token(user),
        "token_type": "bearer",
        "user": UserResponse.model_validate(user),
    }
