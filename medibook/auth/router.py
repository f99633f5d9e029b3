"""
Authentication Router - Registration, login and the caller's own profile.
"""
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ..database import get_db
from .dependencies import get_current_user
from .models import User
from .schemas import PatientRegistration, UserLogin, UserResponse, LoginResponse
from .service import register_patient, login_user


router = APIRouter()

@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Patient"
)
async def register_patient_route(
    registration: PatientRegistration,
    db: Session = Depends(get_db)
):
    """
    Patient self-registration endpoint.

    Doctors are added by administrators, not through this endpoint.
    """
    return register_patient(db, registration)

@router.post("/login", response_model=LoginResponse, summary="User Login")
async def login_route(
    login_data: UserLogin,
    db: Session = Depends(get_db)
):
    """
    User login endpoint.

    Args:
        login_data: User login credentials
        db: Database session

    Returns:
        LoginResponse with access token and user information

    Raises:
        InvalidCredentialsException: If credentials are invalid
        AccountStatusException: If the account is not active
    """
    return login_user(db, email=login_data.email, password=login_data.password)

@router.post("/token", include_in_schema=False)
async def oauth2_token_route(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """
    OAuth2 password flow used by the interactive API docs.
    """
    result = login_user(db, email=form_data.username, password=form_data.password)
    return {"access_token": result["access_token"], "token_type": "bearer"}

@router.get("/me", response_model=UserResponse, summary="Get Current User Profile")
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    """
    Get current user profile endpoint.

    Returns:
        UserResponse with user profile information
    """
    return current_user
