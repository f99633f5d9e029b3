"""
FastAPI dependencies for authentication and authorization.

Every authenticated route depends on one of these; token problems
short-circuit with 401 and role mismatches with 403 before any
business logic runs.
"""
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from typing import List

from ..database import get_db
from ..core.security import decode_access_token
from .models import User, UserRole
from .exceptions import InvalidTokenException, AccountStatusException, RoleDeniedException

# OAuth2 scheme for JWT token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """
    Get current authenticated user from JWT token with database verification.

    Args:
        token: JWT token from Authorization header
        db: Database session

    Returns:
        User: Current authenticated user

    Raises:
        InvalidTokenException: If token is invalid or user not found
    """
    claims = decode_access_token(token)
    if not claims:
        raise InvalidTokenException()

    user = db.query(User).filter(User.id == int(claims["sub"])).first()
    if not user:
        raise InvalidTokenException("User not found")

    return user

def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Get current user and verify account is active.

    Raises:
        AccountStatusException: If account is not active
    """
    if not current_user.is_active:
        raise AccountStatusException(current_user.status)
    return current_user

def require_roles(allowed_roles: List[UserRole]):
    """
    Dependency factory to require specific roles.

    Args:
        allowed_roles: List of roles that are allowed access

    Returns:
        Function that checks if user has required role
    """
    def role_checker(current_user: User = Depends(get_current_active_user)) -> User:
        if current_user.role not in allowed_roles:
            raise RoleDeniedException(
                [role.value for role in allowed_roles], current_user.role.value
            )
        return current_user
    return role_checker

# Convenience dependencies for specific roles
require_patient = require_roles([UserRole.PATIENT])
require_doctor = require_roles([UserRole.DOCTOR])
require_admin = require_roles([UserRole.ADMIN])
require_doctor_or_patient = require_roles([UserRole.DOCTOR, UserRole.PATIENT])
