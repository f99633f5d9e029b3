"""
Password hashing and access tokens.

Passwords are stored as salted bcrypt hashes. Access tokens are HS256 JWTs
whose ``sub`` claim is the user ID; the role rides along so clients can
pick a UI without another round trip, but the server always re-reads the
user row before trusting it.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from passlib.context import CryptContext
import logging

from ..config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Check a plain password against a stored hash.

    A wrong password yields False. A stored value that is not a recognisable
    bcrypt hash raises ValueError, since that is a data-integrity problem.
    """
    return pwd_context.verify(plain_password, hashed_password)

def create_access_token(
    user_id: int,
    email: str,
    role: str,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Issue a signed access token for a user.

    Args:
        user_id: ID of the user, stored as the ``sub`` claim
        email: Login email
        role: Role value (PATIENT, DOCTOR or ADMIN)
        expires_delta: Lifetime; ACCESS_TOKEN_EXPIRE_MINUTES when omitted

    Returns:
        str: Encoded JWT
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)

def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode a token issued by ``create_access_token``.

    Returns:
        The claims, or None if the token is expired, tampered with or
        missing its subject
    """
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        logger.debug(f"Token rejected: {str(e)}")
        return None

    if not str(claims.get("sub", "")).isdigit():
        logger.debug("Token rejected: subject is not a user ID")
        return None
    return claims
