from datetime import datetime, timedelta
from typing import Optional, Dict, Any
import logging

import jwt
from passlib.context import CryptContext

from .core.config import settings
from .utils import utcnow

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


# =========================
# Password Hashing
# =========================
def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash (constant-time comparison)."""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # Unknown or corrupt hash format
        logger.warning("Stored password hash could not be verified")
        return False


# =========================
# JWT Token Handling
# =========================
def create_access_token(user_id: str, session_id: str, expires_at: Optional[datetime] = None) -> str:
    """Create a signed access token bound to a server-side session."""
    if not settings.secret_key_configured:
        raise ValueError("SECRET_KEY not properly configured")

    expire = expires_at or access_token_expiry()
    to_encode = {"sub": user_id, "sid": session_id, "type": "access", "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_jwt_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and verify a JWT token, returning None when it is unusable."""
    if not settings.secret_key_configured:
        return None
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Token has expired")
        return None
    except jwt.InvalidTokenError:
        return None
    if payload.get("type") != "access":
        return None
    return payload


def access_token_expiry() -> datetime:
    return utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
