from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from myhome.core.config import settings

# CryptContext handles password hashing using bcrypt
# bcrypt is slow by design to prevent brute-force attacks
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class SessionToken:
    """Identity asserted by a session token: who, and until when."""
    user_id: str
    expiration: datetime


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash using constant-time comparison"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    # bcrypt generates a salt and stores it in the hash, so equal passwords hash differently
    return pwd_context.hash(password)


def create_session_token(user_id: str, expires_delta: Optional[timedelta] = None) -> SessionToken:
    """Build the session payload for a user, expiring after the configured lifetime"""
    if expires_delta is None:
        expires_delta = settings.SESSION_TOKEN_EXPIRATION
    return SessionToken(user_id=user_id, expiration=datetime.now(timezone.utc) + expires_delta)


def encode_session_token(token: SessionToken, secret: str) -> str:
    """Sign a session token into an opaque JWT string"""
    # 'sub' and 'exp' are the standard JWT claims for subject and expiration
    to_encode = {"sub": token.user_id, "exp": token.expiration}
    return jwt.encode(to_encode, secret, algorithm=settings.ALGORITHM)


def decode_session_token(encoded: str, secret: str) -> Optional[SessionToken]:
    """Decode and verify a session token"""
    try:
        # Verifies signature and expiration
        payload = jwt.decode(encoded, secret, algorithms=[settings.ALGORITHM])
    except JWTError:
        # Expired, tampered with, or signed with another secret
        return None

    user_id = payload.get("sub")
    exp = payload.get("exp")
    if user_id is None or exp is None:
        return None
    return SessionToken(user_id=user_id, expiration=datetime.fromtimestamp(exp, tz=timezone.utc))
