"""Token and credential helpers."""
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from portal.config import settings

CANDIDATE_ROLE = "CANDIDATE"
ADMIN_ROLE = "ADMIN"


def secrets_match(supplied: str, expected: str) -> bool:
    """Constant-time string comparison."""
    return hmac.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": datetime.now(timezone.utc) + delta})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_session_token(session_id: str) -> str:
    """Candidate credential bound to one assessment session."""
    return create_access_token({"sub": session_id, "session_id": session_id, "role": CANDIDATE_ROLE})


def create_admin_token(username: str) -> str:
    return create_access_token({"sub": username, "role": ADMIN_ROLE})


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify a token; None if invalid or expired."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
