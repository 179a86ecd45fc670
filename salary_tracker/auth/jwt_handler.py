# salary_tracker/auth/jwt_handler.py
# Uses python-jose to create/verify JWTs (consumed by auth/dependencies.py)
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

from jose import jwt, JWTError

from salary_tracker import config


def create_access_token(payload: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """Sign ``payload`` and add an ``exp`` claim (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)."""
    to_encode = payload.copy()
    minutes = expires_minutes if expires_minutes is not None else config.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_jwt(token: str) -> Optional[Dict[str, Any]]:
    """Verified claims, or None for a bad signature or an expired token."""
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        return None


def token_for_user(user) -> str:
    return create_access_token(
        {
            "sub": str(user.id),
            "username": user.username,
            "email": user.email,
            "role": user.role,
        }
    )
