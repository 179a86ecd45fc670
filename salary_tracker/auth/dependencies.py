# salary_tracker/auth/dependencies.py
from typing import Optional, Iterable, Callable
import logging

from fastapi import Header, HTTPException, Depends, status
from sqlalchemy.orm import Session

from salary_tracker.auth.jwt_handler import decode_jwt
from salary_tracker.auth.models import User
from salary_tracker.database import get_db

logger = logging.getLogger(__name__)


def _extract_bearer(auth_header: Optional[str]) -> Optional[str]:
    """
    Extract bearer token from Authorization header.
    Returns None if header missing or malformed.
    """
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None

    return parts[1]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve ``Authorization: Bearer <jwt>`` to the stored user.
    The database row is the source of truth for the role, not the token.
    """
    token = _extract_bearer(authorization)
    if not token:
        raise _unauthorized("Access token required")

    payload = decode_jwt(token)
    if payload is None:
        logger.warning("Rejected invalid or expired token")
        raise _unauthorized("Invalid or expired token")

    try:
        uid = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")

    user = db.get(User, uid)
    if user is None:
        raise _unauthorized("User not found")

    logger.debug("get_current_user -> id=%s role=%s", user.id, user.role)
    return user


# Usage: Depends(require_role(["admin"]))
def require_role(allowed_roles: Iterable[str]) -> Callable:
    allowed = [str(r).lower() for r in allowed_roles]

    def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.role or str(user.role).lower() not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
        return user

    return dependency


require_admin = require_role(["admin"])
