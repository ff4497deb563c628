"""
app/core/dependencies.py

Purpose: Request authentication dependencies

- get_current_user: Bearer access token -> {"user_id", "role"}
- require_roles: 403 unless the user holds one of the roles
- ensure_self_or_admin: ownership check for per-user resources
"""

from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.security import decode_access_token
from app.models.enums import UserRole

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """
    Raises:
        AuthenticationError: If the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authorization token missing")

    payload = decode_access_token(credentials.credentials)
    roles = payload.get("role") or []
    if isinstance(roles, str):
        roles = [roles]
    return {"user_id": payload["userId"], "role": roles}


def ensure_self_or_admin(current_user: Dict[str, Any], user_id: str):
    """
    Raises:
        AuthorizationError: Unless the caller is the user or an admin
    """
    if current_user["user_id"] != user_id and UserRole.ADMIN.value not in current_user["role"]:
        raise AuthorizationError("Access denied: cannot modify another user")


def require_roles(*roles: UserRole):
    allowed = {r.value if isinstance(r, UserRole) else r for r in roles}

    async def role_checker(current_user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
        if not allowed.intersection(current_user["role"]):
            raise AuthorizationError()
        return current_user

    return role_checker
