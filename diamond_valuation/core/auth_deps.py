#diamond_valuation/core/auth_deps.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from diamond_valuation.core.security import decode_token
from diamond_valuation.models.enums import UserRole
from diamond_valuation.policies.rbac import Principal

bearer = HTTPBearer(auto_error=True)
optional_bearer = HTTPBearer(auto_error=False)


def _principal_from_token(token: str) -> Principal:
    try:
        payload: Dict[str, Any] = decode_token(token)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid or expired token.")

    role = payload.get("role")
    user_id = payload.get("user_id")
    display_name = payload.get("display_name") or "Unknown"

    if not role or not user_id:
        raise HTTPException(status_code=401, detail="Token missing required claims.")

    try:
        role_enum = UserRole(role)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid role in token.")

    return Principal(
        user_id=str(user_id),
        role=role_enum,
        display_name=str(display_name),
    )


def get_current_principal(
    request: Request,
    creds: HTTPAuthorizationCredentials = Depends(bearer),
) -> Principal:
    """
    Canonical authentication dependency.

    Guarantees:
    - JWT is valid
    - role and user_id are present
    - role is a valid UserRole
    """
    principal = _principal_from_token(creds.credentials)

    # Make principal available to downstream middleware / handlers
    request.state.principal = principal
    return principal


def get_optional_principal(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer),
) -> Optional[Principal]:
    """
    Same as get_current_principal, but a missing header yields None.
    Used by views that render their own "not logged in" state.
    """
    if creds is None:
        return None
    principal = _principal_from_token(creds.credentials)
    request.state.principal = principal
    return principal
