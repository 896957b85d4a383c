"""Shared API dependencies."""

import re
from typing import List, Optional
from fastapi import Depends, Header, HTTPException

CUID_PATTERN = re.compile(r"^c[a-z0-9]{24}$", re.IGNORECASE)


def is_cuid(value: Optional[str]) -> bool:
    """Check that an identifier has the CUID shape used for all IDs."""
    return bool(value) and CUID_PATTERN.match(value) is not None


def get_user_id(x_user_id: Optional[str] = Header(None, alias="X-User-ID")) -> str:
    """Extract user ID from gateway headers."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id


def get_user_roles(x_user_roles: Optional[str] = Header(None, alias="X-User-Roles")) -> List[str]:
    """Extract user roles (comma separated) from gateway headers."""
    if not x_user_roles:
        return []
    return [role.strip().upper() for role in x_user_roles.split(",") if role.strip()]


def require_admin(
    user_id: str = Depends(get_user_id),
    roles: List[str] = Depends(get_user_roles),
) -> str:
    """Allow only users carrying the ADMIN role."""
    if "ADMIN" not in roles:
        raise HTTPException(status_code=403, detail="Admin access required to view statistics")
    return user_id


def validate_note_id(note_id: str) -> str:
    """Reject malformed note IDs before touching the database."""
    if not is_cuid(note_id):
        raise HTTPException(status_code=400, detail="Invalid note ID format")
    return note_id
