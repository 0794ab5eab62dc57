"""
Core module - data models and shared utilities.
"""

from sfmanager.core.models import (
    OWNER_ROLE,
    Role,
    RoleGrant,
    Startup,
    User,
    UserRole,
)
from sfmanager.core.utils import generate_id, utc_now

__all__ = [
    "OWNER_ROLE",
    "Role",
    "RoleGrant",
    "Startup",
    "User",
    "UserRole",
    "generate_id",
    "utc_now",
]
