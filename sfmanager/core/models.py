"""
Core data models for SFManager.

These mirror the persisted entities the auth pipeline reads: users,
the startups they own, the roles those startups open, and the join
records linking users to roles. Field names are snake_case in storage
and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sfmanager.core.utils import generate_id, utc_now


OWNER_ROLE = "owner"


class WireModel(BaseModel):
    """Base model serialised with camelCase keys for API responses."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self, **kwargs) -> dict:
        return self.model_dump(by_alias=True, mode="json", **kwargs)


# =============================================================================
# Users
# =============================================================================


class User(WireModel):
    """A registered account."""

    id: str = Field(default_factory=generate_id)
    email: str
    name: str
    password_hash: str
    points: int = 0
    level: int = 1
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def public(self) -> dict:
        """API representation without the password hash."""
        return self.to_api(exclude={"password_hash"})


# =============================================================================
# Startups and roles
# =============================================================================


class Startup(WireModel):
    """A startup profile. The owner is fixed at creation."""

    id: str = Field(default_factory=generate_id)
    name: str
    owner_id: str
    details: str | None = None
    stage: str | None = None
    industry: str | None = None
    location: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Role(WireModel):
    """A named position within a startup that users can join."""

    id: str = Field(default_factory=generate_id)
    startup_id: str
    title: str
    role_type: str
    is_open: bool = True
    is_paid: bool = False


class UserRole(WireModel):
    """Join record: a user holding a role. (user_id, role_id) is unique."""

    id: str = Field(default_factory=generate_id)
    user_id: str
    role_id: str
    joined_at: datetime = Field(default_factory=utc_now)


class RoleGrant(WireModel):
    """One (startup, role) pair held by a user."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    startup_id: str
    role: str

    @property
    def is_owner(self) -> bool:
        return self.role == OWNER_ROLE
