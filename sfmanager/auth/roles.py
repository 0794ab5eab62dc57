"""
Role aggregation - which startups a user belongs to, and as what.

A user's grants are the union of two independent reads:

1. every startup they own -> ``{startupId, "owner"}``
2. every role they have joined -> ``{startupId, roleType}``

Owned grants come first. Nothing is de-duplicated: owning a startup and
holding a joined role in it are different grant types and both are kept.
Nothing is cached either; each call re-reads the store.
"""

from __future__ import annotations

from dataclasses import dataclass

from sfmanager.core.models import OWNER_ROLE, Role, RoleGrant, Startup, User, UserRole
from sfmanager.storage.base import Collections, MetadataStorage


@dataclass(frozen=True)
class JoinedRole:
    """A UserRole row joined through Role to Startup."""

    membership: UserRole
    role: Role
    startup: Startup

    def to_api(self) -> dict:
        return {
            **self.membership.to_api(),
            "startupId": self.startup.id,
            "role": {
                **self.role.to_api(),
                "startup": self.startup.to_api(),
            },
        }


class RoleAggregator:
    """Computes the (startup, role) grants of a user."""

    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def owned_startups(self, user_id: str) -> list[Startup]:
        rows = await self.metadata.query(
            Collections.STARTUPS, {"owner_id": user_id}, limit=None
        )
        return [Startup.model_validate(row) for row in rows]

    async def joined_roles(self, user_id: str) -> list[JoinedRole]:
        """UserRoles of the user with their Role and Startup (inner join)."""
        memberships = await self.metadata.query(
            Collections.USER_ROLES, {"user_id": user_id}, limit=None
        )

        joined = []
        for row in memberships:
            membership = UserRole.model_validate(row)
            role_data = await self.metadata.get(Collections.ROLES, membership.role_id)
            if not role_data:
                continue
            role = Role.model_validate(role_data)
            startup_data = await self.metadata.get(Collections.STARTUPS, role.startup_id)
            if not startup_data:
                continue
            joined.append(JoinedRole(membership, role, Startup.model_validate(startup_data)))
        return joined

    async def roles_for(self, user: User | str) -> list[RoleGrant]:
        user_id = user if isinstance(user, str) else user.id

        owned = await self.owned_startups(user_id)
        joined = await self.joined_roles(user_id)

        return [
            *(RoleGrant(startup_id=s.id, role=OWNER_ROLE) for s in owned),
            *(RoleGrant(startup_id=j.startup.id, role=j.role.role_type) for j in joined),
        ]


class MembershipStore:
    """Writes startups, roles and memberships. Enforces (user, role) uniqueness."""

    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def create_startup(self, owner_id: str, name: str, **fields) -> Startup:
        startup = Startup(owner_id=owner_id, name=name, **fields)
        await self.metadata.save(Collections.STARTUPS, startup.id, startup.model_dump())
        return startup

    async def create_role(self, startup_id: str, title: str, role_type: str, **fields) -> Role:
        role = Role(startup_id=startup_id, title=title, role_type=role_type, **fields)
        await self.metadata.save(Collections.ROLES, role.id, role.model_dump())
        return role

    async def join_role(self, user_id: str, role_id: str) -> UserRole:
        """
        Record that a user holds a role.

        Raises ValueError if the user already holds it.
        """
        existing = await self.metadata.query(
            Collections.USER_ROLES, {"user_id": user_id, "role_id": role_id}, limit=1
        )
        if existing:
            raise ValueError(f"User {user_id} already holds role {role_id}")

        membership = UserRole(user_id=user_id, role_id=role_id)
        await self.metadata.save(Collections.USER_ROLES, membership.id, membership.model_dump())
        return membership
