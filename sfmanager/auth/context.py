"""
Auth context - who the caller is and which startups they belong to.

This is the only identity contract route handlers may rely on. It is
built fresh by the RequestAuthenticator for every request and passed to
handlers through ``Depends``; handlers never re-derive identity themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sfmanager.core.models import RoleGrant


@dataclass(frozen=True)
class AuthContext:
    """
    Authenticated identity for one request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(get_auth_context)):
            if ctx.has_role(startup_id, "owner"):
                ...
    """

    id: str
    email: str
    roles: tuple[RoleGrant, ...] = field(default_factory=tuple)

    @property
    def owned_startup_ids(self) -> list[str]:
        return [grant.startup_id for grant in self.roles if grant.is_owner]

    @property
    def is_admin(self) -> bool:
        """Admins are users owning at least one startup."""
        return any(grant.is_owner for grant in self.roles)

    def roles_in(self, startup_id: str) -> list[str]:
        """All role names held in one startup, in grant order."""
        return [grant.role for grant in self.roles if grant.startup_id == startup_id]

    def has_role(self, startup_id: str, *roles: str) -> bool:
        """
        Does the user hold any of ``roles`` in the startup?

        With no roles given, any membership counts.
        """
        held = self.roles_in(startup_id)
        if not roles:
            return bool(held)
        return any(role in held for role in roles)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "roles": [grant.to_api() for grant in self.roles],
        }
