"""
Tests for role aggregation and membership writes.
"""

import pytest

from sfmanager.core.models import RoleGrant
from sfmanager.storage import Collections


class TestRoleAggregator:
    @pytest.mark.asyncio
    async def test_owned_then_joined(self, users, roles, memberships):
        user = await users.create("u@example.com", "password-long-enough")
        other = await users.create("o@example.com", "password-long-enough")

        s1 = await memberships.create_startup(user.id, "S1")
        s2 = await memberships.create_startup(user.id, "S2")
        s3 = await memberships.create_startup(other.id, "S3")
        designer = await memberships.create_role(s3.id, "Designer", "designer")
        await memberships.join_role(user.id, designer.id)

        grants = await roles.roles_for(user)

        assert grants == [
            RoleGrant(startup_id=s1.id, role="owner"),
            RoleGrant(startup_id=s2.id, role="owner"),
            RoleGrant(startup_id=s3.id, role="designer"),
        ]

    @pytest.mark.asyncio
    async def test_idempotent(self, roles, seeded):
        first = await roles.roles_for(seeded.founder)
        second = await roles.roles_for(seeded.founder)
        assert first == second

    @pytest.mark.asyncio
    async def test_not_cached(self, roles, memberships, seeded):
        before = await roles.roles_for(seeded.loner)
        startup = await memberships.create_startup(seeded.loner.id, "Fresh")
        after = await roles.roles_for(seeded.loner)

        assert before == []
        assert after == [RoleGrant(startup_id=startup.id, role="owner")]

    @pytest.mark.asyncio
    async def test_owner_and_member_of_same_startup_kept(self, roles, memberships, seeded):
        cto = await memberships.create_role(seeded.startup_a.id, "CTO", "cto")
        await memberships.join_role(seeded.founder.id, cto.id)

        grants = await roles.roles_for(seeded.founder)

        assert [g.role for g in grants if g.startup_id == seeded.startup_a.id] == ["owner", "cto"]
        assert len(grants) == 3

    @pytest.mark.asyncio
    async def test_dangling_membership_skipped(self, storage, roles, seeded):
        await storage.metadata.delete(Collections.ROLES, seeded.developer.id)

        grants = await roles.roles_for(seeded.founder)

        assert grants == [RoleGrant(startup_id=seeded.startup_a.id, role="owner")]

    @pytest.mark.asyncio
    async def test_accepts_user_id(self, roles, seeded):
        assert await roles.roles_for(seeded.founder.id) == await roles.roles_for(seeded.founder)

    @pytest.mark.asyncio
    async def test_joined_roles_carry_startup(self, roles, seeded):
        joined = await roles.joined_roles(seeded.founder.id)

        assert len(joined) == 1
        assert joined[0].startup.name == "Beta"
        assert joined[0].role.role_type == "developer"
        api = joined[0].to_api()
        assert api["startupId"] == seeded.startup_b.id
        assert api["role"]["roleType"] == "developer"
        assert api["role"]["startup"]["ownerId"] == seeded.other.id

    def test_grant_wire_format(self):
        grant = RoleGrant(startup_id="A", role="owner")
        assert grant.to_api() == {"startupId": "A", "role": "owner"}
        assert grant.is_owner

    @pytest.mark.asyncio
    async def test_owned_startups_not_truncated(self, roles, memberships, seeded):
        owned = [
            await memberships.create_startup(seeded.loner.id, f"Venture {i}")
            for i in range(1005)
        ]

        grants = await roles.roles_for(seeded.loner)

        assert len(grants) == 1005
        assert [g.startup_id for g in grants] == [s.id for s in owned]

    @pytest.mark.asyncio
    async def test_joined_roles_not_truncated(self, roles, memberships, seeded):
        for i in range(150):
            role = await memberships.create_role(seeded.startup_b.id, f"Role {i}", "advisor")
            await memberships.join_role(seeded.loner.id, role.id)

        grants = await roles.roles_for(seeded.loner)

        assert len(grants) == 150
        assert {g.role for g in grants} == {"advisor"}


class TestMembershipStore:
    @pytest.mark.asyncio
    async def test_duplicate_join_rejected(self, memberships, seeded):
        with pytest.raises(ValueError):
            await memberships.join_role(seeded.founder.id, seeded.developer.id)

    @pytest.mark.asyncio
    async def test_same_role_different_users(self, memberships, roles, seeded):
        await memberships.join_role(seeded.loner.id, seeded.developer.id)

        grants = await roles.roles_for(seeded.loner)
        assert grants == [RoleGrant(startup_id=seeded.startup_b.id, role="developer")]
