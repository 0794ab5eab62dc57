"""
User lookup and account persistence.
"""

from __future__ import annotations

import logging

from sfmanager.auth.errors import EmailAlreadyRegisteredError
from sfmanager.auth.jwt import hash_password, verify_password
from sfmanager.core.models import User
from sfmanager.storage.base import Collections, MetadataStorage

logger = logging.getLogger(__name__)


class UserLookup:
    """Resolves users by id or email against the metadata store."""

    def __init__(self, metadata: MetadataStorage):
        self.metadata = metadata

    async def find_by_id(self, user_id: str) -> User | None:
        data = await self.metadata.get(Collections.USERS, user_id)
        return User.model_validate(data) if data else None

    async def find_by_email(self, email: str) -> User | None:
        rows = await self.metadata.query(
            Collections.USERS, {"email": email.strip().lower()}, limit=1
        )
        return User.model_validate(rows[0]) if rows else None

    async def create(self, email: str, password: str, name: str | None = None) -> User:
        """
        Register a new user.

        Raises EmailAlreadyRegisteredError if the email is taken.
        """
        email = email.strip().lower()
        if await self.find_by_email(email):
            raise EmailAlreadyRegisteredError("User with this email already exists")

        user = User(
            email=email,
            name=name or email.split("@")[0],
            password_hash=hash_password(password),
        )
        await self.metadata.save(Collections.USERS, user.id, user.model_dump())
        logger.info("Registered user %s", user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User | None:
        """Return the user if the email/password pair matches, else None."""
        user = await self.find_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            return None
        return user
