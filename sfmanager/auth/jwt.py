# =============================================================================
# JWT Token Codec
# =============================================================================
#
# Issues and verifies the signed credentials presented on every protected
# request, and hashes passwords for the login flow.
#
# Credentials carry the user id as ``userId``. Older tokens nested it as
# ``user.id``; both are accepted.
#
# =============================================================================

from __future__ import annotations

import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Any

import jwt

from sfmanager.auth.errors import (
    InvalidSignatureError,
    MalformedCredentialError,
    MissingCredentialError,
    ServerConfigurationError,
    TokenExpiredError,
)
from sfmanager.core.utils import utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Password Hashing
# =============================================================================

def hash_password(password: str) -> str:
    """
    Hash a password using PBKDF2-SHA256.

    Returns: salt:hash format string
    """
    salt = secrets.token_hex(32)
    hash_bytes = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        iterations=100_000
    )
    return f"{salt}:{hash_bytes.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        salt, stored_hash = password_hash.split(':')
    except (ValueError, AttributeError):
        return False
    hash_bytes = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        iterations=100_000
    )
    return secrets.compare_digest(hash_bytes.hex(), stored_hash)


# =============================================================================
# Token Codec
# =============================================================================


def _extract_user_id(payload: dict[str, Any]) -> str | None:
    user_id = payload.get("userId")
    if user_id:
        return str(user_id)
    nested = payload.get("user")
    if isinstance(nested, dict) and nested.get("id"):
        return str(nested["id"])
    return None


class TokenCodec:
    """
    Signs and verifies credentials with a fixed server secret.

    The secret is required: constructing a codec without one raises
    ServerConfigurationError instead of falling back to a default.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_in: timedelta = timedelta(hours=24),
    ):
        if not secret:
            raise ServerConfigurationError("Token codec created without a signing secret")
        self._secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(
        self,
        user_id: str,
        expires_in: timedelta | None = None,
        **extra_claims: Any,
    ) -> str:
        """Create a signed credential for ``user_id``."""
        now = utc_now()
        payload = {
            **extra_claims,
            "userId": user_id,
            "iat": now,
            "exp": now + (expires_in if expires_in is not None else self.expires_in),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str | None) -> dict[str, Any]:
        """
        Decode and validate a credential, returning its claims.

        Raises:
            MissingCredentialError: No token given
            TokenExpiredError: Token has expired
            InvalidSignatureError: Bad signature or undecodable token
        """
        if not token:
            raise MissingCredentialError()
        try:
            return jwt.decode(token, self._secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidTokenError as e:
            raise InvalidSignatureError(f"Invalid token: {e}")

    def verify(self, token: str | None) -> str:
        """
        Verify a credential and return the user id it carries.

        Raises MalformedCredentialError when the claims hold no user id,
        in addition to everything decode() raises.
        """
        payload = self.decode(token)
        user_id = _extract_user_id(payload)
        if not user_id:
            raise MalformedCredentialError("No user ID in token")
        return user_id
