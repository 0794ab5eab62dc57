"""
Request authenticator - turns request headers into an AuthContext.

Flow per request:

    NoToken -> TokenExtracted -> TokenVerified -> UserResolved
            -> RolesAggregated -> Authenticated

Any step may end in an AuthError instead. Credential and identity
failures are 401s; a user id with no matching user is reported exactly
like a bad token. Storage failures become AuthenticationFailedError (500).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from sfmanager.auth.context import AuthContext
from sfmanager.auth.errors import (
    AuthenticationFailedError,
    AuthError,
    MissingCredentialError,
    UserNotFoundError,
)
from sfmanager.auth.jwt import TokenCodec
from sfmanager.auth.roles import RoleAggregator
from sfmanager.auth.users import UserLookup
from sfmanager.integrations.sentry import capture_exception, set_user

logger = logging.getLogger(__name__)

TOKEN_HEADER = "x-auth-token"
BEARER_PREFIX = "Bearer "


def extract_token(headers: Mapping[str, str]) -> str | None:
    """
    Pull the credential out of request headers.

    ``x-auth-token`` wins over ``Authorization: Bearer <token>``.
    """
    lowered = {key.lower(): value for key, value in headers.items()}

    token = lowered.get(TOKEN_HEADER)
    if token:
        # a whitespace-only value still counts as supplied and fails verification
        return token.strip() or token

    authorization = lowered.get("authorization", "")
    if authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip() or None
    return None


class RequestAuthenticator:
    """Runs codec, user lookup and role aggregation for one request."""

    def __init__(self, codec: TokenCodec, users: UserLookup, roles: RoleAggregator):
        self.codec = codec
        self.users = users
        self.roles = roles

    async def authenticate(
        self,
        headers: Mapping[str, str],
        path: str = "",
        method: str = "",
    ) -> AuthContext:
        token = extract_token(headers)

        # token length only; never the token itself
        logger.debug(
            "Auth check %s %s has_token=%s token_length=%s x_auth_token=%s authorization=%s",
            method,
            path,
            token is not None,
            len(token) if token else 0,
            any(k.lower() == TOKEN_HEADER for k in headers.keys()),
            any(k.lower() == "authorization" for k in headers.keys()),
        )

        if not token:
            raise MissingCredentialError()

        try:
            user_id = self.codec.verify(token)
        except AuthError as e:
            logger.info("Rejected credential on %s %s: %s", method, path, e.detail)
            raise

        try:
            user = await self.users.find_by_id(user_id)
            if user is None:
                logger.info("Token references unknown user %s", user_id)
                raise UserNotFoundError(f"User not found: {user_id}")

            grants = await self.roles.roles_for(user)
        except AuthError:
            raise
        except Exception as e:
            capture_exception(e, stage="authenticate", path=path)
            raise AuthenticationFailedError(str(e)) from e

        set_user(user.id)
        return AuthContext(id=user.id, email=user.email, roles=tuple(grants))
