"""
Authentication and role resolution.

Design principles:
1. One typed AuthContext per request, passed through Depends
2. Roles recomputed on every request (owned startups + joined roles)
3. Coarse, fixed error messages; only expiry is distinguishable
4. No fallback signing secret
"""

from sfmanager.auth.errors import (
    AuthError,
    MissingCredentialError,
    MalformedCredentialError,
    TokenExpiredError,
    InvalidSignatureError,
    UserNotFoundError,
    ServerConfigurationError,
    AuthenticationFailedError,
    AdminAccessDeniedError,
    StartupAccessDeniedError,
)
from sfmanager.auth.jwt import TokenCodec, hash_password, verify_password
from sfmanager.auth.users import UserLookup
from sfmanager.auth.roles import RoleAggregator, MembershipStore, JoinedRole
from sfmanager.auth.context import AuthContext
from sfmanager.auth.authenticator import RequestAuthenticator, extract_token
from sfmanager.auth.policies import (
    get_auth_context,
    get_authenticator,
    require_admin,
    require_startup_role,
)
from sfmanager.auth.routes import router as auth_router

__all__ = [
    # Main interface
    "get_auth_context",
    "require_admin",
    "require_startup_role",
    "AuthContext",
    # Pipeline
    "TokenCodec",
    "UserLookup",
    "RoleAggregator",
    "MembershipStore",
    "JoinedRole",
    "RequestAuthenticator",
    "extract_token",
    "get_authenticator",
    "hash_password",
    "verify_password",
    # Errors
    "AuthError",
    "MissingCredentialError",
    "MalformedCredentialError",
    "TokenExpiredError",
    "InvalidSignatureError",
    "UserNotFoundError",
    "ServerConfigurationError",
    "AuthenticationFailedError",
    "AdminAccessDeniedError",
    "StartupAccessDeniedError",
    # Router
    "auth_router",
]
