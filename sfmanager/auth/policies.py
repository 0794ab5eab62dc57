"""
Policies - FastAPI dependencies for route authorization.

    ctx: AuthContext = Depends(get_auth_context)      # any authenticated user
    ctx: AuthContext = Depends(require_admin)         # owns >= 1 startup
    ctx: AuthContext = Depends(require_startup_role("owner", "developer"))

Failures are raised as AuthError subclasses and rendered by the app's
exception handler.
"""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, Request

from sfmanager.auth.authenticator import RequestAuthenticator
from sfmanager.auth.context import AuthContext
from sfmanager.auth.errors import (
    AdminAccessDeniedError,
    ServerConfigurationError,
    StartupAccessDeniedError,
)

logger = logging.getLogger(__name__)


def get_authenticator(request: Request) -> RequestAuthenticator:
    """The authenticator built at startup and stored on app state."""
    authenticator = getattr(request.app.state, "authenticator", None)
    if authenticator is None:
        logger.error("No authenticator on app state; was the lifespan skipped?")
        raise ServerConfigurationError("No authenticator configured")
    return authenticator


async def get_auth_context(
    request: Request,
    authenticator: RequestAuthenticator = Depends(get_authenticator),
) -> AuthContext:
    """Authenticate the request and return its identity."""
    return await authenticator.authenticate(
        request.headers,
        path=request.url.path,
        method=request.method,
    )


# =============================================================================
# Admin Gate
# =============================================================================


async def require_admin(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    """
    Allow only users owning at least one startup.

    Uses the grants already aggregated for this request rather than
    querying owned startups again.
    """
    if not ctx.is_admin:
        raise AdminAccessDeniedError(f"User {ctx.id} owns no startups")
    return ctx


# =============================================================================
# Startup membership
# =============================================================================


def require_startup_role(*roles: str, param: str = "startup_id") -> Callable:
    """
    Require a role in the startup named by the ``param`` path parameter.

    With no roles given, any membership (owner or joined) is enough.
    """

    async def dependency(
        request: Request,
        ctx: AuthContext = Depends(get_auth_context),
    ) -> AuthContext:
        startup_id = request.path_params.get(param)
        if not startup_id or not ctx.has_role(startup_id, *roles):
            raise StartupAccessDeniedError(
                f"User {ctx.id} lacks {roles or 'membership'} in startup {startup_id}"
            )
        return ctx

    return dependency
