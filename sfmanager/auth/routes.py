# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /auth/register         - Create account, returns user + token
#   POST /auth/login            - Returns user (with startups/roles) + token
#   GET  /auth/me               - Current user with startups/roles
#   GET  /auth/test-auth        - Echo the resolved identity
#   GET  /auth/joined-startups  - Startups joined through roles
#
# =============================================================================

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field

from sfmanager.auth.authenticator import RequestAuthenticator
from sfmanager.auth.context import AuthContext
from sfmanager.auth.errors import EmailAlreadyRegisteredError
from sfmanager.auth.policies import get_auth_context, get_authenticator
from sfmanager.core.models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


# =============================================================================
# Request Models
# =============================================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=10)
    name: str | None = Field(default=None, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


async def _user_with_memberships(auth: RequestAuthenticator, user: User) -> dict:
    owned = await auth.roles.owned_startups(user.id)
    joined = await auth.roles.joined_roles(user.id)
    return {
        **user.public(),
        "ownedStartups": [s.to_api() for s in owned],
        "joinedRoles": [j.to_api() for j in joined],
    }


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/register", status_code=201)
async def register(
    data: RegisterRequest,
    auth: RequestAuthenticator = Depends(get_authenticator),
):
    """Create a new account and return a token for it."""
    try:
        user = await auth.users.create(data.email, data.password, data.name)
    except EmailAlreadyRegisteredError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    token = auth.codec.issue(user.id, email=user.email)
    return {
        "user": {**user.public(), "ownedStartups": [], "joinedRoles": []},
        "token": token,
    }


@router.post("/login")
async def login(
    data: LoginRequest,
    auth: RequestAuthenticator = Depends(get_authenticator),
):
    """Authenticate with email and password."""
    user = await auth.users.authenticate(data.email, data.password)
    if not user:
        return JSONResponse(status_code=401, content={"error": "Invalid credentials"})

    logger.info("User %s logged in", user.id)
    return {
        "user": await _user_with_memberships(auth, user),
        "token": auth.codec.issue(user.id, email=user.email),
    }


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.get("/me")
async def get_current_user(
    ctx: AuthContext = Depends(get_auth_context),
    auth: RequestAuthenticator = Depends(get_authenticator),
):
    """The current user, with owned startups and joined roles."""
    user = await auth.users.find_by_id(ctx.id)
    if not user:
        return JSONResponse(status_code=404, content={"error": "User not found"})
    return await _user_with_memberships(auth, user)


@router.get("/test-auth")
async def test_auth(ctx: AuthContext = Depends(get_auth_context)):
    return {"message": "Authentication successful", "user": ctx.to_dict()}


@router.get("/joined-startups")
async def get_joined_startups(
    ctx: AuthContext = Depends(get_auth_context),
    auth: RequestAuthenticator = Depends(get_authenticator),
):
    """Startups the user belongs to through a joined role."""
    joined = await auth.roles.joined_roles(ctx.id)
    return [
        {
            **j.startup.to_api(),
            "role": {"id": j.role.id, "title": j.role.title, "roleType": j.role.role_type},
        }
        for j in joined
    ]
