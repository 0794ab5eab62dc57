"""
Authentication error taxonomy.

Every failure in the auth pipeline is an AuthError. Each subclass knows the
HTTP status and JSON body it renders as, so route handlers never have to
translate them. The rendered message is deliberately coarse: only expiry is
distinguished, so clients can trigger a re-login flow.
"""

from __future__ import annotations


class AuthError(Exception):
    """Base exception for authentication and authorization failures."""

    status_code: int = 401
    message: str = "Token is not valid"
    body_key: str = "msg"

    def __init__(self, detail: str | None = None):
        # detail is for logs only, never for the response body
        self.detail = detail or self.message
        super().__init__(self.detail)

    def to_body(self) -> dict[str, str]:
        return {self.body_key: self.message}


# =============================================================================
# Credential errors (401)
# =============================================================================


class MissingCredentialError(AuthError):
    """No credential was supplied."""
    message = "No token, authorization denied"


class TokenExpiredError(AuthError):
    """Credential expiry has passed."""
    message = "Token has expired"


class InvalidSignatureError(AuthError):
    """Signature mismatch or undecodable token."""
    message = "Invalid token structure"


class MalformedCredentialError(AuthError):
    """Token decoded but carries no user identifier."""
    message = "Token is not valid"


class UserNotFoundError(AuthError):
    """Token is valid but references no known user."""
    message = "Token is not valid"


# =============================================================================
# Server-side errors (500)
# =============================================================================


class ServerConfigurationError(AuthError):
    """Signing secret (or other required config) is missing."""
    status_code = 500
    message = "Server configuration error"


class AuthenticationFailedError(AuthError):
    """Unexpected failure while resolving identity (e.g. storage down)."""
    status_code = 500
    message = "Authentication error"
    body_key = "error"


# =============================================================================
# Authorization errors
# =============================================================================


class AdminAccessDeniedError(AuthError):
    status_code = 403
    message = "Access denied. Admins only."
    body_key = "message"


class StartupAccessDeniedError(AuthError):
    status_code = 403
    message = "Access denied"
    body_key = "message"


class EmailAlreadyRegisteredError(ValueError):
    """Registration attempted with an email that already has an account."""
