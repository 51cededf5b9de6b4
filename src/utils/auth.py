"""Resolve a SessionContext from an API Gateway event."""

from typing import Any, Dict, Optional

from config.settings import Settings
from models.session import SessionContext
from utils.error_handling import AuthError, ForbiddenError


def session_from_event(event: Dict[str, Any], settings: Optional[Settings] = None) -> SessionContext:
    """
    Build the caller's session from the JWT authorizer claims.

    With auth disabled the dashboard is trusted and gets an anonymous admin.
    """
    settings = settings or Settings.from_environment()
    if not settings.auth_enabled:
        return SessionContext()

    claims = (
        ((event.get("requestContext") or {}).get("authorizer") or {})
        .get("jwt", {})
        .get("claims")
    )
    if not claims or not claims.get("sub"):
        raise AuthError()

    return SessionContext(
        user_id=claims["sub"],
        email=claims.get("email"),
        role=claims.get("custom:role") or claims.get("role") or "viewer",
        authenticated=True,
    )


def require_admin(event: Dict[str, Any], settings: Optional[Settings] = None) -> SessionContext:
    """Session for mutating routes; non-admin roles are rejected."""
    session = session_from_event(event, settings)
    if not session.is_admin:
        raise ForbiddenError("Admin role required")
    return session
