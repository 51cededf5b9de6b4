"""Per-request session context."""

from typing import Optional

from pydantic import BaseModel


class SessionContext(BaseModel):
    """
    Who is calling, resolved once per request and passed down explicitly.

    When authentication is disabled every request runs as an anonymous admin.
    """

    user_id: Optional[str] = None
    email: Optional[str] = None
    role: str = "admin"
    authenticated: bool = False

    @property
    def actor(self) -> str:
        return self.email or self.user_id or "anonymous"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
