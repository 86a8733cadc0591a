from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header

from leaseright.core.config import settings
from leaseright.core.errors import PermissionDeniedError, SessionExpiredError
from leaseright.models.status import Role
from leaseright.services.local_store import AUTH_TOKENS, get_store


@dataclass(frozen=True)
class SessionContext:
    """Identity of the caller for one request, passed explicitly to every service call."""

    token: str
    role: Role
    user_id: str
    user_name: Optional[str] = None

    @property
    def auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}

    def is_role(self, *roles: Role) -> bool:
        return self.role in roles

    def require(self, *roles: Role) -> "SessionContext":
        if not self.is_role(*roles):
            allowed = ", ".join(role.value for role in roles)
            raise PermissionDeniedError(f"This action requires one of the roles: {allowed}")
        return self

    def owns(self, user_id) -> bool:
        return str(user_id) == str(self.user_id)


def _check_local_token(token: str, role: Role, user_id: str) -> None:
    """Local mode: the token must come from the local login and match the identity headers."""
    tokens = get_store().get(AUTH_TOKENS) or {}
    issued = tokens.get(token) if isinstance(tokens, dict) else None
    if not isinstance(issued, dict):
        raise SessionExpiredError("Session not recognised. Please log in again.")
    if str(issued.get("userId")) != user_id or issued.get("role") != role.value:
        raise SessionExpiredError("Session does not match the signed-in user. Please log in again.")


def get_session(
    authorization: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
    x_user_id: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
) -> SessionContext:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise SessionExpiredError("Missing bearer token. Please log in.")
    token = authorization[7:].strip()
    if not token or not x_user_id:
        raise SessionExpiredError("Incomplete session. Please log in.")
    try:
        role = Role.coerce(x_user_role)
    except ValueError:
        raise SessionExpiredError("Unknown user role. Please log in again.")
    user_id = x_user_id.strip()
    if not settings.USE_BACKEND_API:
        _check_local_token(token, role, user_id)
    return SessionContext(token=token, role=role, user_id=user_id, user_name=x_user_name)


def require_role(*roles: Role):
    """Dependency factory: resolve the session and check its role."""
    def dependency(session: SessionContext = Depends(get_session)) -> SessionContext:
        return session.require(*roles)

    return dependency
