"""FastAPI dependencies for session authentication.

Provides helpers used by API endpoints to resolve the caller's session from the
X-Session-Token header and to check the signed-in user's role.
"""

from typing import Annotated

from fastapi import Header, HTTPException

from food_ordering_service.models.user_models import Role, User
from food_ordering_service.services.session_service import Session, SessionManager


def get_session_from_header(
    x_session_token: Annotated[str | None, Header()] = None,
    session_manager: SessionManager | None = None,
) -> Session:
    """Resolve the session named by the X-Session-Token header.

    Args:
        x_session_token: Session token from X-Session-Token header (injected by FastAPI)
        session_manager: SessionManager holding live sessions

    Returns:
        Session: The caller's session

    Raises:
        HTTPException: 401 if the token is missing or unknown
    """
    if not x_session_token:
        raise HTTPException(status_code=401, detail="Missing session token")

    session = session_manager.get_session(x_session_token) if session_manager else None
    if session is None:
        raise HTTPException(status_code=401, detail="Invalid session token")

    return session


def require_user(session: Session, *roles: Role) -> User:
    """Return the session's user, optionally requiring one of the given roles.

    Args:
        session: The caller's session
        roles: Roles allowed to proceed (any role when empty)

    Returns:
        User: The signed-in user

    Raises:
        HTTPException: 401 if nobody is signed in, 403 if the role is not allowed
    """
    if session.user is None:
        raise HTTPException(status_code=401, detail="Login required")

    if roles and session.user.role not in roles:
        raise HTTPException(status_code=403, detail="Not allowed for this role")

    return session.user
