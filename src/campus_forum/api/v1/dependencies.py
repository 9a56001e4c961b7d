"""Shared API dependencies for authentication and common functionality.

The dependencies here turn a Bearer token into an explicit
:class:`ViewerContext` that endpoints pass down to services. Nothing below
the HTTP layer reads request state.
"""

from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from campus_forum.core.errors import ForbiddenError, UnauthorizedError
from campus_forum.core.security import decode_access_token
from campus_forum.core.settings import settings
from campus_forum.db.session import get_db
from campus_forum.models import ReviewStatus, User
from campus_forum.services.visibility import ViewerContext

# HTTP Bearer scheme; missing credentials are reported through UnauthorizedError
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _user_from_token(db: Session, token: str) -> User:
    """Resolve the account referenced by a JWT.

    Raises:
        UnauthorizedError: If the token is invalid or the user is unknown.
    """
    try:
        payload = decode_access_token(token)
    except JWTError as err:
        raise UnauthorizedError("Could not validate credentials") from err

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as err:
        raise UnauthorizedError("Could not validate credentials") from err

    user = db.get(User, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def _check_login_gate(user: User) -> None:
    """Reject banned accounts and accounts that have not passed review."""
    if not user.is_active:
        raise ForbiddenError("Your account has been banned")
    if user.review_status == ReviewStatus.PENDING.value:
        raise ForbiddenError("Your account is awaiting review")
    if user.review_status == ReviewStatus.REJECTED.value:
        raise ForbiddenError("Your registration was rejected")


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Return the authenticated, active, approved account behind the request."""
    if credentials is None:
        raise UnauthorizedError("Authentication required")
    user = _user_from_token(db, credentials.credentials)
    _check_login_gate(user)
    return user


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_viewer(user: CurrentUserDep) -> ViewerContext:
    """Return the viewer context for an authenticated request."""
    return ViewerContext.for_user(user)


def get_optional_viewer(credentials: CredentialsDep, db: SessionDep) -> ViewerContext | None:
    """Return the viewer context, or None for guests."""
    if credentials is None:
        return None
    user = _user_from_token(db, credentials.credentials)
    _check_login_gate(user)
    return ViewerContext.for_user(user)


ViewerDep = Annotated[ViewerContext, Depends(get_viewer)]
OptionalViewerDep = Annotated[ViewerContext | None, Depends(get_optional_viewer)]


def require_admin(viewer: ViewerDep) -> ViewerContext:
    """Allow admin and super_admin viewers only."""
    if not viewer.is_admin:
        raise ForbiddenError("Admin privileges required")
    return viewer


AdminDep = Annotated[ViewerContext, Depends(require_admin)]

PageParam = Annotated[int, Query(ge=1, description="1-based page number")]
LimitParam = Annotated[int, Query(ge=1, le=settings.max_page_size, description="Page size")]
