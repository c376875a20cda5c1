from typing import Optional
from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from myhome.core.config import settings
from myhome.core.database import get_db
from myhome.core.security import decode_session_token
from myhome.models.user import User
from myhome.repositories.user_repository import user_repository
from myhome.services.community_service import community_service

# Bearer scheme - extracts the session token from the Authorization header
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user from the session token.

    Used in route handlers to require authentication; the returned user is
    passed on explicitly to any service that needs the caller's identity.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    # None if the token is invalid, expired, or tampered with
    session_token = decode_session_token(credentials.credentials, settings.SECRET_KEY)
    if session_token is None:
        raise credentials_exception

    # The user may have been removed after the token was issued
    user = user_repository.find_by_user_id(db, session_token.user_id)
    if user is None:
        raise credentials_exception

    return user


def require_community_admin(
    community_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> User:
    """Only admins of the community in the path may manage its admins"""
    is_admin = community_service.is_community_admin(db, community_id, current_user.user_id)
    # Unknown community: let the route answer 404
    if is_admin is False:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User is not an admin of this community",
        )
    return current_user


class PageParams:
    """page/size query parameters shared by every listing route"""

    def __init__(
        self,
        page: int = Query(0, ge=0, description="Zero-based page index"),
        size: Optional[int] = Query(None, ge=1, le=1000, description="Page size"),
    ):
        self.page = page
        self.size = size or settings.DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return self.page * self.size
