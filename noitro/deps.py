from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from noitro.core.config import Settings
from noitro.core.exceptions import ForbiddenError, ValidationError
from noitro.core.security import verify_session_token

# Anonymous session token, optional at the HTTP level
session_scheme = HTTPBearer(auto_error=False)

def get_db(request: Request) -> Generator:
    """
    Dependency for getting DB session
    """
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

def get_session_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(session_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    """
    Dependency returning the identity id bound to the bearer token, if any
    """
    if credentials is None:
        return None
    identity_id = verify_session_token(credentials.credentials, settings)
    if not identity_id:
        raise ForbiddenError("Phiên ẩn danh không hợp lệ hoặc đã hết hạn")
    return identity_id

def resolve_requester(claimed_id: Optional[str], session_id: Optional[str], settings: Settings) -> str:
    """
    Decide who is performing a write.

    The token subject wins; a client-supplied id that disagrees with it is
    rejected. Without a token the claimed id is only accepted when
    REQUIRE_SESSION_TOKEN is off.
    """
    if session_id:
        if claimed_id and claimed_id != session_id:
            raise ForbiddenError("authorId không khớp với phiên hiện tại")
        return session_id

    if settings.REQUIRE_SESSION_TOKEN:
        raise ForbiddenError("Thiếu phiên ẩn danh, vui lòng tải lại trang")
    if not claimed_id:
        raise ValidationError("Thiếu authorId")
    return claimed_id

def get_claimed_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(session_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    """
    Dependency for identity issuance: the identity id a token was signed for,
    expired or not. Unreadable tokens count as no token.
    """
    if credentials is None:
        return None
    return verify_session_token(credentials.credentials, settings, verify_exp=False)
