from typing import Any, Optional
import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from noitro.core.config import Settings
from noitro.core.exceptions import ForbiddenError, ValidationError
from noitro.core.security import create_session_token
from noitro.deps import get_claimed_identity, get_db, get_settings
from noitro.modules.identity.schemas.user import (
    IdentityOut, IdentityRequest, IdentityResponse, IssuedIdentityResponse,
)
from noitro.modules.identity.services.identity import get_identity, issue_identity

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=IdentityResponse)
def read_identity(
    *,
    db: Session = Depends(get_db),
    session_id: Optional[str] = Query(None, alias="sessionId"),
) -> Any:
    """Get a stored anonymous identity by its session id"""
    if not session_id:
        raise ValidationError("Thiếu sessionId")
    identity = get_identity(db, session_id)
    return IdentityResponse(user=IdentityOut.from_identity(identity))

@router.post("", response_model=IssuedIdentityResponse)
def issue_anonymous_identity(
    *,
    db: Session = Depends(get_db),
    identity_in: Optional[IdentityRequest] = None,
    response: Response,
    token_identity: Optional[str] = Depends(get_claimed_identity),
    settings: Settings = Depends(get_settings),
) -> Any:
    """
    Fetch or create an anonymous identity and hand out its session token.

    A token for an already stored identity is only reissued to a caller
    presenting a token signed for that same identity, even an expired one.
    """
    identity_in = identity_in or IdentityRequest()
    identity, created, persisted = issue_identity(
        db,
        existing_id=identity_in.session_id,
        nickname=identity_in.nickname,
        avatar=identity_in.avatar,
    )

    if not created and token_identity != identity.id:
        logger.warning(f"Token reissue refused for stored identity {identity.id}")
        raise ForbiddenError("Phiên ẩn danh không hợp lệ")

    if created:
        response.status_code = status.HTTP_201_CREATED
    return IssuedIdentityResponse(
        user=IdentityOut.from_identity(identity),
        token=create_session_token(identity.id, settings),
        persisted=persisted,
    )
