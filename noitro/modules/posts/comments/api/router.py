from typing import Any, Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from noitro.core.config import Settings
from noitro.core.exceptions import ValidationError
from noitro.core.schemas import Pagination
from noitro.deps import get_db, get_session_identity, get_settings, resolve_requester
from noitro.modules.posts.comments.schemas.comment import CommentCreate, CommentListResponse, CommentResponse
from noitro.modules.posts.comments.services.comment import create_comment, get_comments_by_post

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("", response_model=CommentListResponse)
def read_comments_by_post_id(
    *,
    db: Session = Depends(get_db),
    post_id: Optional[str] = Query(None, alias="postId"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> Any:
    """Get comments by post ID, newest first"""
    if not post_id:
        raise ValidationError("Thiếu postId")
    comments, total = get_comments_by_post(db, post_id, page=page, limit=limit)
    return CommentListResponse(comments=comments, pagination=Pagination.build(page, limit, total))

@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_new_comment(
    *,
    db: Session = Depends(get_db),
    comment_in: CommentCreate,
    session_id: Optional[str] = Depends(get_session_identity),
    settings: Settings = Depends(get_settings),
) -> Any:
    """Create new comment on a post"""
    author_id = resolve_requester(comment_in.author_id, session_id, settings)
    comment = create_comment(
        db,
        post_id=comment_in.post_id,
        content=comment_in.content,
        author_id=author_id,
        author_name=comment_in.author_name,
        author_avatar=comment_in.author_avatar,
    )
    return CommentResponse(message="Comment đã được tạo thành công!", comment=comment)
