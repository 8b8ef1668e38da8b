from typing import Any, Optional
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from noitro.core.config import Settings
from noitro.core.schemas import MessageResponse, Pagination
from noitro.deps import get_db, get_session_identity, get_settings, resolve_requester
from noitro.modules.posts.schemas.post import (
    PostCreate, PostUpdate, PostDetailResponse, PostListData, PostListResponse, PostResponse,
)
from noitro.modules.posts.services.post import (
    create_post, delete_post, get_post_author, get_post_or_404, get_related_posts,
    increment_views, list_posts, to_post_schema, update_post, with_authors,
)

logger = logging.getLogger(__name__)

router = APIRouter()

def _with_author(db: Session, post):
    schema = to_post_schema(post, {})
    schema.author = get_post_author(db, post)
    return schema

@router.get("", response_model=PostListResponse)
def read_posts(
    *,
    db: Session = Depends(get_db),
    category: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> Any:
    """
    Retrieve published posts, newest first.
    """
    posts, total = list_posts(db, category=category, tag=tag, page=page, limit=limit)
    return PostListResponse(
        data=PostListData(
            posts=with_authors(db, posts),
            pagination=Pagination.build(page, limit, total),
        )
    )

@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_new_post(
    *,
    db: Session = Depends(get_db),
    post_in: PostCreate,
    session_id: Optional[str] = Depends(get_session_identity),
    settings: Settings = Depends(get_settings),
) -> Any:
    """
    Create new post.
    """
    author_id = resolve_requester(post_in.author_id, session_id, settings)
    post = create_post(db, post_in, author_id)
    return PostResponse(message="Bài viết đã được tạo thành công!", post=_with_author(db, post))

@router.get("/{post_id}", response_model=PostDetailResponse)
def read_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
) -> Any:
    """
    Get post by ID, counting a view and attaching related posts.
    """
    post = get_post_or_404(db, post_id)
    increment_views(db, post_id)
    return PostDetailResponse(
        post=_with_author(db, post),
        related_posts=get_related_posts(db, post),
    )

@router.put("/{post_id}", response_model=PostResponse)
def update_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    post_in: PostUpdate,
    session_id: Optional[str] = Depends(get_session_identity),
    settings: Settings = Depends(get_settings),
) -> Any:
    """
    Update a post. Only its author may do so.
    """
    requester_id = resolve_requester(post_in.author_id, session_id, settings)
    post = update_post(db, post_id, post_in, requester_id)
    return PostResponse(message="Cập nhật bài viết thành công!", post=_with_author(db, post))

@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    author_id: Optional[str] = Query(None, alias="authorId"),
    session_id: Optional[str] = Depends(get_session_identity),
    settings: Settings = Depends(get_settings),
) -> Any:
    """
    Delete a post and all associated data (comments and reactions).
    Only its author may do so.
    """
    requester_id = resolve_requester(author_id, session_id, settings)
    delete_post(db, post_id, requester_id)
    return MessageResponse(message="Xóa bài viết thành công!")
