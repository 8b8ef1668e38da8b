from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from noitro.core.config import Settings
from noitro.core.exceptions import ValidationError
from noitro.deps import get_db, get_session_identity, get_settings, resolve_requester
from noitro.modules.posts.reactions.schemas.reaction import ReactionStatus, ReactionToggle, ToggleResponse
from noitro.modules.posts.reactions.services.reaction import get_reaction_status, toggle_reaction

router = APIRouter()

@router.get("", response_model=ReactionStatus)
def read_reaction_status(
    *,
    db: Session = Depends(get_db),
    post_id: Optional[str] = Query(None, alias="postId"),
    user_id: Optional[str] = Query(None, alias="userId"),
    author_id: Optional[str] = Query(None, alias="authorId"),
) -> Any:
    """Get reaction counts and whether a user has reacted"""
    if not post_id:
        raise ValidationError("Thiếu postId")
    return get_reaction_status(db, post_id, user_id or author_id)

@router.post("", response_model=ToggleResponse)
def toggle_post_reaction(
    *,
    db: Session = Depends(get_db),
    reaction_in: ReactionToggle,
    session_id: Optional[str] = Depends(get_session_identity),
    settings: Settings = Depends(get_settings),
) -> Any:
    """Like a post, or remove the like if already present"""
    author_id = resolve_requester(reaction_in.user_id or reaction_in.author_id, session_id, settings)
    result = toggle_reaction(db, reaction_in.post_id, author_id, reaction_in.type)
    return ToggleResponse(
        message="Đã thích bài viết!" if result.added else "Đã bỏ thích bài viết!",
        action="added" if result.added else "removed",
        added=result.added,
        reaction=result.reaction,
        likes_count=result.likes_count,
    )
