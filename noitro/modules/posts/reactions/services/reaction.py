from typing import Optional
import uuid
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from noitro.core.exceptions import ConflictError, ValidationError
from noitro.modules.identity.services.identity import ensure_user
from noitro.modules.posts.models.post import Post
from noitro.modules.posts.reactions.models.reaction import Reaction
from noitro.modules.posts.reactions.schemas.reaction import Reaction as ReactionSchema, ReactionStatus, ToggleResult
from noitro.modules.posts.services.post import get_post_or_404, recompute_counters

logger = logging.getLogger(__name__)

DEFAULT_REACTION = "LIKE"

def get_reaction(db: Session, author_id: str, post_id: str) -> Optional[Reaction]:
    """Get reaction by author ID and post ID"""
    return (
        db.query(Reaction)
        .filter(Reaction.author_id == author_id, Reaction.post_id == post_id)
        .first()
    )

def get_reaction_status(db: Session, post_id: str, author_id: Optional[str] = None) -> ReactionStatus:
    """Reaction counts by type for a post and whether the given user has reacted"""
    counts = (
        db.query(Reaction.type, func.count(Reaction.id))
        .filter(Reaction.post_id == post_id)
        .group_by(Reaction.type)
        .all()
    )
    reaction_counts = {reaction_type: count for reaction_type, count in counts}

    user_reaction = get_reaction(db, author_id, post_id) if author_id else None
    return ReactionStatus(
        post_id=post_id,
        total_count=sum(reaction_counts.values()),
        reaction_counts=reaction_counts,
        user_reaction=ReactionSchema.model_validate(user_reaction) if user_reaction else None,
        has_user_reacted=user_reaction is not None,
    )

def toggle_reaction(db: Session, post_id: str, author_id: str, reaction_type: str = DEFAULT_REACTION) -> ToggleResult:
    """
    Remove the user's reaction if present, add one otherwise.

    No locking here: two concurrent adds for the same pair are settled by the
    unique constraint, and the loser gets a ConflictError.
    """
    if not post_id or not author_id:
        raise ValidationError("Thiếu thông tin bắt buộc: postId, userId/authorId")

    get_post_or_404(db, post_id)
    ensure_user(db, author_id)

    existing = get_reaction(db, author_id, post_id)
    reaction = None
    if existing:
        db.delete(existing)
        added = False
    else:
        reaction = Reaction(
            id=str(uuid.uuid4()),
            type=reaction_type or DEFAULT_REACTION,
            post_id=post_id,
            author_id=author_id,
        )
        db.add(reaction)
        added = True

    try:
        recompute_counters(db, post_id)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Concurrent reaction toggle on post {post_id} by {author_id}: {e}")
        raise ConflictError()

    likes_count = db.query(Post.likes).filter(Post.id == post_id).scalar() or 0
    logger.info(f"Reaction {'added' if added else 'removed'} on post {post_id} by {author_id}")
    return ToggleResult(
        added=added,
        reaction=ReactionSchema.model_validate(reaction) if reaction else None,
        likes_count=likes_count,
    )
