from typing import List, Optional, Tuple
import uuid
import logging

from sqlalchemy.orm import Session

from noitro.core.exceptions import ValidationError
from noitro.modules.identity.services.identity import author_view, ensure_user
from noitro.modules.posts.comments.models.comment import Comment
from noitro.modules.posts.comments.schemas.comment import Comment as CommentSchema
from noitro.modules.posts.services.post import get_authors, get_post_or_404, paginate, recompute_counters

logger = logging.getLogger(__name__)

def get_comment(db: Session, comment_id: str) -> Optional[Comment]:
    """Get comment by ID"""
    return db.query(Comment).filter(Comment.id == comment_id).first()

def get_comments_by_post(db: Session, post_id: str, page: int = 1, limit: int = 20) -> Tuple[List[CommentSchema], int]:
    """Get comments by post ID, newest first, with their authors"""
    get_post_or_404(db, post_id)
    query = (
        db.query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.desc(), Comment.id.desc())
    )
    comments, total = paginate(query, page, limit)

    authors = get_authors(db, (c.author_id for c in comments))
    result = []
    for comment in comments:
        schema = CommentSchema.model_validate(comment)
        schema.author = author_view(authors.get(comment.author_id), comment.author_id)
        result.append(schema)
    return result, total

def create_comment(
    db: Session,
    post_id: str,
    content: str,
    author_id: str,
    author_name: Optional[str] = None,
    author_avatar: Optional[str] = None,
) -> CommentSchema:
    """Create a new comment and refresh the post's comment counter"""
    if not post_id or not content or not content.strip() or not author_id:
        raise ValidationError("Thiếu thông tin bắt buộc: postId, content, authorId")

    get_post_or_404(db, post_id)
    user = ensure_user(db, author_id, author_name, author_avatar)

    comment = Comment(
        id=str(uuid.uuid4()),
        content=content.strip(),
        post_id=post_id,
        author_id=author_id,
        likes=0,
    )
    db.add(comment)
    recompute_counters(db, post_id)
    db.commit()
    db.refresh(comment)
    logger.info(f"Comment {comment.id} created on post {post_id}")

    schema = CommentSchema.model_validate(comment)
    schema.author = author_view(user, author_id)
    return schema

def delete_comment(db: Session, comment: Comment) -> Comment:
    """Delete comment and refresh the post's comment counter"""
    post_id = comment.post_id
    db.delete(comment)
    recompute_counters(db, post_id)
    db.commit()
    return comment
