from typing import Dict, Iterable, List, Optional, Tuple, Union
import uuid
import logging
import re

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from noitro.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from noitro.core.schemas import Author
from noitro.modules.identity.models.user import User
from noitro.modules.identity.services.identity import author_view, ensure_user
from noitro.modules.posts.models.post import Post, PostTag, CATEGORIES, STATUSES
from noitro.modules.posts.schemas.post import PostCreate, PostUpdate, Post as PostSchema, RelatedPost
from noitro.modules.posts.comments.models.comment import Comment
from noitro.modules.posts.reactions.models.reaction import Reaction

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 150
_TAG_SEPARATORS = re.compile(r"[\s,]+")

def normalize_tags(raw: Union[str, Iterable[str], None]) -> List[str]:
    """
    Split hashtag input on whitespace/commas, strip '#', drop empties and
    repeats while keeping the author's order.
    """
    if not raw:
        return []
    if isinstance(raw, str):
        raw = [raw]

    tags = []
    for chunk in raw:
        for piece in _TAG_SEPARATORS.split(chunk or ""):
            tag = piece.strip().lstrip("#").strip()
            if tag and tag not in tags:
                tags.append(tag)
    return tags

def derive_excerpt(content: str, excerpt: Optional[str] = None) -> str:
    if excerpt and excerpt.strip():
        return excerpt.strip()
    if len(content) > EXCERPT_LENGTH:
        return content[:EXCERPT_LENGTH] + "..."
    return content

def _require_text(value: Optional[str]) -> bool:
    return bool(value and value.strip())

def _validate_choice(value: str, choices: Tuple[str, ...], label: str) -> None:
    if value not in choices:
        raise ValidationError(f"{label} không hợp lệ. Chọn một trong: {', '.join(choices)}")

def _images_from(post_in) -> Optional[List[str]]:
    if post_in.images is not None:
        return [url for url in post_in.images if url]
    if post_in.image:
        return [post_in.image]
    return None

def get_post(db: Session, post_id: str) -> Optional[Post]:
    """Get post by ID"""
    logger.debug(f"Getting post with ID: {post_id}")
    return db.query(Post).filter(Post.id == post_id).first()

def get_post_or_404(db: Session, post_id: str) -> Post:
    post = get_post(db, post_id)
    if not post:
        raise NotFoundError("Không tìm thấy bài viết")
    return post

def _published(db: Session):
    return db.query(Post).filter(Post.status == "published")

def newest_first(query):
    return query.order_by(Post.created_at.desc(), Post.id.desc())

def paginate(query, page: int, limit: int) -> Tuple[List, int]:
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total

def list_posts(
    db: Session,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Post], int]:
    """Get published posts, newest first, with the total before paging"""
    logger.info(f"Listing posts category={category} tag={tag} page={page} limit={limit}")
    query = _published(db)
    if category:
        query = query.filter(Post.category == category)
    if tag:
        query = query.filter(Post.id.in_(select(PostTag.post_id).where(PostTag.tag == tag)))
    return paginate(newest_first(query), page, limit)

def get_authors(db: Session, author_ids: Iterable[str]) -> Dict[str, User]:
    ids = set(author_ids)
    if not ids:
        return {}
    return {user.id: user for user in db.query(User).filter(User.id.in_(ids)).all()}

def to_post_schema(post: Post, authors: Dict[str, User]) -> PostSchema:
    schema = PostSchema.model_validate(post)
    schema.author = author_view(authors.get(post.author_id), post.author_id)
    return schema

def with_authors(db: Session, posts: List[Post]) -> List[PostSchema]:
    authors = get_authors(db, (post.author_id for post in posts))
    return [to_post_schema(post, authors) for post in posts]

def create_post(db: Session, post_in: PostCreate, author_id: str) -> Post:
    """Create new post"""
    if not all(_require_text(v) for v in (post_in.title, post_in.content, post_in.category)) or not author_id:
        raise ValidationError("Thiếu thông tin bắt buộc: title, content, category, authorId")
    category = post_in.category.strip()
    _validate_choice(category, CATEGORIES, "Danh mục")
    status = post_in.status or "published"
    _validate_choice(status, STATUSES, "Trạng thái")

    ensure_user(db, author_id, post_in.author_name, post_in.author_avatar)

    content = post_in.content.strip()
    post = Post(
        id=str(uuid.uuid4()),
        title=post_in.title.strip(),
        content=content,
        excerpt=derive_excerpt(content, post_in.excerpt),
        category=category,
        images=_images_from(post_in) or [],
        author_id=author_id,
        status=status,
        views=0,
        likes=0,
        comments_count=0,
    )
    post.tags = normalize_tags(post_in.hashtags if post_in.hashtags is not None else post_in.tags)

    logger.info(f"Creating post for author ID: {author_id}")
    db.add(post)
    db.commit()
    db.refresh(post)
    return post

def _check_author(post: Post, requester_id: str, action: str) -> None:
    if post.author_id != requester_id:
        logger.warning(f"User {requester_id} tried to {action} post {post.id} owned by {post.author_id}")
        raise ForbiddenError(f"Bạn không có quyền {action} bài viết này")

def update_post(db: Session, post_id: str, post_in: PostUpdate, requester_id: str) -> Post:
    """Update post; only its author may do so"""
    post = get_post_or_404(db, post_id)
    _check_author(post, requester_id, "chỉnh sửa")

    update_data = post_in.model_dump(exclude_unset=True, exclude={"author_id"})

    for field in ("title", "content", "category"):
        if field in update_data and not _require_text(update_data[field]):
            raise ValidationError("Vui lòng điền đầy đủ thông tin bắt buộc")
    if "category" in update_data:
        _validate_choice(update_data["category"].strip(), CATEGORIES, "Danh mục")
    if update_data.get("status") is not None:
        _validate_choice(update_data["status"], STATUSES, "Trạng thái")

    logger.info(f"Updating post with ID: {post.id}")
    if "title" in update_data:
        post.title = update_data["title"].strip()
    if "category" in update_data:
        post.category = update_data["category"].strip()
    if "content" in update_data:
        post.content = update_data["content"].strip()
        post.excerpt = derive_excerpt(post.content, update_data.get("excerpt"))
    elif update_data.get("excerpt") is not None:
        post.excerpt = derive_excerpt(post.content, update_data["excerpt"])
    if update_data.get("status") is not None:
        post.status = update_data["status"]
    if "hashtags" in update_data or "tags" in update_data:
        raw = update_data.get("hashtags") if "hashtags" in update_data else update_data.get("tags")
        post.tags = normalize_tags(raw)
    images = _images_from(post_in)
    if images is not None:
        post.images = images

    db.commit()
    db.refresh(post)
    return post

def delete_post(db: Session, post_id: str, requester_id: str) -> Post:
    """
    Delete post and all associated comments and reactions
    """
    post = get_post_or_404(db, post_id)
    _check_author(post, requester_id, "xóa")

    logger.info(f"Deleting post with ID: {post.id}")
    # Delete associated reactions and comments first to maintain referential integrity
    db.query(Reaction).filter(Reaction.post_id == post.id).delete(synchronize_session=False)
    db.query(Comment).filter(Comment.post_id == post.id).delete(synchronize_session=False)

    # Tags go with the post through the relationship cascade
    db.delete(post)
    db.commit()
    return post

def increment_views(db: Session, post_id: str) -> bool:
    """Add one view; a lost increment is logged and otherwise ignored"""
    try:
        db.query(Post).filter(Post.id == post_id).update(
            {Post.views: Post.views + 1, Post.updated_at: Post.updated_at},
            synchronize_session=False,
        )
        db.commit()
        return True
    except SQLAlchemyError as e:
        logger.warning(f"Failed to increment views for post {post_id}: {e}")
        db.rollback()
        return False

def recompute_counters(db: Session, post_id: str) -> None:
    """
    Set likes and comments_count from the child tables.

    Runs inside the caller's transaction; the caller commits.
    """
    db.flush()
    likes = select(func.count(Reaction.id)).where(Reaction.post_id == post_id).scalar_subquery()
    comments = select(func.count(Comment.id)).where(Comment.post_id == post_id).scalar_subquery()
    db.query(Post).filter(Post.id == post_id).update(
        {Post.likes: likes, Post.comments_count: comments, Post.updated_at: Post.updated_at},
        synchronize_session=False,
    )

def get_related_posts(db: Session, post: Post, limit: int = 3) -> List[RelatedPost]:
    """Newest published posts in the same category, excluding the post itself"""
    related = (
        newest_first(_published(db).filter(Post.category == post.category, Post.id != post.id))
        .limit(limit)
        .all()
    )
    authors = get_authors(db, (p.author_id for p in related))
    return [
        RelatedPost(
            id=p.id,
            title=p.title,
            category=p.category,
            author=author_view(authors.get(p.author_id), p.author_id),
            created_at=p.created_at,
            likes=p.likes or 0,
        )
        for p in related
    ]

def get_post_author(db: Session, post: Post) -> Author:
    return author_view(db.query(User).filter(User.id == post.author_id).first(), post.author_id)
