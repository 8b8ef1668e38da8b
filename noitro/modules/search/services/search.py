from typing import List, Optional, Tuple
import logging

from sqlalchemy import exists, or_
from sqlalchemy.orm import Session

from noitro.core.exceptions import ValidationError
from noitro.modules.identity.models.user import User
from noitro.modules.identity.services.identity import author_view
from noitro.modules.posts.models.post import Post, PostTag
from noitro.modules.posts.services.post import get_authors, newest_first, paginate
from noitro.modules.search.schemas.search import SearchResult

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200
MAX_LIMIT = 50

def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"

def _preview(content: str) -> str:
    return content[:PREVIEW_LENGTH] + ("..." if len(content) > PREVIEW_LENGTH else "")

def search_posts(
    db: Session,
    q: str,
    category: Optional[str] = None,
    tag: Optional[str] = None,
    author: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[SearchResult], int, int, int]:
    """
    Case-insensitive substring search over title, content, category, tags and
    author nickname.

    Returns ``(results, total, page, limit)`` with page and limit clamped.
    """
    term = (q or "").strip()
    if not term:
        raise ValidationError("Vui lòng nhập từ khóa tìm kiếm")
    page = max(1, page)
    limit = min(MAX_LIMIT, max(1, limit))

    pattern = _like_pattern(term)
    tag_match = exists().where(PostTag.post_id == Post.id, PostTag.tag.ilike(pattern, escape="\\"))
    query = (
        db.query(Post)
        .outerjoin(User, User.id == Post.author_id)
        .filter(Post.status == "published")
        .filter(
            or_(
                Post.title.ilike(pattern, escape="\\"),
                Post.content.ilike(pattern, escape="\\"),
                Post.category.ilike(pattern, escape="\\"),
                tag_match,
                User.nickname.ilike(pattern, escape="\\"),
            )
        )
    )
    if category:
        query = query.filter(Post.category == category)
    if tag:
        query = query.filter(exists().where(PostTag.post_id == Post.id, PostTag.tag == tag))
    if author:
        query = query.filter(User.nickname.ilike(_like_pattern(author.strip()), escape="\\"))

    logger.info(f"Searching posts q={term!r} category={category} tag={tag} author={author}")
    posts, total = paginate(newest_first(query), page, limit)

    authors = get_authors(db, (p.author_id for p in posts))
    results = [
        SearchResult(
            id=post.id,
            title=post.title,
            content=_preview(post.content),
            category=post.category,
            tags=post.tags,
            author=author_view(authors.get(post.author_id), post.author_id),
            created_at=post.created_at,
            updated_at=post.updated_at or post.created_at,
            likes=post.likes or 0,
            views=post.views or 0,
        )
        for post in posts
    ]
    return results, total, page, limit
