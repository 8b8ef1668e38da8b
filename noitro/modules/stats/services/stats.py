from datetime import timedelta
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from noitro.db.session import utcnow
from noitro.modules.identity.services.identity import ANONYMOUS_NICKNAME
from noitro.modules.identity.models.user import User
from noitro.modules.posts.models.post import Post
from noitro.modules.posts.comments.models.comment import Comment
from noitro.modules.posts.reactions.models.reaction import Reaction
from noitro.modules.stats.schemas.stats import Stats, TopPost, Totals

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=7)
TOP_POSTS = 5

def _count(db: Session, model, since=None) -> int:
    query = db.query(func.count(model.id))
    if since is not None:
        query = query.filter(model.created_at >= since)
    return query.scalar() or 0

def get_stats(db: Session) -> Stats:
    """Totals, category breakdown, last-7-days activity and most liked posts"""
    since = utcnow() - RECENT_WINDOW

    posts_by_category = dict(
        db.query(Post.category, func.count(Post.id)).group_by(Post.category).all()
    )

    top = (
        db.query(Post.id, Post.title, Post.likes, User.nickname)
        .outerjoin(User, User.id == Post.author_id)
        .order_by(Post.likes.desc(), Post.created_at.desc())
        .limit(TOP_POSTS)
        .all()
    )

    return Stats(
        total=Totals(
            posts=_count(db, Post),
            comments=_count(db, Comment),
            reactions=_count(db, Reaction),
        ),
        posts_by_category=posts_by_category,
        recent_activity=Totals(
            posts=_count(db, Post, since),
            comments=_count(db, Comment, since),
            reactions=_count(db, Reaction, since),
        ),
        top_posts=[
            TopPost(id=post_id, title=title, likes=likes or 0, author=nickname or ANONYMOUS_NICKNAME)
            for post_id, title, likes, nickname in top
        ],
    )
