from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey, JSON, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from noitro.db.session import Base, utcnow

CATEGORIES = ("cooking", "home", "baby", "beauty", "tips")
STATUSES = ("draft", "published", "archived")

class Post(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(Text)
    category = Column(String, nullable=False, index=True)
    images = Column(JSON, default=list)
    author_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String, default="published", nullable=False)

    # Denormalized counters, written only by recompute_counters / increment_views
    views = Column(Integer, default=0, nullable=False)
    likes = Column(Integer, default=0, nullable=False)
    comments_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    tag_rows = relationship(
        "PostTag",
        order_by="PostTag.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def tags(self):
        return [row.tag for row in self.tag_rows]

    @tags.setter
    def tags(self, values):
        # Existing rows are reused so a kept tag is never inserted twice
        existing = {row.tag: row for row in self.tag_rows}
        rows = []
        for tag in values:
            if any(row.tag == tag for row in rows):
                continue
            row = existing.get(tag) or PostTag(tag=tag)
            row.position = len(rows)
            rows.append(row)
        self.tag_rows = rows

class PostTag(Base):
    """One hashtag of a post; position keeps the author's order."""
    __tablename__ = "post_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    tag = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("post_id", "tag", name="uq_post_tags_post_tag"),
        Index("ix_post_tags_tag", "tag"),
    )
