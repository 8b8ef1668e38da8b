from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint

from noitro.db.session import Base, utcnow

class Reaction(Base):
    __tablename__ = "reactions"

    id = Column(String, primary_key=True, index=True)
    type = Column(String, nullable=False, default="LIKE")
    author_id = Column(String, ForeignKey("users.id"), nullable=False)
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    # One reaction per user per post; concurrent toggles collide here
    __table_args__ = (
        UniqueConstraint("post_id", "author_id", name="uq_reaction_post_author"),
    )
