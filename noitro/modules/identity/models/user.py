from sqlalchemy import Boolean, Column, String, DateTime

from noitro.db.session import Base, utcnow

class User(Base):
    """Anonymous identity mirrored from the browser."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    nickname = Column(String, nullable=False)
    avatar = Column(String, nullable=True)
    is_anonymous = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
