from typing import Optional, List
from datetime import datetime

from noitro.core.schemas import Author, CamelModel, Envelope, Pagination

class CommentCreate(CamelModel):
    post_id: Optional[str] = None
    content: Optional[str] = None
    author_id: Optional[str] = None
    author_name: Optional[str] = None
    author_avatar: Optional[str] = None

class Comment(CamelModel):
    """Comment model returned to client"""
    id: str
    content: str
    post_id: str
    author_id: str
    likes: int = 0
    created_at: datetime
    updated_at: datetime
    author: Optional[Author] = None

class CommentListResponse(Envelope):
    comments: List[Comment]
    pagination: Pagination

class CommentResponse(Envelope):
    message: str
    comment: Comment
