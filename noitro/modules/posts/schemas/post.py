from typing import Optional, List, Union
from datetime import datetime

from noitro.core.schemas import Author, CamelModel, Envelope, Pagination

class PostBase(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    excerpt: Optional[str] = None
    # Free-text hashtag string ("#nấuăn, #mẹo hay") or an explicit list
    hashtags: Optional[Union[str, List[str]]] = None
    tags: Optional[Union[str, List[str]]] = None
    image: Optional[str] = None
    images: Optional[List[str]] = None
    status: Optional[str] = None

class PostCreate(PostBase):
    author_id: Optional[str] = None
    author_name: Optional[str] = None
    author_avatar: Optional[str] = None

class PostUpdate(PostBase):
    author_id: Optional[str] = None

class Post(CamelModel):
    """Post model returned to client"""
    id: str
    title: str
    content: str
    excerpt: Optional[str] = None
    category: str
    tags: List[str] = []
    images: List[str] = []
    author_id: str
    status: str
    views: int = 0
    likes: int = 0
    comments_count: int = 0
    created_at: datetime
    updated_at: datetime
    author: Optional[Author] = None

class RelatedPost(CamelModel):
    id: str
    title: str
    category: str
    author: Author
    created_at: datetime
    likes: int = 0

class PostListData(CamelModel):
    posts: List[Post]
    pagination: Pagination

class PostListResponse(Envelope):
    data: PostListData

class PostDetailResponse(Envelope):
    post: Post
    related_posts: List[RelatedPost] = []

class PostResponse(Envelope):
    message: str
    post: Post
