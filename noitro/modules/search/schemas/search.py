from typing import Optional, List
from datetime import datetime

from noitro.core.schemas import Author, CamelModel, Envelope, Pagination

class SearchResult(CamelModel):
    id: str
    title: str
    # Truncated to 200 characters
    content: str
    category: str
    tags: List[str]
    author: Author
    created_at: datetime
    updated_at: datetime
    likes: int = 0
    views: int = 0

class SearchFilters(CamelModel):
    category: Optional[str] = None
    tag: Optional[str] = None
    author: Optional[str] = None

class SearchInfo(CamelModel):
    query: str
    filters: SearchFilters
    results_count: int

class SearchResponse(Envelope):
    posts: List[SearchResult]
    pagination: Pagination
    search_info: SearchInfo
