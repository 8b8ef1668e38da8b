from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from noitro.core.schemas import Pagination
from noitro.deps import get_db
from noitro.modules.search.schemas.search import SearchFilters, SearchInfo, SearchResponse
from noitro.modules.search.services.search import search_posts

router = APIRouter()

@router.get("", response_model=SearchResponse)
def search(
    *,
    db: Session = Depends(get_db),
    q: str = Query(""),
    category: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    author: Optional[str] = Query(None),
    page: int = Query(1),
    limit: int = Query(10),
) -> Any:
    """Search published posts"""
    posts, total, page, limit = search_posts(
        db, q, category=category, tag=tag, author=author, page=page, limit=limit
    )
    return SearchResponse(
        posts=posts,
        pagination=Pagination.build(page, limit, total),
        search_info=SearchInfo(
            query=q,
            filters=SearchFilters(category=category, tag=tag, author=author),
            results_count=total,
        ),
    )
