from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from noitro.deps import get_db
from noitro.modules.stats.schemas.stats import StatsResponse
from noitro.modules.stats.services.stats import get_stats

router = APIRouter()

@router.get("", response_model=StatsResponse)
def read_stats(db: Session = Depends(get_db)) -> Any:
    """Aggregate counts for the dashboard"""
    return StatsResponse(stats=get_stats(db))
