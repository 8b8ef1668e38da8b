from typing import Dict, List

from noitro.core.schemas import CamelModel, Envelope

class Totals(CamelModel):
    posts: int
    comments: int
    reactions: int

class TopPost(CamelModel):
    id: str
    title: str
    likes: int
    author: str

class Stats(CamelModel):
    total: Totals
    posts_by_category: Dict[str, int]
    recent_activity: Totals
    top_posts: List[TopPost]

class StatsResponse(Envelope):
    stats: Stats
