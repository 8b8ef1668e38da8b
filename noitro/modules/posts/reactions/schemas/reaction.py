from typing import Dict, Optional
from datetime import datetime

from noitro.core.schemas import CamelModel, Envelope

class ReactionToggle(CamelModel):
    post_id: Optional[str] = None
    # userId and authorId are both accepted for the reacting user
    user_id: Optional[str] = None
    author_id: Optional[str] = None
    type: str = "LIKE"

class Reaction(CamelModel):
    """Reaction model returned to client"""
    id: str
    type: str
    post_id: str
    author_id: str
    created_at: datetime

class ToggleResult(CamelModel):
    added: bool
    reaction: Optional[Reaction] = None
    likes_count: int

class ToggleResponse(Envelope):
    message: str
    action: str
    added: bool
    reaction: Optional[Reaction] = None
    likes_count: int

class ReactionStatus(Envelope):
    post_id: str
    total_count: int
    reaction_counts: Dict[str, int]
    user_reaction: Optional[Reaction] = None
    has_user_reacted: bool
