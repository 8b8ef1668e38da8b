from typing import Optional
from datetime import datetime

from noitro.core.schemas import CamelModel, Envelope

class Identity(CamelModel):
    """Anonymous identity returned to client"""
    id: str
    nickname: str
    avatar: str
    created_at: datetime

class IdentityRequest(CamelModel):
    session_id: Optional[str] = None
    nickname: Optional[str] = None
    avatar: Optional[str] = None

class IdentityOut(Identity):
    session_id: str

    @classmethod
    def from_identity(cls, identity: Identity) -> "IdentityOut":
        return cls(**identity.model_dump(), session_id=identity.id)

class IdentityResponse(Envelope):
    user: IdentityOut

class IssuedIdentityResponse(IdentityResponse):
    token: str
    persisted: bool
