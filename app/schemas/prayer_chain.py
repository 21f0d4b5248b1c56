# app/schemas/prayer_chain.py
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from app.schemas.user import UserSummary


class PrayerChainCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class PrayerChainUpdate(PrayerChainCreate):
    pass


class CommitToPrayRequest(BaseModel):
    chain_id: int
    pray_for_user_id: int


class PrayerCommitmentResponse(BaseModel):
    id: int
    chain_id: int
    member_id: int
    pray_for_user_id: int
    created_at: datetime
    pray_for_user: Optional[UserSummary] = None

    class Config:
        from_attributes = True


class ChainMemberResponse(BaseModel):
    id: int
    chain_id: int
    user_id: int
    created_at: datetime
    user: Optional[UserSummary] = None
    prayer_commitments: List[PrayerCommitmentResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True


class PrayerChainResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_by_user_id: int
    created_at: datetime
    updated_at: datetime
    members: List[ChainMemberResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True


class PrayerChainDetail(PrayerChainResponse):
    """Chain read model with every identity lookup resolved"""
    created_by: Optional[UserSummary] = None


class MessageResponse(BaseModel):
    message: str
