# app/schemas/prayer.py
from typing import Optional
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field, field_validator


class PrayerStatusEnum(str, Enum):
    pending = "pending"
    answered = "answered"
    # Reserved; no operation moves a request into this state
    closed = "closed"


class PrayerRequestCreate(BaseModel):
    request: str = Field(..., min_length=1)
    is_anonymous: bool = False

    @field_validator("request")
    @classmethod
    def request_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("request must not be blank")
        return value


class PrayerRequestUpdate(PrayerRequestCreate):
    pass


class MarkAnsweredRequest(BaseModel):
    testimony: str = Field(..., min_length=1)


class PrayerRequestResponse(BaseModel):
    # The owning user id is deliberately absent
    id: int
    request: str
    is_anonymous: bool
    prayer_count: int
    status: PrayerStatusEnum
    answered_at: Optional[datetime] = None
    answer_testimony: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    is_mine: Optional[bool] = None

    class Config:
        from_attributes = True


class PrayerLogResponse(BaseModel):
    id: int
    prayer_request_id: int
    user_id: int
    prayed_at: datetime
    prayer_request: Optional[PrayerRequestResponse] = None

    class Config:
        from_attributes = True
